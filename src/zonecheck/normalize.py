"""
Canonical forms of record values, used on both sides of a comparison.

    NS, PTR, MX, CNAME  lowercase, trailing dots and blanks removed
    TXT, SPF            quoted segments joined, whitespace collapsed
    everything else     stripped
"""

from __future__ import annotations

import re
from typing import Iterable, List

HOSTNAME_TYPES = frozenset({"NS", "PTR", "MX", "CNAME"})
TEXT_TYPES = frozenset({"TXT", "SPF"})

_QUOTED_SEGMENT = re.compile(r'"([^"]+)"')
_TRAILING_DOTS = re.compile(r"[.\s]+\Z")


def normalize(rtype: str, raw_value: str, resolved: bool = False) -> str:
    """
    Canonicalize one value of the given record type.

    `resolved` marks a value that came back from a live query; TXT/SPF answers
    are then already flattened and only need whitespace cleanup.
    """
    rtype = rtype.upper()
    value = (raw_value or "").strip()

    if rtype in HOSTNAME_TYPES:
        return _TRAILING_DOTS.sub("", value.lower())

    if rtype in TEXT_TYPES:
        if not resolved:
            segments = _QUOTED_SEGMENT.findall(value)
            if segments:
                value = "".join(segments)
        return " ".join(value.split())

    return value


def normalize_values(rtype: str, values: Iterable[str], resolved: bool = False) -> List[str]:
    return sorted(normalize(rtype, v, resolved=resolved) for v in values)
