from __future__ import annotations

import random
import re
import string
from typing import Optional

ASTERISK_PREFIX = "asterisk-of-wildcard"
SUFFIX_LENGTH = 8

_ALPHABET = string.ascii_letters + string.digits


class ProbeNamer:
    """
    Turns wildcard names into concrete names that can be queried.

    Pass a seeded random.Random for reproducible names; the default source is
    random.SystemRandom.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.SystemRandom()

    def to_probe_name(self, declared_name: str) -> str:
        if "*" not in declared_name:
            return declared_name
        suffix = "".join(self.rng.sample(_ALPHABET, SUFFIX_LENGTH))
        return declared_name.replace("*", f"{ASTERISK_PREFIX}-{suffix}")


_default_namer = ProbeNamer()


def to_probe_name(declared_name: str) -> str:
    return _default_namer.to_probe_name(declared_name)


def wildcard_pattern(wildcard_name: str) -> re.Pattern:
    body = re.escape(_strip_dot(wildcard_name)).replace(r"\*", ".+")
    return re.compile(rf"\A{body}\Z")


def wildcard_matches(wildcard_name: str, name: str) -> bool:
    """Glob match: `*` is one or more characters, everything else literal and case-sensitive."""
    return wildcard_pattern(wildcard_name).match(_strip_dot(name)) is not None


def _strip_dot(name: str) -> str:
    return name[:-1] if name.endswith(".") else name
