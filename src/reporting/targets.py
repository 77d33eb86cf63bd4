import re

# Invalid user input base error
class InvalidTarget(ValueError):
    """Base error for invalid user input targets."""

# Invalid record name in a declared zone
class InvalidRecordName(InvalidTarget):
    """Raised when a declared record name is not a usable DNS owner name."""

# Normalize the user input by trimming white space, removing the trailing dot and turning it into lower case.
# Route53 exports escape "*" as "\052"; turn it back into a wildcard label.
def normalize_target(raw: str) -> str:
    return (raw or "").strip().replace("\\052", "*").rstrip(".").lower()

# One label: letters/digits/hyphens (optionally "_" led, as in _dmarc or _acme-challenge), or a lone "*"
_LABEL = re.compile(r"^_?[a-z0-9_](?:[a-z0-9_-]{0,61}[a-z0-9])?$")
def is_record_name(s: str) -> bool:
    if not s or len(s) > 253 or any(c.isspace() for c in s):
        return False

    labels = s.split(".")
    if any(label == "" or len(label) > 63 for label in labels):
        return False

    return all(label == "*" or _LABEL.match(label) for label in labels)

# Expand "@" and relative names against the zone, then check the format
def qualify(raw: str, zone: str) -> str:
    absolute = (raw or "").strip().endswith(".")
    name = normalize_target(raw)
    origin = normalize_target(zone)
    if name in ("", "@"):
        return origin
    if origin and not absolute and name != origin and not name.endswith("." + origin):
        return f"{name}.{origin}"
    return name

# normalizes text and checks to see if it is a record owner name
def require_record_name(raw: str, zone: str = "") -> str:
    s = qualify(raw, zone) if zone else normalize_target(raw)
    if not is_record_name(s):
        raise InvalidRecordName(f"Invalid record name format: {raw!r}")
    return s
