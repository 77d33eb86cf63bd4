from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from reporting.targets import InvalidRecordName, normalize_target, require_record_name
from zonecheck.models import DeclaredRecord
from .models import HostedZone, ZoneConfig

DEFAULT_TTL = 300
ALIAS_DEFAULT_TTL = 60

# Served and rewritten by the DNS provider itself; never compared.
SKIPPED_TYPES = {"SOA"}

logger = logging.getLogger("zonecheck")


class ConfigError(ValueError):
    """Raised when a declared zone configuration cannot be used."""


def load_config(path: str, zone: Optional[str] = None) -> ZoneConfig:
    """
    Read a zone configuration file (.yaml/.yml via PyYAML, anything else as JSON).

    Args:
        path: File to read.
        zone: Zone name for bare Route53 exports that carry no HostedZones wrapper.
    """
    p = Path(path)
    try:
        with open(p, "r", encoding="utf-8") as f:
            if p.suffix.lower() in (".yaml", ".yml"):
                doc = yaml.safe_load(f)
            else:
                doc = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot parse {path}: {e}")

    return parse_config(doc, zone=zone)


def parse_config(doc: Any, zone: Optional[str] = None) -> ZoneConfig:
    if not isinstance(doc, dict) or not doc:
        raise ConfigError("Zone configuration must be a non-empty mapping")

    if "hosted_zones" in doc:
        zones = [_native_zone(z, i) for i, z in enumerate(_as_list(doc["hosted_zones"], "hosted_zones"))]
    elif "HostedZones" in doc:
        zones = [_route53_zone(z, i) for i, z in enumerate(_as_list(doc["HostedZones"], "HostedZones"))]
    elif "ResourceRecordSets" in doc:
        zones = [_route53_zone({"Name": zone or _infer_zone(doc), **doc}, 0)]
    else:
        raise ConfigError("Expected 'hosted_zones', 'HostedZones' or 'ResourceRecordSets' at the top level")

    config = ZoneConfig(hosted_zones=zones)
    logger.debug(f"Loaded {len(zones)} hosted zone(s), {config.record_count()} record set(s)")
    return config


# ----------------------------
# Native layout
# ----------------------------

def _native_zone(raw: Any, index: int) -> HostedZone:
    if not isinstance(raw, dict) or not raw.get("name"):
        raise ConfigError(f"hosted_zones[{index}]: a zone needs a name")

    name = normalize_target(str(raw["name"]))
    zone = HostedZone(name=name, ttl=_int(raw.get("ttl", DEFAULT_TTL), f"{name} ttl"))

    for i, rr in enumerate(_as_list(raw.get("rrsets") or [], f"{name} rrsets")):
        where = f"{name} rrsets[{i}]"
        if not isinstance(rr, dict):
            raise ConfigError(f"{where}: expected a mapping")

        alias_target = rr.get("alias_target")
        values = rr.get("values", rr.get("value"))
        record = _record(
            zone,
            where,
            name=rr.get("name", "@"),
            rtype=rr.get("type"),
            ttl=rr.get("ttl"),
            values=None if values is None else [values] if not isinstance(values, list) else values,
            alias_target=alias_target,
            set_identifier=rr.get("set_identifier"),
        )
        if record:
            zone.records.append(record)
    return zone


# ----------------------------
# Route53 list-resource-record-sets export
# ----------------------------

def _route53_zone(raw: Any, index: int) -> HostedZone:
    if not isinstance(raw, dict) or not raw.get("Name"):
        raise ConfigError(f"HostedZones[{index}]: a zone needs a Name")

    name = normalize_target(str(raw["Name"]))
    zone = HostedZone(name=name)

    for i, rr in enumerate(_as_list(raw.get("ResourceRecordSets") or [], f"{name} ResourceRecordSets")):
        where = f"{name} ResourceRecordSets[{i}]"
        if not isinstance(rr, dict):
            raise ConfigError(f"{where}: expected a mapping")

        alias = rr.get("AliasTarget") or {}
        resource_records = rr.get("ResourceRecords")
        record = _record(
            zone,
            where,
            name=rr.get("Name", "@"),
            rtype=rr.get("Type"),
            ttl=rr.get("TTL"),
            values=None if resource_records is None else [
                r.get("Value") if isinstance(r, dict) else None
                for r in _as_list(resource_records, f"{where} ResourceRecords")
            ],
            alias_target=alias.get("DNSName"),
            set_identifier=rr.get("SetIdentifier"),
        )
        if record:
            zone.records.append(record)
    return zone


def _infer_zone(doc: Dict[str, Any]) -> str:
    for rr in doc.get("ResourceRecordSets") or []:
        if isinstance(rr, dict) and rr.get("Type") == "SOA" and rr.get("Name"):
            return str(rr["Name"])
    raise ConfigError("Bare ResourceRecordSets export without an SOA record: pass the zone name explicitly")


# ----------------------------
# Shared helpers
# ----------------------------

def _record(
    zone: HostedZone,
    where: str,
    name: Any,
    rtype: Any,
    ttl: Any,
    values: Optional[List[Any]],
    alias_target: Any,
    set_identifier: Any,
) -> Optional[DeclaredRecord]:
    if not rtype:
        raise ConfigError(f"{where}: missing record type")
    rtype = str(rtype).strip().upper()
    if rtype in SKIPPED_TYPES:
        logger.debug(f"{where}: skipping {rtype} record")
        return None

    try:
        owner = require_record_name(str(name), zone.name)
    except InvalidRecordName as e:
        raise ConfigError(f"{where}: {e}")

    if (values is None) == (not alias_target):
        raise ConfigError(f"{where}: {owner} {rtype} needs exactly one of values / alias_target")

    if alias_target:
        return DeclaredRecord(
            name=owner,
            type=rtype,
            ttl=_int(ttl if ttl is not None else ALIAS_DEFAULT_TTL, f"{where} ttl"),
            alias_target=str(alias_target).strip(),
            set_identifier=set_identifier,
        )

    if not values or any(v is None for v in values):
        raise ConfigError(f"{where}: {owner} {rtype} has an empty value list")

    return DeclaredRecord(
        name=owner,
        type=rtype,
        ttl=_int(ttl if ttl is not None else zone.ttl, f"{where} ttl"),
        values=tuple(str(v) for v in values),
        set_identifier=set_identifier,
    )


def _as_list(value: Any, where: str) -> List[Any]:
    if not isinstance(value, list):
        raise ConfigError(f"{where}: expected a list")
    return value


def _int(value: Any, where: str) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{where}: not an integer: {value!r}")
    if n < 0:
        raise ConfigError(f"{where}: must not be negative")
    return n
