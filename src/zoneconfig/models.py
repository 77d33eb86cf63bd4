from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from zonecheck.models import DeclaredRecord


@dataclass
class HostedZone:
    name: str
    ttl: int = 300  # default for record sets that do not declare one
    records: List[DeclaredRecord] = field(default_factory=list)


@dataclass
class ZoneConfig:
    """Declared configuration: hosted zones and their record sets."""

    hosted_zones: List[HostedZone] = field(default_factory=list)

    def record_count(self) -> int:
        return sum(len(z.records) for z in self.hosted_zones)

