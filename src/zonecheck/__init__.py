"""
Declared-vs-live DNS record reconciliation.

Compares a declared zone configuration (literal and alias record sets) with
what public DNS resolves right now, and reports drift, TTL violations and
wildcard collisions.

Public entrypoint: ZoneTester
"""

from .models import DeclaredRecord, QueryFailure, RecordKey, RunReport
from .tool import ZoneTester

__all__ = ["ZoneTester", "DeclaredRecord", "RecordKey", "RunReport", "QueryFailure"]
