from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, FrozenSet, List, Optional, Tuple


class QueryFailure(Exception):
    """A live DNS query did not produce an answer list (NXDOMAIN, timeout, transport error)."""

    def __init__(self, name: str, rtype: str, message: str) -> None:
        super().__init__(message)
        self.name = name
        self.rtype = rtype
        self.message = message


@dataclass(frozen=True)
class RecordKey:
    name: str
    type: str

    @property
    def is_wildcard(self) -> bool:
        return "*" in self.name

    def label(self) -> str:
        return f"{self.name} {self.type}"


@dataclass(frozen=True)
class DeclaredRecord:
    """
    One declared record set.

    Exactly one of `values` (literal rdata strings, all sharing `ttl`) or
    `alias_target` (hostname of a managed endpoint) is set.
    """

    name: str
    type: str
    ttl: int = 300
    values: Optional[Tuple[str, ...]] = None
    alias_target: Optional[str] = None
    set_identifier: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.values is None) == (self.alias_target is None):
            raise ValueError(f"{self.name} {self.type}: exactly one of values / alias_target must be set")
        if self.values is not None and not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))

    @property
    def key(self) -> RecordKey:
        return RecordKey(self.name, self.type)

    @property
    def is_alias(self) -> bool:
        return self.alias_target is not None


@dataclass(frozen=True)
class LiveAnswer:
    value: str
    ttl: int


# Wildcard key -> normalized values seen when probing it with a concrete name.
AsteriskAnswerSet = Dict[RecordKey, FrozenSet[str]]


@dataclass
class Finding:
    name: str
    type: str
    issue: str
    severity: str = "warning"  # warning|error
    detail: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GroupOutcome:
    """Result of validating one record group; merged into the RunReport by the engine."""

    key: RecordKey
    passed: bool = False
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    findings: List[Finding] = field(default_factory=list)

    def warn(self, message: str, issue: str, **data: Any) -> None:
        self.warnings.append(message)
        self.findings.append(
            Finding(name=self.key.name, type=self.key.type, issue=issue, severity="warning", detail=message, data=data)
        )

    def query_failed(self, failure: QueryFailure) -> None:
        self.warn(
            f"{failure.name} {failure.rtype}: {failure.message}",
            "QUERY_FAILURE",
            qname=failure.name,
            qtype=failure.rtype,
        )


@dataclass
class RunReport:
    total_groups: int = 0
    failed_groups: int = 0
    error_messages: List[str] = field(default_factory=list)
    warning_messages: List[str] = field(default_factory=list)
    outcomes: List[GroupOutcome] = field(default_factory=list)

    @property
    def findings(self) -> List[Finding]:
        return [f for o in self.outcomes for f in o.findings]

    @property
    def passed(self) -> bool:
        return self.failed_groups == 0

    def summary(self) -> Tuple[int, int]:
        return self.total_groups, self.failed_groups

    def merge(self, outcome: GroupOutcome) -> None:
        self.outcomes.append(outcome)
        if not outcome.passed:
            self.failed_groups += 1
        self.error_messages.extend(outcome.errors)
        self.warning_messages.extend(outcome.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_groups": self.total_groups,
            "failed_groups": self.failed_groups,
            "error_messages": list(self.error_messages),
            "warning_messages": list(self.warning_messages),
            "groups": [
                {"name": o.key.name, "type": o.key.type, "passed": o.passed} for o in self.outcomes
            ],
            "findings": [f.to_dict() for f in self.findings],
        }
