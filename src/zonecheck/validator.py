from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .alias import AliasVerifier
from .models import AsteriskAnswerSet, DeclaredRecord, Finding, GroupOutcome, LiveAnswer, QueryFailure, RecordKey
from .names import ProbeNamer, wildcard_matches
from .normalize import normalize, normalize_values
from .resolver import DNSQueryCapability

# Aliases resolve through a short-TTL indirection whatever TTL is declared.
ALIAS_TTL = 60


@dataclass(frozen=True)
class CandidateResult:
    matched: bool
    issue: Optional[str]  # VALUE_MISMATCH | TTL_EXCEEDED when not matched
    expected: str
    actual: str


class RecordValidator:
    """
    Checks one (name, type) group of declared records against live DNS.

    The group passes if any declared candidate matches the live answers, both
    in value (or alias protocol) and TTL (every live TTL <= expected).
    """

    def __init__(
        self,
        query: DNSQueryCapability,
        namer: Optional[ProbeNamer] = None,
        alias_verifier: Optional[AliasVerifier] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.query = query
        self.namer = namer or ProbeNamer()
        self.logger = logger or logging.getLogger("zonecheck")
        self.alias_verifier = alias_verifier or AliasVerifier(query, logger=self.logger)

    def validate(
        self,
        key: RecordKey,
        candidates: Sequence[DeclaredRecord],
        asterisk_answers: Optional[AsteriskAnswerSet] = None,
    ) -> GroupOutcome:
        """
        Validate a group. `asterisk_answers` is given for literal groups only and
        enables the wildcard-collision warnings.
        """
        outcome = GroupOutcome(key=key)
        probe = self.namer.to_probe_name(key.name)

        self.logger.debug(f"Check DNS {probe} {key.type}")

        try:
            answers = self.query.query(probe, key.type)
        except QueryFailure as e:
            outcome.query_failed(e)
            return outcome

        pairs = sorted((normalize(key.type, a.value, resolved=True), a.ttl) for a in answers)
        actual_values = [v for v, _ in pairs]
        actual_message = ",".join(f"{v}({t})" for v, t in pairs)

        mismatches: List[CandidateResult] = []
        for record in candidates:
            result = self._check_candidate(outcome, probe, record, answers, actual_values, actual_message)
            if result.matched:
                outcome.passed = True
                break
            mismatches.append(result)

        if not outcome.passed:
            lines = [f"{key.label()}:"]
            for m in mismatches:
                lines.append(f"  expected={m.expected}")
                lines.append(f"  actual={m.actual}")
                outcome.findings.append(
                    Finding(
                        name=key.name,
                        type=key.type,
                        issue=m.issue or "VALUE_MISMATCH",
                        severity="error",
                        detail=f"expected={m.expected} actual={m.actual}",
                        data={"expected": m.expected, "actual": m.actual},
                    )
                )
            outcome.errors.append("\n".join(lines))

        if asterisk_answers is not None:
            self._check_collisions(outcome, key, actual_values, asterisk_answers)

        return outcome

    def _check_candidate(
        self,
        outcome: GroupOutcome,
        probe: str,
        record: DeclaredRecord,
        answers: List[LiveAnswer],
        actual_values: List[str],
        actual_message: str,
    ) -> CandidateResult:
        rtype = record.type

        if record.is_alias:
            expected_ttl = ALIAS_TTL
            expected_message = f"{record.alias_target}({expected_ttl})"
        else:
            expected_ttl = int(record.ttl)
            expected_values = normalize_values(rtype, record.values or ())
            expected_message = ",".join(f"{v}({expected_ttl})" for v in expected_values)

        self.logger.debug(f"{probe} {rtype}\n  expected={expected_message}\n  actual={actual_message}")

        if record.is_alias:
            same = self.alias_verifier.verify(outcome, probe, rtype, record.alias_target, answers).matched
        else:
            same = expected_values == actual_values

        if not same:
            return CandidateResult(False, "VALUE_MISMATCH", expected_message, actual_message)

        if not all(a.ttl <= expected_ttl for a in answers):
            return CandidateResult(False, "TTL_EXCEEDED", expected_message, actual_message)

        return CandidateResult(True, None, expected_message, actual_message)

    @staticmethod
    def _check_collisions(
        outcome: GroupOutcome,
        key: RecordKey,
        actual_values: List[str],
        asterisk_answers: AsteriskAnswerSet,
    ) -> None:
        observed = set(actual_values)
        for wildcard_key, wildcard_values in asterisk_answers.items():
            if not wildcard_matches(wildcard_key.name, key.name):
                continue
            shared: Tuple[str, ...] = tuple(sorted(observed & wildcard_values))
            if shared:
                outcome.warn(
                    f"{key.label()}: same as `{wildcard_key.name}`",
                    "WILDCARD_COLLISION",
                    wildcard=wildcard_key.name,
                    shared_values=list(shared),
                )
