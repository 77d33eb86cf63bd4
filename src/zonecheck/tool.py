from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .alias import AliasVerifier, RetryPolicy, S3_RETRY
from .models import AsteriskAnswerSet, DeclaredRecord, GroupOutcome, RecordKey, RunReport
from .names import ProbeNamer
from .normalize import normalize
from .resolver import DNSQueryCapability, get_resolver
from .validator import RecordValidator

RecordGroups = Dict[RecordKey, List[DeclaredRecord]]


class ZoneTester:
    """
    Reconcile a declared zone configuration with live DNS.

    Order of work:
      1) group declared records by (name, type)
      2) split wildcard groups from literal groups
      3) probe every wildcard once to learn what it answers
      4) validate wildcard groups, then literal groups (with collision checks)
      5) aggregate into a RunReport
    """

    def __init__(
        self,
        query: DNSQueryCapability,
        namer: Optional[ProbeNamer] = None,
        alias_verifier: Optional[AliasVerifier] = None,
        logger: Optional[logging.Logger] = None,
        on_group: Optional[Callable[[GroupOutcome], None]] = None,
        retry: RetryPolicy = S3_RETRY,
    ) -> None:
        self.query = query
        self.logger = logger or logging.getLogger("zonecheck")
        self.namer = namer or ProbeNamer()
        self.alias_verifier = alias_verifier or AliasVerifier(query, retry=retry, logger=self.logger)
        self.validator = RecordValidator(query, namer=self.namer, alias_verifier=self.alias_verifier, logger=self.logger)
        self.on_group = on_group

    @classmethod
    def from_options(
        cls,
        debug: bool = False,
        nameservers: Optional[Sequence[str]] = None,
        timeout: float = 5.0,
        lifetime: float = 10.0,
        logger: Optional[logging.Logger] = None,
        on_group: Optional[Callable[[GroupOutcome], None]] = None,
    ) -> "ZoneTester":
        logger = logger or logging.getLogger("zonecheck")
        query = get_resolver(debug=debug, nameservers=nameservers, timeout=timeout, lifetime=lifetime, logger=logger)
        return cls(query, logger=logger, on_group=on_group)

    # ----------------------------
    # Public entrypoint
    # ----------------------------

    def test(self, config: Any) -> RunReport:
        records = self.fetch_records(config)
        report = RunReport(total_groups=len(records))

        wildcard_groups, literal_groups = self.partition(records)
        self.logger.info(
            f"Checking {len(records)} record groups ({len(wildcard_groups)} wildcard, {len(literal_groups)} literal)"
        )

        asterisk_answers = self.collect_asterisk_answers(wildcard_groups)

        for key, rrs in wildcard_groups.items():
            report.merge(self._check_group(key, rrs, None))

        for key, rrs in literal_groups.items():
            report.merge(self._check_group(key, rrs, asterisk_answers))

        self.logger.info(f"{report.total_groups} records, {report.failed_groups} failures")
        return report

    # ----------------------------
    # Steps
    # ----------------------------

    @staticmethod
    def fetch_records(config: Any) -> RecordGroups:
        """Flatten hosted zones into (name, type) -> [DeclaredRecord], keeping declaration order."""
        groups: RecordGroups = {}
        for record in _iter_declared(config):
            groups.setdefault(record.key, []).append(record)
        return groups

    @staticmethod
    def partition(records: RecordGroups) -> Tuple[RecordGroups, RecordGroups]:
        wildcard: RecordGroups = {}
        literal: RecordGroups = {}
        for key, rrs in records.items():
            (wildcard if key.is_wildcard else literal)[key] = rrs
        return wildcard, literal

    def collect_asterisk_answers(self, wildcard_groups: RecordGroups) -> AsteriskAnswerSet:
        answers: AsteriskAnswerSet = {}
        for key in wildcard_groups:
            probe = self.namer.to_probe_name(key.name)
            try:
                live = self.query.query(probe, key.type)
            except Exception as e:
                # A wildcard that cannot be probed simply has no entry.
                self.logger.debug(f"Wildcard probe {probe} {key.type} failed: {e}")
                continue
            answers[key] = frozenset(normalize(key.type, a.value, resolved=True) for a in live)
        return answers

    def _check_group(
        self,
        key: RecordKey,
        rrs: List[DeclaredRecord],
        asterisk_answers: Optional[AsteriskAnswerSet],
    ) -> GroupOutcome:
        try:
            outcome = self.validator.validate(key, rrs, asterisk_answers)
        except Exception as e:
            self.logger.error(f"Error validating {key.label()}: {type(e).__name__}: {e}")
            outcome = GroupOutcome(key=key, passed=False)
            outcome.warn(f"{key.label()}: {type(e).__name__}: {e}", "GROUP_CHECK_CRASHED")

        if outcome.passed:
            self.logger.debug(f"PASS: {key.label()}")
        else:
            self.logger.debug(f"FAIL: {key.label()}")

        if self.on_group:
            try:
                self.on_group(outcome)
            except Exception as e:
                self.logger.error(f"Progress callback failed for {key.label()}: {type(e).__name__}: {e}")
        return outcome


def _iter_declared(config: Any) -> Iterable[DeclaredRecord]:
    if hasattr(config, "hosted_zones"):
        for zone in config.hosted_zones:
            yield from zone.records
    elif isinstance(config, Mapping):
        for records in config.values():
            yield from records
    else:
        yield from config
