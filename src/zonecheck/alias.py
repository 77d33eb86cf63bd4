"""
Verification of alias records that point at managed AWS endpoints.

The forward records of these endpoints are provider-internal and rotate, so
each protocol checks indirect evidence instead of exact values:

  ELB          every answer reverse-resolves into *.compute.amazonaws.com.
  S3 website   answers share their first two octets with the endpoint's own A records
  CloudFront   every answer reverse-resolves into *.cloudfront.net.

Targets matching none of the patterns cannot be verified; they are reported
as a warning and counted as a match.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .models import GroupOutcome, LiveAnswer, QueryFailure
from .resolver import DNSQueryCapability


class AliasProtocol(Enum):
    ELB = "elb"
    S3_WEBSITE = "s3_website"
    CLOUDFRONT = "cloudfront"
    UNVERIFIABLE = "unverifiable"


# Tested in order; the first match wins.
ALIAS_PROTOCOLS: Tuple[Tuple[re.Pattern, AliasProtocol], ...] = (
    (re.compile(r"\.elb\.amazonaws\.com\Z"), AliasProtocol.ELB),
    (re.compile(r"\As3-website-[^.]+\.amazonaws\.com\Z"), AliasProtocol.S3_WEBSITE),
    (re.compile(r"\.cloudfront\.net\Z"), AliasProtocol.CLOUDFRONT),
)

PTR_SUFFIXES = {
    AliasProtocol.ELB: ".compute.amazonaws.com.",
    AliasProtocol.CLOUDFRONT: ".cloudfront.net.",
}


def classify(alias_target: str) -> AliasProtocol:
    target = (alias_target or "").strip().lower()
    if target.endswith("."):
        target = target[:-1]
    for pattern, protocol in ALIAS_PROTOCOLS:
        if pattern.search(target):
            return protocol
    return AliasProtocol.UNVERIFIABLE


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed-backoff retry: up to `max_attempts` calls, `backoff` seconds apart."""

    max_attempts: int = 3
    backoff: float = 3.0
    sleep: Callable[[float], None] = time.sleep

    def run(self, attempt: Callable[[int], bool], on_retry: Optional[Callable[[int], None]] = None) -> bool:
        for n in range(self.max_attempts):
            if n:
                self.sleep(self.backoff)
                if on_retry:
                    on_retry(n)
            if attempt(n):
                return True
        return False


S3_RETRY = RetryPolicy(max_attempts=3, backoff=3.0)


@dataclass(frozen=True)
class AliasCheck:
    matched: bool
    protocol: AliasProtocol


class AliasVerifier:
    def __init__(
        self,
        query: DNSQueryCapability,
        retry: RetryPolicy = S3_RETRY,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.query = query
        self.retry = retry
        self.logger = logger or logging.getLogger("zonecheck")

    def verify(
        self,
        outcome: GroupOutcome,
        name: str,
        rtype: str,
        alias_target: str,
        answers: List[LiveAnswer],
    ) -> AliasCheck:
        """
        Run the protocol selected by `alias_target` against the live `answers`.

        Warnings (failed nested queries, unverifiable targets) are added to `outcome`.
        """
        protocol = classify(alias_target)

        if protocol in PTR_SUFFIXES:
            matched = self._reverse_ptr(outcome, answers, PTR_SUFFIXES[protocol])
        elif protocol is AliasProtocol.S3_WEBSITE:
            matched = self._s3_website(outcome, name, rtype, alias_target, answers)
        else:
            outcome.warn(
                f"{name} {rtype}: Cannot check `{alias_target}`",
                "UNVERIFIABLE_ALIAS",
                alias_target=alias_target,
            )
            matched = True

        self.logger.debug(f"{name} {rtype}: alias {alias_target} via {protocol.value}: {'ok' if matched else 'mismatch'}")
        return AliasCheck(matched=matched, protocol=protocol)

    def _reverse_ptr(self, outcome: GroupOutcome, answers: List[LiveAnswer], suffix: str) -> bool:
        # Vacuous over empty answer and PTR sets.
        for answer in answers:
            try:
                ptrs = self.query.query(answer.value, "PTR")
            except QueryFailure as e:
                outcome.query_failed(e)
                return False
            if not all(p.value.lower().endswith(suffix) for p in ptrs):
                return False
        return True

    def _s3_website(
        self,
        outcome: GroupOutcome,
        name: str,
        rtype: str,
        alias_target: str,
        answers: List[LiveAnswer],
    ) -> bool:
        answer_prefixes = {_first_two_octets(a.value) for a in answers}

        def attempt(n: int) -> bool:
            try:
                endpoint_ips = [a.value for a in self.query.query(alias_target, "A")]
            except QueryFailure as e:
                outcome.query_failed(e)
                return False
            return any(_first_two_octets(ip) in answer_prefixes for ip in endpoint_ips)

        def on_retry(n: int) -> None:
            self.logger.debug(f"Retry Check {name} {rtype} (attempt {n + 1}/{self.retry.max_attempts})")

        return self.retry.run(attempt, on_retry=on_retry)


def _first_two_octets(ip: str) -> Tuple[str, ...]:
    return tuple(ip.strip().split(".")[:2])
