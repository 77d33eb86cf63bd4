from __future__ import annotations

import random
from fnmatch import fnmatchcase
from typing import List, Optional, Sequence, Tuple, Union

import pytest

from zonecheck.alias import AliasVerifier, RetryPolicy
from zonecheck.models import LiveAnswer, QueryFailure
from zonecheck.names import ProbeNamer
from zonecheck.tool import ZoneTester

Answers = Sequence[Tuple[str, int]]


class FakeDNS:
    """
    In-memory query capability matched by (name glob, type) rules.

      dns.add("www.example.com", "A", [("1.2.3.4", 300)])
      dns.add("asterisk-of-wildcard-*.example.com", "A", [("9.9.9.9", 60)])
      dns.fail("missing.example.com", "A", "NXDOMAIN: missing.example.com does not exist")

    The first rule whose glob matches wins. Unmatched queries fail like NXDOMAIN.
    Every call is recorded in `calls`.
    """

    def __init__(self) -> None:
        self.rules: List[Tuple[str, str, Union[Answers, Exception]]] = []
        self.calls: List[Tuple[str, str]] = []

    def add(self, name: str, rtype: str, answers: Answers) -> "FakeDNS":
        self.rules.append((name, rtype, list(answers)))
        return self

    def fail(self, name: str, rtype: str, message: str = "NXDOMAIN") -> "FakeDNS":
        self.rules.append((name, rtype, QueryFailure(name, rtype, message)))
        return self

    def crash(self, name: str, rtype: str, exc: Exception) -> "FakeDNS":
        self.rules.append((name, rtype, exc))
        return self

    def query(self, name: str, rtype: str) -> List[LiveAnswer]:
        self.calls.append((name, rtype))
        for pattern, t, result in self.rules:
            if t == rtype and fnmatchcase(name, pattern):
                if isinstance(result, QueryFailure):
                    raise QueryFailure(name, rtype, result.message)
                if isinstance(result, Exception):
                    raise result
                return [LiveAnswer(value=v, ttl=ttl) for v, ttl in result]
        raise QueryFailure(name, rtype, f"NXDOMAIN: {name} does not exist")


class SleepRecorder:
    def __init__(self) -> None:
        self.slept: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.slept.append(seconds)


@pytest.fixture
def fake_dns() -> FakeDNS:
    return FakeDNS()


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_tester(fake_dns: FakeDNS, sleeps: SleepRecorder):
    """ZoneTester wired to the fake resolver, a seeded namer and a recorded sleep."""

    def _make(on_group=None, seed: Optional[int] = 7) -> ZoneTester:
        retry = RetryPolicy(max_attempts=3, backoff=3.0, sleep=sleeps)
        return ZoneTester(
            fake_dns,
            namer=ProbeNamer(random.Random(seed)),
            alias_verifier=AliasVerifier(fake_dns, retry=retry),
            on_group=on_group,
        )

    return _make
