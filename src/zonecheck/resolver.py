from __future__ import annotations

import ipaddress
import logging
from typing import List, Optional, Protocol, Sequence

import dns.exception
import dns.rdatatype
import dns.resolver
import dns.reversename

from .models import LiveAnswer, QueryFailure

DEFAULT_NAMESERVERS = ("8.8.8.8", "8.8.4.4")

_TEXT_TYPES = ("TXT", "SPF")


class DNSQueryCapability(Protocol):
    def query(self, name: str, rtype: str) -> List[LiveAnswer]:
        ...


class DNSQuery:
    """
    Blocking live DNS lookups returning (value, ttl) answers.

    Raises QueryFailure on NXDOMAIN, timeouts and transport errors. A name that
    exists but has no data of the requested type yields an empty list.
    """

    def __init__(self, resolver: Optional[dns.resolver.Resolver], logger: Optional[logging.Logger] = None) -> None:
        self._resolver = resolver
        self.logger = logger or logging.getLogger("zonecheck")

    @property
    def nameservers(self) -> List[str]:
        if self._resolver is None:
            return []
        # dnspython >= 2.4 hands back Nameserver objects, older versions plain strings
        return [str(getattr(ns, "address", ns)) for ns in self._resolver.nameservers]

    def query(self, name: str, rtype: str) -> List[LiveAnswer]:
        rtype = str(rtype).upper()
        if self._resolver is None:
            raise QueryFailure(name, rtype, "no usable resolver configuration")

        qname = self._qname(name, rtype)
        self.logger.debug(f"Querying {qname} {rtype}")

        try:
            ans = self._resolver.resolve(qname, rtype, raise_on_no_answer=False)
        except dns.resolver.NXDOMAIN:
            raise QueryFailure(name, rtype, f"NXDOMAIN: {name} does not exist")
        except dns.exception.Timeout:
            raise QueryFailure(name, rtype, f"Timeout while resolving {name} {rtype}")
        except dns.resolver.NoNameservers as e:
            raise QueryFailure(name, rtype, f"No nameservers could answer: {e}")
        except dns.rdatatype.UnknownRdatatype:
            raise QueryFailure(name, rtype, f"Unsupported record type {rtype}")
        except Exception as e:
            raise QueryFailure(name, rtype, f"{type(e).__name__}: {e}")

        if ans.rrset is None:
            return []

        ttl = int(ans.rrset.ttl)
        answers = [LiveAnswer(value=self._rdata_text(rdata, rtype), ttl=ttl) for rdata in ans.rrset]
        self.logger.debug(f"Query {qname} {rtype}: {len(answers)} answer(s)")
        return answers

    @staticmethod
    def _qname(name: str, rtype: str) -> str:
        if rtype == "PTR":
            try:
                ipaddress.ip_address(name)
            except ValueError:
                return name
            return dns.reversename.from_address(name).to_text()
        return name

    @staticmethod
    def _rdata_text(rdata, rtype: str) -> str:
        if rtype in _TEXT_TYPES:
            # Character-strings concatenated, no quoting
            return b"".join(rdata.strings).decode("utf-8", errors="replace")
        return rdata.to_text()


def get_resolver(
    debug: bool = False,
    nameservers: Optional[Sequence[str]] = None,
    timeout: float = 5.0,
    lifetime: float = 10.0,
    logger: Optional[logging.Logger] = None,
) -> DNSQuery:
    """
    Build the query capability used for a run.

    Uses the host resolver configuration when it can be read, otherwise falls
    back to DEFAULT_NAMESERVERS. Never raises: if nothing usable can be built,
    every later query fails with QueryFailure instead.
    """
    logger = logger or logging.getLogger("zonecheck")
    if debug:
        logger.setLevel(logging.DEBUG)
    elif logger.level == logging.NOTSET or logger.level < logging.INFO:
        logger.setLevel(logging.INFO)

    resolver: Optional[dns.resolver.Resolver] = None
    try:
        if nameservers:
            resolver = dns.resolver.Resolver(configure=False)
            resolver.nameservers = list(nameservers)
        else:
            try:
                resolver = dns.resolver.Resolver(configure=True)
            except (dns.resolver.NoResolverConfiguration, OSError) as e:
                logger.debug(f"No system resolver configuration ({e}); using {', '.join(DEFAULT_NAMESERVERS)}")
                resolver = dns.resolver.Resolver(configure=False)
                resolver.nameservers = list(DEFAULT_NAMESERVERS)
        resolver.timeout = float(timeout)
        resolver.lifetime = float(lifetime)
    except Exception as e:
        logger.warning(f"Could not construct a DNS resolver: {type(e).__name__}: {e}")
        resolver = None

    dq = DNSQuery(resolver, logger=logger)
    logger.debug(f"Resolver nameservers: {', '.join(dq.nameservers) or '(none)'}")
    return dq
