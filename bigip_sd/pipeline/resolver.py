#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DNS Resolver

- Resolves the host of each validated URL with the system resolver
- Sequential, one lookup per URL, no retries and no caching
- Hosts that are missing or fail to resolve become `Diagnostic` records
"""

from __future__ import annotations

import ipaddress
import socket
from typing import Callable, Iterable, List, Optional, Sequence

from bigip_sd.models.schemas import Diagnostic, DiagnosticStage, ResolvedSite, ValidatedURL
from bigip_sd.models.validation_model import LoadResult
from bigip_sd.utils.logger import get_logger, log_metric

Lookup = Callable[[str], Sequence[str]]
ResolutionResult = LoadResult[ResolvedSite]


def system_lookup(host: str) -> List[str]:
    """Resolve `host` to address strings in resolver order, duplicates removed."""
    addresses: List[str] = []
    # getaddrinfo repeats an address once per socket type unless one is fixed
    for res in socket.getaddrinfo(host, None, socket.AF_UNSPEC, socket.SOCK_STREAM):
        sockaddr = res[4]
        if not sockaddr:
            continue
        ip = sockaddr[0]
        if ip not in addresses:
            addresses.append(ip)
    return addresses


class DNSResolver:
    """
    Turn validated URLs into resolved sites.
    """

    def __init__(self, lookup: Optional[Lookup] = None, log_level: Optional[str] = None):
        self.lookup = lookup or system_lookup
        self.logger = get_logger("bigip_sd.resolver", log_level)

    def _diagnostic(self, url: ValidatedURL, value: str, code: str, message: str) -> Diagnostic:
        return Diagnostic(
            stage=DiagnosticStage.RESOLVE,
            source=url.source or url.url,
            line_number=url.line_number,
            value=value,
            code=code,
            message=message,
        )

    def _parse_addresses(self, host: str, raw: Sequence[str]) -> list:
        parsed = []
        for value in raw:
            try:
                address = ipaddress.ip_address(value)
            except ValueError:
                self.logger.debug("Ignoring non-IP answer %r for %s", value, host)
                continue
            if address not in parsed:
                parsed.append(address)
        return parsed

    def resolve_url(self, url: ValidatedURL):
        """Return a ResolvedSite, or a Diagnostic explaining why there is none."""
        host = url.host
        if not host:
            self.logger.warning("URL `%s` has no host component; skipping", url.url)
            return self._diagnostic(url, url.url, "no_host", "URL has no host component")

        try:
            raw = self.lookup(host)
        except (OSError, UnicodeError) as e:
            self.logger.warning("Failed to lookup `%s`! Error: %s", host, e)
            return self._diagnostic(url, host, "lookup_failed", str(e))

        addresses = self._parse_addresses(host, raw)
        if not addresses:
            self.logger.warning("Lookup of `%s` returned no addresses", host)
            return self._diagnostic(url, host, "no_addresses", "resolver returned no addresses")

        self.logger.debug("`%s` resolved to %s", host, [str(a) for a in addresses])
        return ResolvedSite(url=url, addresses=addresses)

    def resolve(self, urls: Iterable[ValidatedURL]) -> ResolutionResult:
        result: ResolutionResult = LoadResult()
        for url in urls:
            outcome = self.resolve_url(url)
            if isinstance(outcome, Diagnostic):
                result.diagnostics.append(outcome)
            else:
                result.items.append(outcome)

        self.logger.info("Found %d sites (%d unresolved)", len(result.items), len(result.diagnostics))
        log_metric(self.logger, "sites_resolved_total", len(result.items), stage="resolve")
        log_metric(self.logger, "sites_unresolved_total", len(result.diagnostics), stage="resolve")
        return result
