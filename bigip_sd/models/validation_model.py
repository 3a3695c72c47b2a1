#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Validation Models & Service

Responsibilities:
- Parse URL list lines against a generic URL grammar (scheme + authority)
- Parse subnet list lines as IPv4 CIDR literals (a.b.c.d/prefix)
- Report every rejected line as a structured `Diagnostic`
- NO repair of malformed input: a line either parses as written or is dropped
"""

from __future__ import annotations

import ipaddress
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Generic, Iterable, List, Optional, Tuple, TypeVar, Union
from urllib.parse import urlsplit

import idna

from bigip_sd.models.schemas import (
    Diagnostic,
    DiagnosticStage,
    RawLine,
    Subnet,
    ValidatedURL,
)
from bigip_sd.utils.logger import get_logger, log_metric

T = TypeVar("T")


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):(.*)$", re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s")
_CIDR_RE = re.compile(r"^([0-9]{1,3}(?:\.[0-9]{1,3}){3})/([0-9]{1,2})$")

# Code points that can never appear in a URL host.
_FORBIDDEN_HOST_CHARS = frozenset("\x00\t\n\r #%/:<>?@[\\]^|")


def _normalize_entry(value: str) -> str:
    """Trim surrounding whitespace and strip UTF-8 BOM if present."""
    normalized = value.strip()
    if normalized.startswith("\ufeff"):
        normalized = normalized.lstrip("\ufeff").strip()
    return normalized


@dataclass
class LoadResult(Generic[T]):
    """Parsed items paired with the diagnostics for every dropped line."""

    items: List[T] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


ParseError = Tuple[str, str]


# ----------------------------------------------------------------------
# URL validation
# ----------------------------------------------------------------------
def _host_part(netloc: str) -> str:
    hostinfo = netloc.rpartition("@")[2]
    if hostinfo.startswith("["):
        return hostinfo[: hostinfo.find("]") + 1]
    return hostinfo.partition(":")[0]


def parse_url(text: str) -> Union[ValidatedURL, ParseError]:
    """
    Parse one URL string. Returns a ValidatedURL or a (code, message) pair.
    """
    if not text:
        return "empty", "empty line"
    if _WHITESPACE_RE.search(text):
        return "whitespace", "URL contains whitespace"

    match = _SCHEME_RE.match(text)
    if not match:
        return "scheme_missing", "relative URL without a base"
    scheme, rest = match.groups()
    if not rest.startswith("//"):
        return "authority_missing", f"scheme '{scheme}' is not followed by an authority"

    try:
        parts = urlsplit(text)
        port = parts.port
    except ValueError as e:
        return "url_invalid", str(e)

    raw_host = _host_part(parts.netloc)
    host = parts.hostname
    if raw_host.startswith("["):
        try:
            ipaddress.IPv6Address(raw_host[1:-1])
        except ValueError:
            return "host_invalid", f"invalid IPv6 literal '{raw_host}'"
    elif host:
        bad = sorted(set(host) & _FORBIDDEN_HOST_CHARS)
        if bad:
            return "host_invalid", f"host '{host}' contains forbidden characters {bad}"
        if not host.isascii():
            try:
                host = idna.encode(host, uts46=True).decode("ascii")
            except idna.IDNAError as e:
                return "host_invalid", f"host '{host}' is not a valid IDN: {e}"

    return ValidatedURL(url=text, scheme=scheme.lower(), host=host or None, port=port)


# ----------------------------------------------------------------------
# Subnet validation
# ----------------------------------------------------------------------
def parse_subnet(text: str) -> Union[Subnet, ParseError]:
    """
    Parse one IPv4 CIDR literal. Host bits may be set; the prefix is required.
    """
    if not text:
        return "empty", "empty line"
    match = _CIDR_RE.match(text)
    if not match:
        return "cidr_format", "expected IPv4 CIDR of the form a.b.c.d/prefix"
    address_text, prefix_text = match.groups()
    try:
        address = ipaddress.IPv4Address(address_text)
    except ValueError as e:
        return "address_invalid", str(e)
    prefix_length = int(prefix_text)
    if prefix_length > 32:
        return "prefix_out_of_range", f"prefix length {prefix_length} is not in [0, 32]"
    return Subnet(address=address, prefix_length=prefix_length)


# ----------------------------------------------------------------------
# Validators
# ----------------------------------------------------------------------
class _LineValidator(ABC, Generic[T]):
    stage: DiagnosticStage
    kind: str

    def __init__(self, log_level: Optional[str] = None):
        self.logger = get_logger(f"bigip_sd.validator.{self.stage.value}", log_level)

    @abstractmethod
    def _parse(self, text: str) -> Union[T, ParseError]:
        """Return the parsed item, or a (code, message) pair."""

    def _attach(self, item: T, line: RawLine) -> T:
        return item

    def validate_line(self, line: RawLine) -> Union[T, Diagnostic]:
        text = _normalize_entry(line.raw)
        self.logger.debug("Validating %s:%d: %r", line.source, line.line_number, text)
        result = self._parse(text)
        if not isinstance(result, tuple):
            return self._attach(result, line)

        code, message = result
        level = logging.DEBUG if code == "empty" else logging.WARNING
        self.logger.log(
            level,
            "Failed to parse %s `%s` (%s:%d)! Error: %s",
            self.kind,
            line.raw,
            line.source,
            line.line_number,
            message,
        )
        return Diagnostic(
            stage=self.stage,
            source=line.source,
            line_number=line.line_number,
            value=line.raw,
            code=code,
            message=message,
        )

    def validate_lines(self, lines: Iterable[RawLine]) -> LoadResult[T]:
        result: LoadResult[T] = LoadResult()
        for line in lines:
            outcome = self.validate_line(line)
            if isinstance(outcome, Diagnostic):
                result.diagnostics.append(outcome)
            else:
                result.items.append(outcome)
        self.logger.info(
            "Finished %s validation (%d valid, %d rejected)",
            self.kind,
            len(result.items),
            len(result.diagnostics),
        )
        log_metric(self.logger, f"{self.stage.value}_valid_total", len(result.items), stage="validate")
        log_metric(self.logger, f"{self.stage.value}_rejected_total", len(result.diagnostics), stage="validate")
        return result


class URLValidator(_LineValidator[ValidatedURL]):
    stage = DiagnosticStage.URL
    kind = "url"

    def _parse(self, text: str) -> Union[ValidatedURL, ParseError]:
        return parse_url(text)

    def _attach(self, item: ValidatedURL, line: RawLine) -> ValidatedURL:
        return item.model_copy(update={"source": line.source, "line_number": line.line_number})


class SubnetValidator(_LineValidator[Subnet]):
    stage = DiagnosticStage.SUBNET
    kind = "subnet"

    def _parse(self, text: str) -> Union[Subnet, ParseError]:
        return parse_subnet(text)
