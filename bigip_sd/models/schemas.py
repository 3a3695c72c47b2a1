"""
Shared Pydantic schemas used across the bigip-sd pipeline.
"""
from __future__ import annotations

from enum import Enum
from ipaddress import IPv4Address, IPv4Network
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.networks import IPvAnyAddress

BIGIP_LOCATION = "BigIP"


class DiagnosticStage(str, Enum):
    URL = "url"
    SUBNET = "subnet"
    RESOLVE = "resolve"


class OutputFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"


class RawLine(BaseModel):
    source: str = Field(..., description="Path of the file this line came from")
    raw: str = Field(..., description="Raw line as read from the file")
    line_number: int = Field(..., description="1-based line number inside the file")


class Diagnostic(BaseModel):
    """A recorded, non-fatal notice of a skipped entry."""

    stage: DiagnosticStage = Field(..., description="Pipeline stage that dropped the entry")
    source: str = Field(..., description="Input file (or URL list) the entry belongs to")
    line_number: Optional[int] = Field(None, description="Line number when known")
    value: str = Field(..., description="Offending line or host")
    code: str = Field(..., description="Stable machine-readable reason code")
    message: str = Field(..., description="Human-readable cause")


class ValidatedURL(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="URL exactly as written (surrounding whitespace removed)")
    scheme: str = Field(..., description="Lower-cased scheme")
    host: Optional[str] = Field(None, description="ASCII host, None when the authority has no host")
    port: Optional[int] = Field(None, description="Explicit port if present")
    source: Optional[str] = Field(None, description="File the URL was read from")
    line_number: Optional[int] = Field(None, description="Line number inside that file")

    def __str__(self) -> str:
        return self.url


class ResolvedSite(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: ValidatedURL
    addresses: List[IPvAnyAddress] = Field(
        ..., min_length=1, description="Addresses in the order the resolver returned them"
    )


class Subnet(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: IPv4Address = Field(..., description="Base address as written")
    prefix_length: int = Field(..., ge=0, le=32)

    @property
    def network(self) -> IPv4Network:
        return IPv4Network((self.address, self.prefix_length), strict=False)

    def contains(self, address) -> bool:
        if not isinstance(address, IPv4Address):
            return False
        return address in self.network

    def __str__(self) -> str:
        return f"{self.address}/{self.prefix_length}"


class ClassifiedTargets(BaseModel):
    matched: List[str] = Field(default_factory=list, description="URLs inside a BigIP range")
    unmatched: List[str] = Field(default_factory=list, description="URLs outside every range")


class ExportRecord(BaseModel):
    """One Prometheus file_sd target group."""

    targets: List[str] = Field(default_factory=list)
    labels: Dict[str, str] = Field(default_factory=dict)


# ----------------------------------------------------------------------
# Run configuration
# ----------------------------------------------------------------------
class TargetLabels(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    matched: Dict[str, str] = Field(default_factory=lambda: {"location": BIGIP_LOCATION})
    unmatched: Dict[str, str] = Field(default_factory=dict)

    @field_validator("matched")
    @classmethod
    def keep_bigip_location(cls, value: Dict[str, str]) -> Dict[str, str]:
        """The BigIP location label is fixed; config may only add labels."""
        extra = {k: v for k, v in value.items() if k != "location"}
        return {"location": BIGIP_LOCATION, **extra}


class OutputConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    format: OutputFormat = OutputFormat.JSON
    path: Optional[str] = Field(None, description="Output file; stdout when unset")


class RunConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    labels: TargetLabels = Field(default_factory=TargetLabels)
    output: OutputConfig = Field(default_factory=OutputConfig)
