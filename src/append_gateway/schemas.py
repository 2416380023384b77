"""
Pydantic request/response models for the gateway service API.

Field names on the wire follow the provider's and the existing clients'
conventions (PascalCase contact fields, camelCase envelopes); Python
attributes stay snake_case.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# === Request Models ===


class LookupRequest(BaseModel):
    """Request model for the reverse IP append endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    ip_addresses: list[str] | None = Field(default=None, alias="ipAddresses")
    """Addresses to enrich, in caller order."""

    ip: str | None = None
    """Single address accepted by older clients."""

    def resolve_ip_addresses(self) -> list[str]:
        """Return the requested addresses, folding the legacy ``ip`` field in."""
        if self.ip_addresses is not None:
            return list(self.ip_addresses)
        if self.ip is not None:
            return [self.ip]
        return []


class ProbeRequest(BaseModel):
    """Request model for POST /api/test."""

    model_config = ConfigDict(populate_by_name=True)

    ip_address: str | None = Field(default=None, alias="ipAddress")
    """Address to probe with (falls back to the configured test address)."""


# === Domain Models ===


class ContactRecord(BaseModel):
    """
    Normalized contact record.

    Every field is optional; a field the provider did not send stays None.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    first_name: str | None = Field(default=None, alias="FirstName")
    last_name: str | None = Field(default=None, alias="LastName")
    email: str | None = Field(default=None, alias="Email")
    phone: str | None = Field(default=None, alias="Phone")
    cell: str | None = Field(default=None, alias="Cell")
    address: str | None = Field(default=None, alias="Address")
    city: str | None = Field(default=None, alias="City")
    state: str | None = Field(default=None, alias="State")
    zip_code: str | None = Field(default=None, alias="ZipCode")
    country: str | None = Field(default=None, alias="Country")
    phone_dnc: bool | str | None = Field(default=None, alias="Phone_DNC")
    cell_dnc: bool | str | None = Field(default=None, alias="Cell_DNC")
    isp: str | None = Field(default=None, alias="ISP")
    organization: str | None = Field(default=None, alias="Organization")
    score: float | str | None = Field(default=None, alias="Score")
    ip_address: str | None = Field(default=None, alias="IP")
    ip_city: str | None = Field(default=None, alias="IP_City")
    ip_state: str | None = Field(default=None, alias="IP_State")
    ip_country: str | None = Field(default=None, alias="IP_Country")

    def has_identity(self) -> bool:
        """True when at least one person-identifying field is present."""
        return any(
            value is not None
            for value in (self.first_name, self.last_name, self.email, self.phone, self.cell)
        )


# === Response Models ===


class BatchItem(BaseModel):
    """Outcome for one address in a batch lookup."""

    model_config = ConfigDict(populate_by_name=True)

    ip_address: str = Field(..., alias="ipAddress")
    status: Literal["found", "not_found"]
    record: ContactRecord | None = None
    message: str | None = None


class BatchResponse(BaseModel):
    """Response model for POST /api/reverse-ip-append/batch."""

    results: list[BatchItem]
    """Per-address outcomes in request order."""

    count: int
    """Number of addresses looked up."""

    found: int
    """Number of addresses with a contact record."""


class ProbeResponse(BaseModel):
    """Response model for POST /api/test."""

    success: bool
    data: Any = None
    """Raw provider reply."""


class HealthResponse(BaseModel):
    """Response model for GET /health endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    status: Literal["ok"]
    """Service health status."""

    timestamp: datetime
    """Time the check ran (UTC)."""

    config_flags: dict[str, bool] = Field(..., alias="configFlags")
    """Which required settings are present. Never carries values."""


class ProviderInfo(BaseModel):
    """Provider integration summary for /info endpoint."""

    endpoint_url: str
    schema_version: str
    append_type: int
    timeout_seconds: float


class InfoResponse(BaseModel):
    """Response model for GET /info endpoint."""

    service: str
    """Service name."""

    version: str
    """Service version."""

    uptime_seconds: float
    uptime: str

    provider: ProviderInfo
    """Provider integration settings."""

    max_batch_size: int


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str
    """Machine-readable error code."""

    message: str
    """Human-readable error description."""

    details: dict[str, Any]
    """Additional error context."""
