"""
Pydantic schemas for the Gym Sync API.

Records travel as plain JSON objects so the validator, not the request
parser, decides what is eligible for submission. These schemas describe
the envelopes around them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enums
# =============================================================================

class SyncActionType(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"


# =============================================================================
# Business Unit Schemas
# =============================================================================

class Reference(BaseModel):
    """Nested {id, name} reference (company, region)."""
    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    name: Optional[str] = None


class Address(BaseModel):
    """Structured gym address."""
    model_config = ConfigDict(extra="allow")

    street: Optional[str] = None
    city: Optional[str] = None
    postalCode: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class BusinessUnit(BaseModel):
    """A gym as stored in the local catalog."""
    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    name: Optional[str] = None
    company: Optional[Reference] = None
    companyNameForInvoice: Optional[str] = None
    address: Optional[Address] = None
    location: Optional[str] = None
    region: Optional[Reference] = None
    currency: Optional[str] = None
    releaseSuspensionProduct: Optional[dict[str, Any]] = None
    settings: Optional[dict[str, Any]] = None
    hasRegisterUnitForInternet: Optional[bool] = None


# =============================================================================
# Sync Schemas
# =============================================================================

class SyncRequest(BaseModel):
    """Optional body for a sync pass. Without records the configured catalog is used."""
    records: Optional[list[dict[str, Any]]] = None
    validate_first: Optional[bool] = Field(
        None, description="Validate every record before any network call"
    )


class SyncOutcomeResponse(BaseModel):
    """Outcome for one record."""
    action: SyncActionType
    identifier: Any = None
    name: Optional[str] = None
    success: bool
    payload: Any = None
    error: Optional[str] = None
    error_detail: Optional[dict[str, Any]] = None


class SyncReportResponse(BaseModel):
    """Ordered outcomes of one reconciliation pass."""
    success: bool
    created: int = Field(..., ge=0)
    updated: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    duration_seconds: float = Field(..., ge=0.0)
    timestamp: datetime
    outcomes: list[SyncOutcomeResponse]


# =============================================================================
# Query Schemas
# =============================================================================

class ValidationResponse(BaseModel):
    """Result of validating one record."""
    valid: bool
    errors: list[str] = Field(default_factory=list)


class LookupResponse(BaseModel):
    """Result of a lookup by id."""
    identifier: Any = None
    found: bool
    record: Optional[dict[str, Any]] = None


class SearchResponse(BaseModel):
    """Search results."""
    query: str
    count: int
    results: list[dict[str, Any]]


class ConnectionResponse(BaseModel):
    """Result of probing the remote API."""
    success: bool
    count: int = 0
    endpoint: Optional[str] = None
    error: Optional[dict[str, Any]] = None


class DeleteResponse(BaseModel):
    identifier: int
    deleted: bool


# =============================================================================
# Common Schemas
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[Any] = None
    status_code: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    upstream: str
