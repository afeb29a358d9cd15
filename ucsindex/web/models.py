"""Request and response models of the HTTP API."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from ucsindex.core.models.results import ScenarioChangeType


def _utcnow() -> datetime:
    return datetime.now(UTC)


class APIResponse(BaseModel):
    """Standard API response envelope."""

    success: bool = Field(..., description="Whether the request succeeded")
    data: Any | None = Field(None, description="Response payload")
    message: str | None = Field(None, description="Human readable message")
    timestamp: datetime = Field(default_factory=_utcnow, description="Response timestamp")
    request_id: str | None = Field(None, description="Request id for tracing")


class ErrorResponse(BaseModel):
    """Error response envelope."""

    success: bool = Field(False, description="Always false")
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: dict[str, Any] | None = Field(None, description="Structured error context")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")
    request_id: str | None = Field(None, description="Request id for tracing")


class ImpactRequest(BaseModel):
    asset_id: str = Field(..., description="Asset to override")
    new_value: float = Field(..., description="Simulated value")
    date: str | None = Field(None, description="Target date (YYYY-MM-DD or DD/MM/YYYY)")


class ScenarioRequest(BaseModel):
    asset_id: str
    change_type: ScenarioChangeType = ScenarioChangeType.PERCENTAGE
    value: float
    target: str = "ucs_ase"
    date: str | None = None


class RecalculationRequest(BaseModel):
    date: str = Field(..., description="Business day to recalculate")
    edits: dict[str, float] = Field(..., min_length=1, description="New values keyed by asset id")
    user: str = Field("api", description="User recorded in the audit log")


class HealthStatus(BaseModel):
    status: str
    version: str
    uptime: float
    components: dict[str, str]
