"""
API-specific request and response models for FastAPI endpoints.

The categorize endpoint reads its body leniently (malformed entries are
filtered, not rejected), so these models document the contract in OpenAPI
rather than gate the input.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class Entry(BaseModel):
    """One transcript snippet."""

    text: str = Field(description="Snippet text", examples=["Let's brainstorm possible design alternatives."])


class CategorizeRequest(BaseModel):
    """Body of POST /api/categorize."""

    entries: list[Entry] = Field(default_factory=list, description="Snippets in transcript order")


class CategorizeResponse(BaseModel):
    """Successful categorize response."""

    success: bool = Field(default=True)
    results: list[dict[str, Any]] = Field(
        description="One {text, category} per snippet, with optional "
        "{__debugPrompt, __debugApiResponse} diagnostic objects"
    )


class ErrorResponse(BaseModel):
    """Error envelope for 429 and 5xx responses."""

    success: bool | None = Field(default=None, description="Absent on rate-limit rejections")
    error: str = Field(description="Human-readable error message")


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(
        description="Overall health status",
        examples=["healthy", "degraded"]
    )
    version: str = Field(description="Service version")
    checks: dict[str, str] = Field(description="Status of individual components")
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class VersionResponse(BaseModel):
    """Response for version endpoint."""

    service_version: str
    model_name: str
    max_batch_chars: int
    rate_limit_interval_seconds: float
    quota_limits: dict[str, int]
