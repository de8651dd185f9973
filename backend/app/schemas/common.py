"""
StoryShare Backend — Shared Response Schemas
==============================================

What:  Error and health payloads used across all routes.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """
    Base for every API payload.

    Fields are declared in snake_case and exposed in camelCase; both
    spellings are accepted on input.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {"error": "You have already liked this story", "request_id": "1f2e3d4c"}
    """
    error: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(ApiModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    database_latency_ms: Optional[float] = Field(
        default=None, description="Round-trip time of the probe query; null when unreachable"
    )
    uptime_seconds: float = Field(description="Seconds since service started")
