"""Error and health response schemas, and the id range, shared by all routers."""

from typing import Annotated, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "conflict",
            "message": "Label 'urgent' already exists",
            "details": {"label_id": 3},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


# Largest value a PostgreSQL INTEGER column holds; ids outside 1..MAX_ID can
# never exist, so they are rejected at the schema layer (422)
MAX_ID = 2_147_483_647

EntityId = Annotated[int, Field(ge=1, le=MAX_ID)]
