"""
Posts API: Pydantic Response Schemas
====================================

What:  Pydantic models defining what the API returns to clients.
Why:   Automatic serialization and OpenAPI doc generation.
How:   FastAPI serializes route results through `response_model`, using the
       serialization aliases (createdAt/updatedAt) declared here.

Request bodies are NOT modelled here: incoming post payloads are checked by
the explicit rule table in posts_api.validation, which produces the
field → messages error map clients expect.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PostResponse(BaseModel):
    """
    What:  Full representation of a post.
    Who:   Returned by every post endpoint except DELETE.
    """
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int = Field(description="Unique post identifier")
    title: str = Field(description="Post title (max 120 characters)")
    content: str = Field(description="Post body")
    category: str = Field(description="Free-form category name")
    tags: List[str] = Field(default_factory=list, description="Tags, 4-20 characters each")
    created_at: datetime = Field(
        serialization_alias="createdAt",
        description="When the post was created (UTC ISO 8601)",
    )
    updated_at: datetime = Field(
        serialization_alias="updatedAt",
        description="When the post was last modified (UTC ISO 8601)",
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models (documentation only)
# ══════════════════════════════════════════════════════════════════════════


class PostInput(BaseModel):
    """
    What:  Shape of a create/update body, used for OpenAPI examples.
    Why:   Routes accept a raw JSON object so the rule table can report
           every violation; this model only documents the accepted keys.
    """
    title: Optional[str] = Field(default=None, max_length=120, examples=["Hello"])
    content: Optional[str] = Field(default=None, examples=["World"])
    category: Optional[str] = Field(default=None, examples=["Tech"])
    tags: Optional[List[str]] = Field(default=None, examples=[["intro"]])


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description for display to users
        errors: Field name → violation messages (validation errors only)
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    errors: Optional[Dict[str, List[str]]] = Field(
        default=None, description="Per-field validation messages"
    )
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for monitoring and load balancer health checks.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
