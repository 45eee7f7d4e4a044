"""
Common API Schemas

Shared Pydantic models used across all API routers.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """
    Standard error response model for all API errors.

    Attributes:
        code: Machine-readable error code (e.g., "RESWIPE_FORBIDDEN", "STORE_UNAVAILABLE")
        message: Human-readable error message
        retryable: Whether resubmitting the same request may succeed
        details: Optional additional error context
    """

    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    retryable: bool = Field(default=False, description="Safe to retry the same request")
    details: Optional[Dict[str, Any]] = Field(
        default=None, description="Additional error context"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "code": "RESWIPE_COOLDOWN",
                "message": "ReswipeCooldownError: alice rejected bob too recently (retry after 3600s)",
                "retryable": True,
                "details": {"retry_after_seconds": 3600},
            }
        }
    )
