"""
API Schemas Package

Pydantic models shared by the swipes, users and pairs routers.
"""

from src.api.schemas.common import ErrorResponse

__all__ = ["ErrorResponse"]
