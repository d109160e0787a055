"""
Error response models.

Standardized error responses for the API.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format (``SportikoError.to_dict()``)."""

    error: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
