"""
Response envelopes shared by all endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Error payload inside an error envelope."""

    model_config = ConfigDict(extra="allow")

    code: int | None = Field(default=None, description="Numeric error code")
    message: str = Field(description="Human-readable error message")
    status: str | None = Field(default=None, description="Canonical status name")
    details: list[Any] | None = Field(default=None, description="Structured details")


class ErrorResponse(BaseModel):
    """Error envelope: ``{"error": {...}}``."""

    error: ErrorDetail


class EmptyResponse(BaseModel):
    """Response of endpoints that return no data (e.g. delete)."""

    model_config = ConfigDict(extra="allow")
