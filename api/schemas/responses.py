"""
Pydantic schemas for the response envelope shared by every gated route.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ViolationDetail(BaseModel):
    """One field-level validation failure."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Error envelope; ``errors`` is only present for validation failures."""

    success: bool = False
    message: str
    errors: list[ViolationDetail] | None = None


class SuccessResponse(BaseModel):
    """Success envelope returned by handlers."""

    success: bool = True
    message: str | None = None
    data: Any = None
