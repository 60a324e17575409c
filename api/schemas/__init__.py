"""
Schemas for the SendMe API.

- responses: pydantic models for the JSON envelope
- reviews / vehicles: per-route validation rule-sets
"""

from __future__ import annotations

from .responses import ErrorResponse, SuccessResponse, ViolationDetail

__all__ = [
    "ErrorResponse",
    "SuccessResponse",
    "ViolationDetail",
]
