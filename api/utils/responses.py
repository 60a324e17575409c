"""
Helpers that render the shared response envelope as JSON responses.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fastapi.responses import JSONResponse

from sendme.validation import Violation

from ..schemas.responses import ErrorResponse, SuccessResponse, ViolationDetail


def success(data: Any = None, status_code: int = 200, message: str | None = None) -> JSONResponse:
    body = SuccessResponse(data=data, message=message)
    # Only top-level empties are dropped; None inside ``data`` is kept
    omit = {name for name in ("message", "data") if getattr(body, name) is None}
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude=omit))


def failure(status_code: int, message: str, violations: Iterable[Violation] | None = None) -> JSONResponse:
    errors = [ViolationDetail(**v.to_dict()) for v in violations] if violations is not None else None
    body = ErrorResponse(message=message, errors=errors)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))
