"""Request gating errors.

Every error here is scoped to a single request and raised before a handler
runs. The API layer renders them into the JSON error envelope.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validation.models import Violation


class GatewayError(Exception):
    """Base exception for requests rejected by the gating layer."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RouteNotFoundError(GatewayError):
    """Raised when no route matches the verb and path."""

    status_code = 404

    def __init__(self, method: str, path: str):
        super().__init__(f"Can't find {method} {path} on this server")
        self.method = method
        self.path = path


class UnauthenticatedError(GatewayError):
    """Raised when a route needs a principal and none was resolved."""

    status_code = 401

    def __init__(self, message: str = "You are not logged in! Please log in to get access."):
        super().__init__(message)


class ForbiddenError(GatewayError):
    """Raised when the principal's roles are not permitted on the route."""

    status_code = 403

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(message)


class ValidationFailedError(GatewayError):
    """Raised when one or more field rules fail."""

    status_code = 422

    def __init__(self, violations: list[Violation]):
        super().__init__("Validation failed")
        self.violations = violations


class MalformedBodyError(GatewayError):
    """Raised when the request body cannot be read as a JSON object."""

    status_code = 400
