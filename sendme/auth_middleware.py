"""
Authentication middleware - resolves the caller's principal from the request.

The middleware only authenticates. It never rejects a request: routes
declare their own access requirement and the access gate enforces it, so
public routes keep working for anonymous callers and for callers holding a
stale token.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from .access import Principal
from .jwt_auth import AccessTokenValidator, extract_bearer_token, principal_from_claims

logger = logging.getLogger(__name__)

AUTH_MODES = ("bypass", "production")
BYPASS_PRINCIPAL = Principal(id="000000000000000000000000", roles=frozenset({"admin"}))
UNGATED_PATHS = {"/health", "/api/config"}


def _is_docker_environment() -> bool:
    """Detect if running inside a Docker container."""
    if Path("/.dockerenv").exists():
        return True
    if os.getenv("DOCKER_CONTAINER") == "true":
        return True
    try:
        with open("/proc/1/cgroup") as f:
            return "docker" in f.read()
    except (FileNotFoundError, PermissionError):
        pass
    return False


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Middleware that stores the resolved principal on ``request.state.principal``.

    Supports two modes:
    - bypass: every caller is a fixed admin principal (development only)
    - production: principal comes from a bearer access token
    """

    def __init__(self, app: Any, auth_mode: str, validator: AccessTokenValidator | None = None):
        super().__init__(app)
        self.auth_mode = auth_mode.lower()

        if self.auth_mode not in AUTH_MODES:
            raise ValueError(f"Invalid AUTH_MODE: {auth_mode}. Must be bypass or production")

        if self.auth_mode == "bypass" and _is_docker_environment():
            raise ValueError(
                "SECURITY ERROR: AUTH_MODE=bypass is not allowed in Docker containers. "
                "Docker deployments must use AUTH_MODE=production."
            )

        if self.auth_mode == "production" and validator is None:
            logger.error("No access token validator configured; every bearer token will be rejected")

        self.validator = validator
        logger.info(f"Authentication middleware initialized in {self.auth_mode} mode")

    def resolve_principal(self, request: Request) -> Principal | None:
        """Resolve the caller, or None for anonymous / invalid credentials."""
        if self.auth_mode == "bypass":
            return BYPASS_PRINCIPAL

        token = extract_bearer_token(request.headers.get("Authorization"))
        if not token:
            return None

        claims = self.validator.validate_token(token) if self.validator else None
        if not claims:
            logger.warning(f"Token verification failed for {request.method} {request.url.path}")
            return None

        principal = principal_from_claims(claims)
        if principal is None:
            logger.warning("Token carried no user id")
        return principal

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in UNGATED_PATHS:
            return await call_next(request)

        principal = self.resolve_principal(request)
        request.state.principal = principal

        if principal is not None:
            logger.debug(f"Authenticated {principal.id} {sorted(principal.roles)} for {request.url.path}")

        return await call_next(request)


def get_principal(request: Request) -> Principal | None:
    """Dependency returning the resolved principal, or None for anonymous callers."""
    return getattr(request.state, "principal", None)

