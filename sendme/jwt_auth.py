"""
JWT access-token validation for SendMe API callers.

Tokens are issued elsewhere (the auth service). This module only verifies
them and turns their claims into a ``Principal``.
"""

from __future__ import annotations

import logging
from typing import Any, cast

import jwt
from jwt.exceptions import ExpiredSignatureError, ImmatureSignatureError, InvalidTokenError

from .access import Principal

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"


class AccessTokenValidator:
    """Validates HS256 access tokens against a shared secret."""

    def __init__(self, secret: str, issuer: str, audience: str, algorithms: tuple[str, ...] = ("HS256",)):
        if not secret:
            raise ValueError("JWT secret must be set to validate access tokens")
        self.secret = secret
        self.issuer = issuer
        self.audience = audience
        self.algorithms = list(algorithms)

    def validate_token(self, token: str) -> dict[str, Any] | None:
        """
        Validate a token and return its claims if valid, None otherwise.

        Refresh tokens are rejected: only ``type == "access"`` tokens may call
        the API.
        """
        try:
            claims = cast(
                dict[str, Any],
                jwt.decode(
                    token,
                    self.secret,
                    algorithms=self.algorithms,
                    issuer=self.issuer,
                    audience=self.audience,
                    options={"require": ["exp", "id"]},
                ),
            )
        except ExpiredSignatureError:
            logger.warning("Token has expired")
            return None
        except ImmatureSignatureError:
            logger.warning("Token not active yet")
            return None
        except InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}")
            return None

        if claims.get("type", ACCESS_TOKEN_TYPE) != ACCESS_TOKEN_TYPE:
            logger.warning(f"Rejected {claims.get('type')} token used as access token")
            return None

        logger.debug(f"Token validated successfully, id: {claims.get('id')}")
        return claims


def principal_from_claims(claims: dict[str, Any]) -> Principal | None:
    """Build a principal from validated claims.

    Claims carry a single ``role``; a ``roles`` list is accepted as well.
    """
    user_id = claims.get("id") or claims.get("sub")
    if not user_id:
        return None

    roles: set[str] = set()
    role = claims.get("role")
    if isinstance(role, str) and role:
        roles.add(role)
    extra = claims.get("roles")
    if isinstance(extra, list):
        roles.update(r for r in extra if isinstance(r, str) and r)

    return Principal(id=str(user_id), roles=frozenset(roles))


def extract_bearer_token(authorization_header: str | None) -> str | None:
    """Extract bearer token from Authorization header."""
    if not authorization_header:
        return None

    parts = authorization_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]
