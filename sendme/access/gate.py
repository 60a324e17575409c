"""Access gate - pure authorization decisions for routes.

The gate never authenticates anyone. It consumes the ``Principal`` produced
by the auth middleware (or ``None``) and answers allow or deny.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any


class AccessLevel(Enum):
    """Declared authorization level of a route"""

    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ROLES = "roles"


class DenyReason(Enum):
    """Why the gate refused a caller"""

    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Principal:
    """The authenticated caller."""

    id: str
    roles: frozenset[str] = frozenset()

    @classmethod
    def with_role(cls, id: str, *roles: str) -> Principal:
        return cls(id=id, roles=frozenset(roles))

    def has_any_role(self, roles: Iterable[str]) -> bool:
        return not self.roles.isdisjoint(roles)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "roles": sorted(self.roles)}


@dataclass(frozen=True)
class AccessRequirement:
    """Public, any authenticated caller, or callers holding one of ``roles``."""

    level: AccessLevel
    roles: frozenset[str] = frozenset()

    @classmethod
    def public(cls) -> AccessRequirement:
        return cls(AccessLevel.PUBLIC)

    @classmethod
    def authenticated(cls) -> AccessRequirement:
        return cls(AccessLevel.AUTHENTICATED)

    @classmethod
    def restricted_to(cls, *roles: str) -> AccessRequirement:
        if not roles:
            raise ValueError("Role-restricted access needs at least one role")
        return cls(AccessLevel.ROLES, frozenset(roles))

    def __str__(self) -> str:
        if self.level is AccessLevel.ROLES:
            return f"roles({', '.join(sorted(self.roles))})"
        return self.level.value


@dataclass(frozen=True)
class AccessDecision:
    """Allow, or Deny with a reason."""

    allowed: bool
    reason: DenyReason | None = None

    @classmethod
    def allow(cls) -> AccessDecision:
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason) -> AccessDecision:
        return cls(allowed=False, reason=reason)


def authorize(requirement: AccessRequirement, principal: Principal | None) -> AccessDecision:
    """Decide whether ``principal`` may invoke a route guarded by ``requirement``."""
    if requirement.level is AccessLevel.PUBLIC:
        return AccessDecision.allow()

    if principal is None:
        return AccessDecision.deny(DenyReason.UNAUTHENTICATED)

    if requirement.level is AccessLevel.ROLES and not principal.has_any_role(requirement.roles):
        return AccessDecision.deny(DenyReason.FORBIDDEN)

    return AccessDecision.allow()
