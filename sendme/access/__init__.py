"""Role-based access gating."""

from __future__ import annotations

from .gate import (
    AccessDecision,
    AccessLevel,
    AccessRequirement,
    DenyReason,
    Principal,
    authorize,
)

__all__ = [
    "AccessDecision",
    "AccessLevel",
    "AccessRequirement",
    "DenyReason",
    "Principal",
    "authorize",
]
