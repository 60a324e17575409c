"""Explicit route table and the dispatch sequence built on it."""

from __future__ import annotations

from .dispatch import InboundRequest, ValidatedRequest, dispatch, prepare
from .route_table import Handler, RouteEntry, RouteMatch, RouteTable, normalize_path

__all__ = [
    "Handler",
    "InboundRequest",
    "RouteEntry",
    "RouteMatch",
    "RouteTable",
    "ValidatedRequest",
    "dispatch",
    "normalize_path",
    "prepare",
]
