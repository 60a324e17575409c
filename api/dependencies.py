"""
Shared dependencies for the SendMe API.

This module provides:
- The route table, built once during startup and frozen before serving
- Handler services, one instance per application
"""

from __future__ import annotations

import logging

from sendme.routing import RouteTable

from .routers import register_review_routes, register_vehicle_routes
from .services import ReviewService, VehicleService
from .settings import Settings

logger = logging.getLogger(__name__)


def build_route_table(
    settings: Settings,
    review_service: ReviewService | None = None,
    vehicle_service: VehicleService | None = None,
) -> RouteTable:
    """Register every gated route and freeze the table."""
    table = RouteTable()
    register_review_routes(table, review_service or ReviewService(), settings.default_page_size)
    register_vehicle_routes(table, vehicle_service or VehicleService(), settings.default_page_size)
    return table.freeze()
