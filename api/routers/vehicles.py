"""
Vehicles Router - Route declarations for the vehicle type catalogue.

Reads are public; every write is admin only.
"""

from __future__ import annotations

from sendme.access import AccessRequirement
from sendme.routing import RouteTable

from ..schemas.vehicles import (
    CREATE_VEHICLE_RULES,
    DELETE_VEHICLE_RULES,
    GET_VEHICLE_RULES,
    PATCH_VEHICLE_RULES,
    UPDATE_VEHICLE_RULES,
    VEHICLE_AVAILABILITY_RULES,
    VEHICLE_PRICING_RULES,
    list_vehicles_rules,
)
from ..services.vehicle_service import VehicleService

PREFIX = "/vehicles"

PUBLIC = AccessRequirement.public()
ADMIN = AccessRequirement.restricted_to("admin")


def register_vehicle_routes(table: RouteTable, service: VehicleService, default_page_size: int = 20) -> None:
    """Register every vehicle type route on ``table``."""
    p = PREFIX
    table.register("GET", p, PUBLIC, list_vehicles_rules(default_page_size), service.get_vehicles)
    table.register("GET", f"{p}/{{id}}", PUBLIC, GET_VEHICLE_RULES, service.get_vehicle_by_id)
    table.register("POST", p, ADMIN, CREATE_VEHICLE_RULES, service.create_vehicle)
    table.register("PUT", f"{p}/{{id}}", ADMIN, UPDATE_VEHICLE_RULES, service.update_vehicle)
    table.register("PATCH", f"{p}/{{id}}", ADMIN, PATCH_VEHICLE_RULES, service.patch_vehicle)
    table.register(
        "PATCH", f"{p}/{{id}}/availability", ADMIN, VEHICLE_AVAILABILITY_RULES, service.update_vehicle_availability
    )
    table.register("PATCH", f"{p}/{{id}}/pricing", ADMIN, VEHICLE_PRICING_RULES, service.update_vehicle_pricing)
    table.register("DELETE", f"{p}/{{id}}", ADMIN, DELETE_VEHICLE_RULES, service.delete_vehicle)
