"""
Vehicle type handlers.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi.responses import JSONResponse

from sendme.routing import ValidatedRequest
from sendme.validation import RequestData, ValidationPipeline

from ..schemas.vehicles import UPDATE_VEHICLE_BODY_RULES
from ..utils.responses import failure, success
from .record_store import Record, RecordStore

logger = logging.getLogger(__name__)

READ_ONLY_FIELDS = ("_id", "createdAt", "updatedAt")
PRICING_FIELDS = ("basePrice", "pricePerKm", "pricePerMinute", "minimumFare", "surgeMultiplier")
AVAILABILITY_FIELDS = ("isActive", "availabilityZones", "timeSlots")


def _sort_value(vehicle: Record, sort_by: str) -> Any:
    if sort_by == "basePrice":
        return vehicle.get("pricing", {}).get("basePrice", 0)
    if sort_by == "name":
        return str(vehicle.get("name", "")).lower()
    return vehicle.get(sort_by, 0)


def _writable(body: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in body.items() if key not in READ_ONLY_FIELDS}


class VehicleService:
    """Vehicle type catalogue over a record store."""

    def __init__(self, store: RecordStore | None = None) -> None:
        self.store = store or RecordStore("vehicles")

    def _not_found(self) -> JSONResponse:
        return failure(404, "Vehicle type not found")

    async def get_vehicles(self, request: ValidatedRequest) -> JSONResponse:
        query = request.query

        def matches(vehicle: Record) -> bool:
            if "status" in query and vehicle.get("status") != query["status"]:
                return False
            return not ("category" in query and vehicle.get("category") != query["category"])

        sort_by = query["sortBy"]
        vehicles, pagination = self.store.page(
            matches,
            sort_key=lambda v: _sort_value(v, sort_by),
            descending=query["sortOrder"] == "desc",
            page=query["page"],
            limit=query["limit"],
        )
        return success({"vehicles": vehicles, "pagination": pagination})

    async def get_vehicle_by_id(self, request: ValidatedRequest) -> JSONResponse:
        vehicle = self.store.get(request.params["id"])
        if vehicle is None:
            return self._not_found()
        return success({"vehicle": vehicle})

    async def create_vehicle(self, request: ValidatedRequest) -> JSONResponse:
        data: dict[str, Any] = {"status": "active", "isActive": True, "sortOrder": 0}
        data.update(_writable(request.body))
        vehicle = self.store.create(data)
        logger.info(f"Vehicle type created: {vehicle['name']}")
        return success({"vehicle": vehicle}, status_code=201, message="Vehicle type created successfully")

    async def update_vehicle(self, request: ValidatedRequest) -> JSONResponse:
        return self._apply_update(request, request.body)

    async def patch_vehicle(self, request: ValidatedRequest) -> JSONResponse:
        """Partial update; the route only checks the id so the body is validated here."""
        outcome = ValidationPipeline(UPDATE_VEHICLE_BODY_RULES).run(RequestData(body=request.body))
        if not outcome.is_valid:
            return failure(422, "Validation failed", outcome.violations)
        return self._apply_update(request, outcome.data.body)

    def _apply_update(self, request: ValidatedRequest, body: dict[str, Any]) -> JSONResponse:
        vehicle = self.store.update(request.params["id"], _writable(body))
        if vehicle is None:
            return self._not_found()
        logger.info(f"Vehicle type updated: {vehicle['name']}")
        return success({"vehicle": vehicle}, message="Vehicle type updated successfully")

    async def update_vehicle_availability(self, request: ValidatedRequest) -> JSONResponse:
        changes = {key: request.body[key] for key in AVAILABILITY_FIELDS if key in request.body}
        vehicle = self.store.update(request.params["id"], changes)
        if vehicle is None:
            return self._not_found()
        return success(
            {key: vehicle.get(key) for key in AVAILABILITY_FIELDS},
            message="Vehicle availability updated successfully",
        )

    async def update_vehicle_pricing(self, request: ValidatedRequest) -> JSONResponse:
        changes = {key: request.body[key] for key in PRICING_FIELDS if key in request.body}
        vehicle = self.store.update(request.params["id"], {"pricing": changes})
        if vehicle is None:
            return self._not_found()
        return success({"pricing": vehicle["pricing"]}, message="Vehicle pricing updated successfully")

    async def delete_vehicle(self, request: ValidatedRequest) -> JSONResponse:
        """Soft delete: the type stays on record but is deprecated and inactive."""
        vehicle = self.store.update(request.params["id"], {"status": "deprecated", "isActive": False})
        if vehicle is None:
            return self._not_found()
        logger.info(f"Vehicle type soft deleted: {vehicle['name']}")
        return success(message="Vehicle type deleted successfully")
