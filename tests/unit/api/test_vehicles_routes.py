"""HTTP tests for the vehicle type routes through the full app."""

from __future__ import annotations

from typing import Any

import pytest

ADMIN_ID = "a" * 24
UNKNOWN_ID = "0123456789abcdef01234567"


def vehicle_body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "name": "Small Van",
        "description": "Compact van for city deliveries",
        "category": "van",
        "pricing": {"basePrice": 10, "pricePerKm": 1.5},
    }
    body.update(overrides)
    return body


@pytest.fixture
def as_admin(headers):
    return headers(ADMIN_ID, "admin")


@pytest.fixture
def vehicle_id(client, as_admin) -> str:
    response = client.post("/api/vehicles", json=vehicle_body(), headers=as_admin)
    assert response.status_code == 201
    return response.json()["data"]["vehicle"]["_id"]


class TestListVehicles:
    """GET /api/vehicles"""

    def test_public_with_defaults(self, client, vehicle_id):
        response = client.get("/api/vehicles")
        assert response.status_code == 200
        data = response.json()["data"]
        assert [v["_id"] for v in data["vehicles"]] == [vehicle_id]
        assert data["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}

    def test_handler_gets_defaults(self, client, vehicle_service):
        seen = {}

        async def spy(request):
            seen.update(request.query)
            return {"vehicles": []}

        vehicle_service.get_vehicles = spy
        # Handlers are bound at startup, so rebuild the app around the patched service
        from fastapi.testclient import TestClient

        from api.main import create_app

        app = create_app(client.app.state.settings, vehicle_service=vehicle_service)
        with TestClient(app) as fresh:
            assert fresh.get("/api/vehicles").status_code == 200
        assert seen == {"page": 1, "limit": 20, "sortBy": "sortOrder", "sortOrder": "asc"}

    def test_filters_and_sorting(self, client, as_admin):
        client.post("/api/vehicles", json=vehicle_body(name="Truck", category="truck", sortOrder=2), headers=as_admin)
        client.post("/api/vehicles", json=vehicle_body(name="Bike", category="bike", sortOrder=1), headers=as_admin)
        client.post(
            "/api/vehicles",
            json=vehicle_body(name="Cargo Bike", category="bike", pricing={"basePrice": 4, "pricePerKm": 0.5}),
            headers=as_admin,
        )

        bikes = client.get("/api/vehicles?category=%20bike%20").json()["data"]["vehicles"]
        assert sorted(v["name"] for v in bikes) == ["Bike", "Cargo Bike"]

        by_price = client.get("/api/vehicles?sortBy=basePrice&sortOrder=desc").json()["data"]["vehicles"]
        assert [v["pricing"]["basePrice"] for v in by_price] == [10, 10, 4]

    @pytest.mark.parametrize(
        "query, field",
        [
            ("status=flying", "query.status"),
            ("sortBy=color", "query.sortBy"),
            ("limit=abc", "query.limit"),
            ("category=%20%20", "query.category"),
        ],
    )
    def test_query_violations(self, client, query, field):
        response = client.get(f"/api/vehicles?{query}")
        assert response.status_code == 422
        assert [e["field"] for e in response.json()["errors"]] == [field]


class TestVehicleWrites:
    """Admin-only vehicle type routes."""

    def test_create_requires_admin(self, client, headers):
        assert client.post("/api/vehicles", json=vehicle_body()).status_code == 401
        response = client.post("/api/vehicles", json=vehicle_body(), headers=headers("c" * 24, "customer"))
        assert response.status_code == 403

    def test_create_defaults(self, client, vehicle_id, as_admin):
        vehicle = client.get(f"/api/vehicles/{vehicle_id}").json()["data"]["vehicle"]
        assert vehicle["status"] == "active"
        assert vehicle["isActive"] is True
        assert vehicle["sortOrder"] == 0

    def test_create_violations(self, client, as_admin):
        body = vehicle_body(name="  ", pricing={"basePrice": -1}, dimensions={"width": -2})
        response = client.post("/api/vehicles", json=body, headers=as_admin)
        assert response.status_code == 422
        assert [e["field"] for e in response.json()["errors"]] == [
            "body.name",
            "body.pricing.basePrice",
            "body.pricing.pricePerKm",
            "body.dimensions.width",
        ]

    def test_put_update(self, client, vehicle_id, as_admin):
        response = client.put(
            f"/api/vehicles/{vehicle_id}", json={"name": " Large Van ", "pricing": {"basePrice": 20}}, headers=as_admin
        )
        assert response.status_code == 200
        vehicle = response.json()["data"]["vehicle"]
        assert vehicle["name"] == "Large Van"
        assert vehicle["pricing"] == {"basePrice": 20.0, "pricePerKm": 1.5}

    def test_put_empty_name(self, client, vehicle_id, as_admin):
        response = client.put(f"/api/vehicles/{vehicle_id}", json={"name": ""}, headers=as_admin)
        assert response.status_code == 422

    def test_patch_validates_body_in_handler(self, client, vehicle_id, as_admin):
        response = client.patch(f"/api/vehicles/{vehicle_id}", json={"description": "x" * 501}, headers=as_admin)
        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "body.description"

    def test_null_base_price_rejected(self, client, vehicle_id, as_admin):
        response = client.put(f"/api/vehicles/{vehicle_id}", json={"pricing": {"basePrice": None}}, headers=as_admin)
        assert response.status_code == 422
        assert response.json()["errors"] == [
            {"field": "body.pricing.basePrice", "message": "Base price must be a positive number"}
        ]
        assert client.get("/api/vehicles?sortBy=basePrice").status_code == 200

    @pytest.mark.parametrize("field", ["pricing", "capacity", "dimensions"])
    def test_scalar_sub_object_rejected(self, client, vehicle_id, as_admin, field):
        response = client.put(f"/api/vehicles/{vehicle_id}", json={field: 5}, headers=as_admin)
        assert response.status_code == 422
        assert [e["field"] for e in response.json()["errors"]] == [f"body.{field}"]

        listed = client.get("/api/vehicles?sortBy=basePrice")
        assert listed.status_code == 200
        assert listed.json()["data"]["vehicles"][0]["pricing"] == {"basePrice": 10, "pricePerKm": 1.5}

    def test_patch_scalar_pricing_rejected(self, client, vehicle_id, as_admin):
        response = client.patch(f"/api/vehicles/{vehicle_id}", json={"pricing": "cheap"}, headers=as_admin)
        assert response.status_code == 422
        assert response.json()["errors"] == [{"field": "body.pricing", "message": "Pricing must be an object"}]

    def test_sort_order_must_be_integer(self, client, vehicle_id, as_admin):
        response = client.put(f"/api/vehicles/{vehicle_id}", json={"sortOrder": "first"}, headers=as_admin)
        assert response.status_code == 422
        assert response.json()["errors"] == [
            {"field": "body.sortOrder", "message": "Sort order must be a non-negative integer"}
        ]
        assert client.get("/api/vehicles").status_code == 200

    def test_availability(self, client, vehicle_id, as_admin):
        response = client.patch(
            f"/api/vehicles/{vehicle_id}/availability",
            json={"isActive": "false", "availabilityZones": ["north"]},
            headers=as_admin,
        )
        assert response.status_code == 200
        assert response.json()["data"] == {"isActive": False, "availabilityZones": ["north"], "timeSlots": None}

    def test_availability_zones_must_be_array(self, client, vehicle_id, as_admin):
        response = client.patch(
            f"/api/vehicles/{vehicle_id}/availability", json={"availabilityZones": "north"}, headers=as_admin
        )
        assert response.status_code == 422

    def test_pricing(self, client, vehicle_id, as_admin):
        response = client.patch(
            f"/api/vehicles/{vehicle_id}/pricing", json={"surgeMultiplier": 1.5, "minimumFare": "5"}, headers=as_admin
        )
        assert response.status_code == 200
        assert response.json()["data"]["pricing"] == {
            "basePrice": 10,
            "pricePerKm": 1.5,
            "surgeMultiplier": 1.5,
            "minimumFare": 5.0,
        }

    def test_surge_below_one(self, client, vehicle_id, as_admin):
        response = client.patch(f"/api/vehicles/{vehicle_id}/pricing", json={"surgeMultiplier": 0.9}, headers=as_admin)
        assert response.status_code == 422
        assert response.json()["errors"] == [
            {"field": "body.surgeMultiplier", "message": "Surge multiplier must be at least 1"}
        ]

    def test_soft_delete(self, client, vehicle_id, as_admin):
        response = client.delete(f"/api/vehicles/{vehicle_id}", headers=as_admin)
        assert response.status_code == 200

        vehicle = client.get(f"/api/vehicles/{vehicle_id}").json()["data"]["vehicle"]
        assert vehicle["status"] == "deprecated"
        assert vehicle["isActive"] is False

    def test_unknown_vehicle(self, client, as_admin):
        response = client.delete(f"/api/vehicles/{UNKNOWN_ID}", headers=as_admin)
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Vehicle type not found"}
