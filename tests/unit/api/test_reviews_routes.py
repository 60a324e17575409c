"""HTTP tests for the review routes through the full app."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from sendme.errors import UnauthenticatedError
from sendme.routing import ValidatedRequest
from sendme.validation import RequestData

ADMIN_ID = "a" * 24
CUSTOMER_ID = "c" * 24
DRIVER_ID = "d" * 24
OTHER_DRIVER_ID = "e" * 24
BOOKING_ID = "507f1f77bcf86cd799439011"
UNKNOWN_ID = "0123456789abcdef01234567"


def review_body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "bookingId": BOOKING_ID,
        "revieweeId": DRIVER_ID,
        "reviewType": "customer_to_driver",
        "rating": 5,
    }
    body.update(overrides)
    return body


@pytest.fixture
def as_customer(headers):
    return headers(CUSTOMER_ID, "customer")


@pytest.fixture
def as_driver(headers):
    return headers(DRIVER_ID, "driver")


@pytest.fixture
def as_admin(headers):
    return headers(ADMIN_ID, "admin")


@pytest.fixture
def review_id(client, as_customer) -> str:
    response = client.post(
        "/api/reviews",
        json=review_body(review="Great", detailedRatings={"punctuality": 4}, tags=["on_time"]),
        headers=as_customer,
    )
    assert response.status_code == 201
    return response.json()["data"]["review"]["_id"]


class TestCreateReview:
    """POST /api/reviews"""

    def test_requires_login(self, client):
        response = client.post("/api/reviews", json=review_body())
        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "You are not logged in! Please log in to get access.",
        }

    def test_admin_is_forbidden(self, client, as_admin):
        response = client.post("/api/reviews", json=review_body(), headers=as_admin)
        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_rating_out_of_range(self, client, as_customer):
        response = client.post("/api/reviews", json=review_body(rating=6), headers=as_customer)
        assert response.status_code == 422
        assert response.json() == {
            "success": False,
            "message": "Validation failed",
            "errors": [{"field": "body.rating", "message": "Rating must be between 1 and 5"}],
        }

    def test_bad_tag_element(self, client, as_customer):
        response = client.post(
            "/api/reviews",
            json=review_body(tags=["excellent_service", "not_a_real_tag"]),
            headers=as_customer,
        )
        assert response.status_code == 422
        assert response.json()["errors"] == [{"field": "body.tags[1]", "message": "Invalid tag"}]

    def test_created(self, client, as_customer):
        response = client.post(
            "/api/reviews", json=review_body(review="  Very careful  ", rating="4"), headers=as_customer
        )
        assert response.status_code == 201
        review = response.json()["data"]["review"]
        assert review["reviewer"] == CUSTOMER_ID
        assert review["reviewee"] == DRIVER_ID
        assert review["rating"] == 4
        assert review["review"] == "Very careful"
        assert review["status"] == "approved"
        assert review["response"] is None

    def test_malformed_body(self, client, as_customer):
        response = client.post(
            "/api/reviews",
            content=b"[1, 2]",
            headers={**as_customer, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Request body must be a JSON object"


class TestReadReviews:
    """GET routes for reviews."""

    def test_summary_is_public(self, client, review_id):
        response = client.get(f"/api/reviews/user/{DRIVER_ID}/summary")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["reviewType"] == "customer_to_driver"
        assert data["rating"] == {"averageRating": 5.0, "totalReviews": 1}
        assert data["detailedRatings"] == {"punctuality": 4.0}

    def test_summary_bad_user_id(self, client):
        response = client.get("/api/reviews/user/not-an-id/summary")
        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "params.userId"

    def test_list_requires_login(self, client):
        assert client.get("/api/reviews").status_code == 401

    def test_list_defaults(self, client, review_id, as_customer):
        response = client.get("/api/reviews", headers=as_customer)
        assert response.status_code == 200
        data = response.json()["data"]
        assert [r["_id"] for r in data["reviews"]] == [review_id]
        assert data["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}

    def test_list_scoped_to_caller(self, client, review_id, headers):
        response = client.get("/api/reviews", headers=headers(OTHER_DRIVER_ID, "driver"))
        assert response.json()["data"]["reviews"] == []

    def test_driver_sees_received_reviews(self, client, review_id, as_driver):
        response = client.get("/api/reviews", headers=as_driver)
        assert [r["_id"] for r in response.json()["data"]["reviews"]] == [review_id]

    @pytest.mark.parametrize(
        "query, field",
        [
            ("limit=0", "query.limit"),
            ("limit=101", "query.limit"),
            ("page=0", "query.page"),
            ("rating=9", "query.rating"),
            ("sortOrder=up", "query.sortOrder"),
            ("reviewerId=123", "query.reviewerId"),
        ],
    )
    def test_list_query_violations(self, client, as_admin, query, field):
        response = client.get(f"/api/reviews?{query}", headers=as_admin)
        assert response.status_code == 422
        assert [e["field"] for e in response.json()["errors"]] == [field]

    def test_get_by_id(self, client, review_id, as_driver):
        response = client.get(f"/api/reviews/{review_id}", headers=as_driver)
        assert response.status_code == 200
        assert response.json()["data"]["review"]["_id"] == review_id

    def test_get_by_id_other_user(self, client, review_id, headers):
        response = client.get(f"/api/reviews/{review_id}", headers=headers(OTHER_DRIVER_ID, "driver"))
        assert response.status_code == 403

    def test_get_unknown(self, client, as_admin):
        response = client.get(f"/api/reviews/{UNKNOWN_ID}", headers=as_admin)
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Review not found"}

    def test_get_invalid_id(self, client, as_admin):
        response = client.get("/api/reviews/123", headers=as_admin)
        assert response.status_code == 422
        assert response.json()["errors"] == [{"field": "params.id", "message": "Invalid review ID"}]


class TestReviewInteractions:
    """Votes, responses, updates."""

    def test_vote_once(self, client, review_id, as_driver):
        first = client.post(f"/api/reviews/{review_id}/vote", json={"voteType": "helpful"}, headers=as_driver)
        assert first.status_code == 200
        assert first.json()["data"] == {"helpfulVotes": 1, "unhelpfulVotes": 0}

        second = client.post(f"/api/reviews/{review_id}/vote", json={"voteType": "helpful"}, headers=as_driver)
        assert second.status_code == 400

    def test_vote_type_checked(self, client, review_id, as_driver):
        response = client.post(f"/api/reviews/{review_id}/vote", json={"voteType": "meh"}, headers=as_driver)
        assert response.status_code == 422

    def test_response_by_reviewee(self, client, review_id, as_driver, as_customer):
        denied = client.post(f"/api/reviews/{review_id}/response", json={"content": "Thanks"}, headers=as_customer)
        assert denied.status_code == 403

        response = client.post(f"/api/reviews/{review_id}/response", json={"content": "  Thanks!  "}, headers=as_driver)
        assert response.status_code == 200
        assert response.json()["data"]["review"]["response"]["content"] == "Thanks!"

    def test_blank_response_rejected(self, client, review_id, as_driver):
        response = client.post(f"/api/reviews/{review_id}/response", json={"content": "   "}, headers=as_driver)
        assert response.status_code == 422
        assert response.json()["errors"] == [{"field": "body.content", "message": "Response content is required"}]

    def test_put_update(self, client, review_id, as_customer):
        response = client.put(f"/api/reviews/{review_id}", json={"rating": 3}, headers=as_customer)
        assert response.status_code == 200
        assert response.json()["data"]["review"]["rating"] == 3

    def test_put_rejects_unlisted_detailed_rating_range(self, client, review_id, as_customer):
        response = client.put(
            f"/api/reviews/{review_id}", json={"detailedRatings": {"communication": 0}}, headers=as_customer
        )
        assert response.status_code == 422

    def test_put_by_non_author(self, client, review_id, as_driver):
        response = client.put(f"/api/reviews/{review_id}", json={"rating": 1}, headers=as_driver)
        assert response.status_code == 403

    def test_patch_validates_body_in_handler(self, client, review_id, as_customer):
        response = client.patch(f"/api/reviews/{review_id}", json={"rating": 6}, headers=as_customer)
        assert response.status_code == 422
        assert response.json()["errors"] == [{"field": "body.rating", "message": "Rating must be between 1 and 5"}]

    def test_patch_update(self, client, review_id, as_customer):
        response = client.patch(f"/api/reviews/{review_id}", json={"review": " Edited "}, headers=as_customer)
        assert response.status_code == 200
        assert response.json()["data"]["review"]["review"] == "Edited"

    def test_put_null_rating_rejected(self, client, review_id, as_customer):
        response = client.put(f"/api/reviews/{review_id}", json={"rating": None}, headers=as_customer)
        assert response.status_code == 422
        assert response.json()["errors"] == [{"field": "body.rating", "message": "Rating must be between 1 and 5"}]

        summary = client.get(f"/api/reviews/user/{DRIVER_ID}/summary")
        assert summary.status_code == 200
        assert summary.json()["data"]["rating"] == {"averageRating": 5.0, "totalReviews": 1}

    @pytest.mark.parametrize("method", ["put", "patch"])
    def test_scalar_detailed_ratings_rejected(self, client, review_id, as_customer, method):
        send = getattr(client, method)
        response = send(f"/api/reviews/{review_id}", json={"detailedRatings": 5}, headers=as_customer)
        assert response.status_code == 422
        assert response.json()["errors"] == [
            {"field": "body.detailedRatings", "message": "Detailed ratings must be an object"}
        ]

        summary = client.get(f"/api/reviews/user/{DRIVER_ID}/summary")
        assert summary.status_code == 200
        assert summary.json()["data"]["detailedRatings"] == {"punctuality": 4.0}

    def test_null_detailed_rating_rejected(self, client, review_id, as_customer):
        response = client.put(
            f"/api/reviews/{review_id}", json={"detailedRatings": {"punctuality": None}}, headers=as_customer
        )
        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "body.detailedRatings.punctuality"


class TestModeration:
    """Admin-only routes."""

    def test_driver_cannot_moderate(self, client, review_id, as_driver):
        response = client.patch(f"/api/reviews/{review_id}/moderate", json={"status": "bogus"}, headers=as_driver)
        assert response.status_code == 403
        assert response.json() == {
            "success": False,
            "message": "You do not have permission to perform this action",
        }

    def test_admin_moderates(self, client, review_id, as_admin):
        response = client.patch(
            f"/api/reviews/{review_id}/moderate",
            json={"status": "hidden", "moderationNotes": "  spam  "},
            headers=as_admin,
        )
        assert response.status_code == 200
        review = response.json()["data"]["review"]
        assert review["status"] == "hidden"
        assert review["moderatedBy"] == ADMIN_ID
        assert review["moderationNotes"] == "spam"

    def test_hidden_reviews_leave_summary(self, client, review_id, as_admin):
        client.patch(f"/api/reviews/{review_id}/moderate", json={"status": "hidden"}, headers=as_admin)
        data = client.get(f"/api/reviews/user/{DRIVER_ID}/summary").json()["data"]
        assert data["rating"] == {"averageRating": 0, "totalReviews": 0}

    def test_delete(self, client, review_id, as_admin, as_customer):
        assert client.delete(f"/api/reviews/{review_id}", headers=as_customer).status_code == 403

        response = client.delete(f"/api/reviews/{review_id}", headers=as_admin)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Review deleted successfully"}
        assert client.get(f"/api/reviews/{review_id}", headers=as_admin).status_code == 404


class TestRouting:
    """Catch-all behaviour."""

    def test_unknown_route(self, client):
        response = client.get("/api/bookings")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Can't find GET /bookings on this server"}

    def test_invalid_token_is_anonymous(self, client):
        response = client.get("/api/reviews", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_invalid_token_still_reaches_public_route(self, client):
        response = client.get(f"/api/reviews/user/{DRIVER_ID}/summary", headers={"Authorization": "Bearer junk"})
        assert response.status_code == 200

    def test_anonymous_malformed_body_is_unauthenticated(self, client):
        response = client.post("/api/reviews", content=b"{not json", headers={"Content-Type": "application/json"})
        assert response.status_code == 401

    def test_unknown_route_with_malformed_body(self, client, as_customer):
        response = client.post(
            "/api/nowhere", content=b"[1, 2]", headers={**as_customer, "Content-Type": "application/json"}
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Can't find POST /nowhere on this server"


class TestReviewServiceDirect:
    """Handlers called without the gating layer in front of them."""

    @pytest.mark.asyncio
    async def test_anonymous_caller_rejected(self, review_service):
        request = ValidatedRequest(route=MagicMock(), data=RequestData(body=review_body()), principal=None)
        with pytest.raises(UnauthenticatedError):
            await review_service.create_review(request)
        assert len(review_service.store) == 0
