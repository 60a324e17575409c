"""
Review handlers.

Handlers receive requests that already passed the access gate and the
route's rule-set, so they read typed values from ``request.body`` /
``request.query`` without re-checking them.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi.responses import JSONResponse

from sendme.errors import UnauthenticatedError
from sendme.routing import ValidatedRequest
from sendme.validation import RequestData, ValidationPipeline

from ..schemas.reviews import DETAILED_RATINGS, UPDATE_REVIEW_BODY_RULES
from ..utils.responses import failure, success
from .record_store import Record, RecordStore, utc_now

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("rating", "review", "detailedRatings", "tags")


def _principal_id(request: ValidatedRequest) -> str:
    if request.principal is None:
        raise UnauthenticatedError()
    return request.principal.id


def _is_admin(request: ValidatedRequest) -> bool:
    return request.principal is not None and "admin" in request.principal.roles


class ReviewService:
    """Review CRUD, voting, responses and moderation over a record store."""

    def __init__(self, store: RecordStore | None = None) -> None:
        self.store = store or RecordStore("reviews")

    def _not_found(self) -> JSONResponse:
        return failure(404, "Review not found")

    async def get_user_rating_summary(self, request: ValidatedRequest) -> JSONResponse:
        """Average rating and review count for a user's approved reviews."""
        user_id = request.params["userId"]
        review_type = request.query["reviewType"]

        reviews = self.store.find(
            lambda r: r["reviewee"] == user_id and r["reviewType"] == review_type and r["status"] == "approved"
        )
        total = len(reviews)
        average = round(sum(r["rating"] for r in reviews) / total, 1) if total else 0

        detailed: dict[str, float] | None = None
        if review_type == "customer_to_driver":
            detailed = {}
            for name, _ in DETAILED_RATINGS:
                scores = [r["detailedRatings"][name] for r in reviews if name in r.get("detailedRatings", {})]
                if scores:
                    detailed[name] = round(sum(scores) / len(scores), 1)

        return success(
            {
                "userId": user_id,
                "reviewType": review_type,
                "rating": {"averageRating": average, "totalReviews": total},
                "detailedRatings": detailed,
            }
        )

    async def get_reviews(self, request: ValidatedRequest) -> JSONResponse:
        """List reviews visible to the caller.

        Customers see reviews they wrote, drivers see reviews they wrote or
        received, admins see everything and may filter by reviewer/reviewee.
        """
        query = request.query
        principal = request.principal
        if principal is None:
            raise UnauthenticatedError()
        admin = _is_admin(request)

        def visible(review: Record) -> bool:
            if not admin:
                if "driver" in principal.roles:
                    if principal.id not in (review["reviewer"], review["reviewee"]):
                        return False
                elif review["reviewer"] != principal.id:
                    return False
            if admin and "reviewerId" in query and review["reviewer"] != query["reviewerId"]:
                return False
            if admin and "revieweeId" in query and review["reviewee"] != query["revieweeId"]:
                return False
            for key in ("reviewType", "status", "rating"):
                if key in query and review[key] != query[key]:
                    return False
            return True

        sort_by = query["sortBy"]
        reviews, pagination = self.store.page(
            visible,
            sort_key=lambda r: r.get(sort_by, 0),
            descending=query["sortOrder"] == "desc",
            page=query["page"],
            limit=query["limit"],
        )
        return success({"reviews": reviews, "pagination": pagination})

    async def get_review_by_id(self, request: ValidatedRequest) -> JSONResponse:
        review = self.store.get(request.params["id"])
        if review is None:
            return self._not_found()

        if not _is_admin(request) and _principal_id(request) not in (review["reviewer"], review["reviewee"]):
            return failure(403, "You do not have permission to view this review")

        return success({"review": review})

    async def create_review(self, request: ValidatedRequest) -> JSONResponse:
        body = request.body
        review = self.store.create(
            {
                "booking": body["bookingId"],
                "reviewer": _principal_id(request),
                "reviewee": body["revieweeId"],
                "reviewType": body["reviewType"],
                "rating": body["rating"],
                "review": body.get("review", ""),
                "detailedRatings": body.get("detailedRatings", {}),
                "tags": body.get("tags", []),
                "status": "approved",
                "helpfulVotes": 0,
                "unhelpfulVotes": 0,
                "voters": [],
                "response": None,
            }
        )
        logger.info(f"Review created: {review['_id']} by {review['reviewer']}")
        return success({"review": review}, status_code=201, message="Review created successfully")

    async def vote_on_review(self, request: ValidatedRequest) -> JSONResponse:
        review = self.store.get(request.params["id"])
        if review is None:
            return self._not_found()

        voter = _principal_id(request)
        if voter in review["voters"]:
            return failure(400, "You have already voted on this review")

        counter = "helpfulVotes" if request.body["voteType"] == "helpful" else "unhelpfulVotes"
        updated = self.store.update(
            review["_id"],
            {counter: review[counter] + 1, "voters": [*review["voters"], voter]},
        )
        if updated is None:
            return self._not_found()
        return success(
            {"helpfulVotes": updated["helpfulVotes"], "unhelpfulVotes": updated["unhelpfulVotes"]},
            message="Vote recorded successfully",
        )

    async def add_review_response(self, request: ValidatedRequest) -> JSONResponse:
        review = self.store.get(request.params["id"])
        if review is None:
            return self._not_found()

        if review["reviewee"] != _principal_id(request):
            return failure(403, "Only the reviewee can respond to this review")
        if review["response"]:
            return failure(400, "Response already exists for this review")

        updated = self.store.update(
            review["_id"],
            {"response": {"content": request.body["content"], "respondedAt": utc_now()}},
        )
        return success({"review": updated}, message="Response added successfully")

    async def update_review(self, request: ValidatedRequest) -> JSONResponse:
        return self._apply_update(request, request.body)

    async def patch_review(self, request: ValidatedRequest) -> JSONResponse:
        """Partial update; the route only checks the id so the body is validated here."""
        outcome = ValidationPipeline(UPDATE_REVIEW_BODY_RULES).run(RequestData(body=request.body))
        if not outcome.is_valid:
            return failure(422, "Validation failed", outcome.violations)
        return self._apply_update(request, outcome.data.body)

    def _apply_update(self, request: ValidatedRequest, body: dict[str, Any]) -> JSONResponse:
        review = self.store.get(request.params["id"])
        if review is None:
            return self._not_found()

        if not _is_admin(request) and review["reviewer"] != _principal_id(request):
            return failure(403, "You can only update your own reviews")

        changes = {key: body[key] for key in UPDATABLE_FIELDS if key in body}
        updated = self.store.update(review["_id"], changes)
        return success({"review": updated}, message="Review updated successfully")

    async def moderate_review(self, request: ValidatedRequest) -> JSONResponse:
        review = self.store.get(request.params["id"])
        if review is None:
            return self._not_found()

        changes: dict[str, Any] = {
            "status": request.body["status"],
            "moderatedBy": _principal_id(request),
            "moderatedAt": utc_now(),
        }
        if "moderationNotes" in request.body:
            changes["moderationNotes"] = request.body["moderationNotes"]

        updated = self.store.update(review["_id"], changes)
        logger.info(f"Review {review['_id']} moderated to {changes['status']} by {changes['moderatedBy']}")
        return success({"review": updated}, message="Review moderated successfully")

    async def delete_review(self, request: ValidatedRequest) -> JSONResponse:
        if not self.store.delete(request.params["id"]):
            return self._not_found()
        logger.info(f"Review deleted: {request.params['id']}")
        return success(message="Review deleted successfully")
