"""
Reviews Router - Route declarations for customer and driver reviews.

Each route binds a verb and path to an access requirement, a rule-set and a
``ReviewService`` handler. Nothing here inspects requests; the dispatch
sequence does that before a handler runs.
"""

from __future__ import annotations

from sendme.access import AccessRequirement
from sendme.routing import RouteTable

from ..schemas.reviews import (
    CREATE_REVIEW_RULES,
    DELETE_REVIEW_RULES,
    GET_REVIEW_RULES,
    MODERATE_REVIEW_RULES,
    PATCH_REVIEW_RULES,
    RATING_SUMMARY_RULES,
    REVIEW_RESPONSE_RULES,
    UPDATE_REVIEW_RULES,
    VOTE_REVIEW_RULES,
    list_reviews_rules,
)
from ..services.review_service import ReviewService

PREFIX = "/reviews"

PUBLIC = AccessRequirement.public()
SIGNED_IN = AccessRequirement.authenticated()
REVIEWERS = AccessRequirement.restricted_to("customer", "driver")
ADMIN = AccessRequirement.restricted_to("admin")


def register_review_routes(table: RouteTable, service: ReviewService, default_page_size: int = 20) -> None:
    """Register every review route on ``table``.

    The summary route goes first so ``/reviews/user/...`` is never read as a
    review id.
    """
    p = PREFIX
    table.register("GET", f"{p}/user/{{userId}}/summary", PUBLIC, RATING_SUMMARY_RULES, service.get_user_rating_summary)
    table.register("GET", p, SIGNED_IN, list_reviews_rules(default_page_size), service.get_reviews)
    table.register("GET", f"{p}/{{id}}", SIGNED_IN, GET_REVIEW_RULES, service.get_review_by_id)
    table.register("POST", p, REVIEWERS, CREATE_REVIEW_RULES, service.create_review)
    table.register("POST", f"{p}/{{id}}/vote", SIGNED_IN, VOTE_REVIEW_RULES, service.vote_on_review)
    table.register("POST", f"{p}/{{id}}/response", SIGNED_IN, REVIEW_RESPONSE_RULES, service.add_review_response)
    table.register("PUT", f"{p}/{{id}}", SIGNED_IN, UPDATE_REVIEW_RULES, service.update_review)
    table.register("PATCH", f"{p}/{{id}}", SIGNED_IN, PATCH_REVIEW_RULES, service.patch_review)
    table.register("PATCH", f"{p}/{{id}}/moderate", ADMIN, MODERATE_REVIEW_RULES, service.moderate_review)
    table.register("DELETE", f"{p}/{{id}}", ADMIN, DELETE_REVIEW_RULES, service.delete_review)
