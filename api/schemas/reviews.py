"""
Request rule-sets for review endpoints.
"""

from __future__ import annotations

from sendme.validation import (
    Rule,
    is_array,
    is_identifier,
    is_in,
    is_int,
    is_object,
    max_length,
    not_empty,
    optional,
    trim,
)

REVIEW_TYPES = ("customer_to_driver", "driver_to_customer")
REVIEW_STATUSES = ("pending", "approved", "rejected", "hidden")
REVIEW_SORT_FIELDS = ("createdAt", "rating", "helpfulVotes")
SORT_ORDERS = ("asc", "desc")
VOTE_TYPES = ("helpful", "unhelpful")

REVIEW_TAGS = (
    "excellent_service",
    "on_time",
    "professional",
    "friendly",
    "careful_handling",
    "clean_vehicle",
    "good_communication",
    "fast_delivery",
    "helpful",
    "courteous",
    "late",
    "unprofessional",
    "poor_communication",
    "damaged_package",
    "rude_behavior",
    "dirty_vehicle",
    "careless_handling",
)

# (field, label) for each sub-rating; PUT only accepts the first three
DETAILED_RATINGS = (
    ("punctuality", "Punctuality"),
    ("communication", "Communication"),
    ("professionalism", "Professionalism"),
    ("carHandling", "Car handling"),
    ("packageCondition", "Package condition"),
)
UPDATABLE_DETAILED_RATINGS = DETAILED_RATINGS[:3]

RATING_MESSAGE = "Rating must be between 1 and 5"
REVIEW_TEXT_MESSAGE = "Review cannot exceed 1000 characters"


def review_id_rules() -> list[Rule]:
    return [is_identifier("params.id", "Invalid review ID")]


def _detailed_rating_rules(ratings: tuple[tuple[str, str], ...]) -> list[Rule]:
    return optional(
        is_object("body.detailedRatings", "Detailed ratings must be an object"),
        *(
            is_int(f"body.detailedRatings.{name}", f"{label} rating must be between 1 and 5", minimum=1, maximum=5)
            for name, label in ratings
        ),
    )


def _review_text_rules() -> list[Rule]:
    return optional(
        trim("body.review"),
        max_length("body.review", REVIEW_TEXT_MESSAGE, maximum=1000),
    )


def _tag_rules() -> list[Rule]:
    return optional(
        is_array("body.tags", "Tags must be an array"),
        is_in("body.tags.*", REVIEW_TAGS, "Invalid tag"),
    )


RATING_SUMMARY_RULES: list[Rule] = [
    is_identifier("params.userId", "Invalid user ID"),
    *optional(is_in("query.reviewType", REVIEW_TYPES, "Invalid review type", default="customer_to_driver")),
]


def list_reviews_rules(default_limit: int = 20) -> list[Rule]:
    return optional(
        is_int("query.page", "Page must be a positive integer", minimum=1, default=1),
        is_int("query.limit", "Limit must be between 1 and 100", minimum=1, maximum=100, default=default_limit),
        is_in("query.reviewType", REVIEW_TYPES, "Invalid review type"),
        is_in("query.status", REVIEW_STATUSES, "Invalid status"),
        is_int("query.rating", RATING_MESSAGE, minimum=1, maximum=5),
        is_in("query.sortBy", REVIEW_SORT_FIELDS, "Invalid sort field", default="createdAt"),
        is_in("query.sortOrder", SORT_ORDERS, "Sort order must be asc or desc", default="desc"),
        is_identifier("query.reviewerId", "Invalid reviewer ID"),
        is_identifier("query.revieweeId", "Invalid reviewee ID"),
    )


GET_REVIEW_RULES: list[Rule] = review_id_rules()

CREATE_REVIEW_RULES: list[Rule] = [
    is_identifier("body.bookingId", "Valid booking ID is required"),
    is_identifier("body.revieweeId", "Valid reviewee ID is required"),
    is_in("body.reviewType", REVIEW_TYPES, "Invalid review type"),
    is_int("body.rating", RATING_MESSAGE, minimum=1, maximum=5),
    *_review_text_rules(),
    *_detailed_rating_rules(DETAILED_RATINGS),
    *_tag_rules(),
]

VOTE_REVIEW_RULES: list[Rule] = [
    *review_id_rules(),
    is_in("body.voteType", VOTE_TYPES, "Vote type must be helpful or unhelpful"),
]

REVIEW_RESPONSE_RULES: list[Rule] = [
    *review_id_rules(),
    trim("body.content"),
    not_empty("body.content", "Response content is required"),
    max_length("body.content", "Response cannot exceed 500 characters", maximum=500),
]

# Body checks shared by PUT (route level) and PATCH (inside the handler)
UPDATE_REVIEW_BODY_RULES: list[Rule] = [
    *optional(is_int("body.rating", RATING_MESSAGE, minimum=1, maximum=5)),
    *_review_text_rules(),
    *_detailed_rating_rules(UPDATABLE_DETAILED_RATINGS),
    *_tag_rules(),
]

UPDATE_REVIEW_RULES: list[Rule] = [*review_id_rules(), *UPDATE_REVIEW_BODY_RULES]

PATCH_REVIEW_RULES: list[Rule] = review_id_rules()

MODERATE_REVIEW_RULES: list[Rule] = [
    *review_id_rules(),
    is_in("body.status", REVIEW_STATUSES, "Invalid status"),
    *optional(
        trim("body.moderationNotes"),
        max_length("body.moderationNotes", "Moderation notes cannot exceed 500 characters", maximum=500),
    ),
]

DELETE_REVIEW_RULES: list[Rule] = review_id_rules()
