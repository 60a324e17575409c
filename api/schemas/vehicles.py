"""
Request rule-sets for vehicle type endpoints.
"""

from __future__ import annotations

from sendme.validation import (
    Rule,
    is_array,
    is_boolean,
    is_float,
    is_identifier,
    is_in,
    is_int,
    is_object,
    max_length,
    not_empty,
    optional,
    trim,
)

VEHICLE_STATUSES = ("active", "inactive", "maintenance", "deprecated")
VEHICLE_SORT_FIELDS = ("sortOrder", "name", "basePrice", "createdAt")
SORT_ORDERS = ("asc", "desc")


def vehicle_id_rules() -> list[Rule]:
    return [is_identifier("params.id", "Invalid vehicle ID")]


def _non_negative(field: str, label: str) -> Rule:
    return is_float(field, f"{label} must be a positive number", minimum=0)


def _sub_object_rules() -> list[Rule]:
    return optional(
        is_object("body.pricing", "Pricing must be an object"),
        is_object("body.capacity", "Capacity must be an object"),
        is_object("body.dimensions", "Dimensions must be an object"),
    )


def _listing_rules() -> list[Rule]:
    return optional(
        is_in("body.status", VEHICLE_STATUSES, "Invalid status"),
        is_boolean("body.isActive", "isActive must be a boolean value"),
        is_int("body.sortOrder", "Sort order must be a non-negative integer", minimum=0),
    )


def list_vehicles_rules(default_limit: int = 20) -> list[Rule]:
    return optional(
        is_int("query.page", "Page must be a positive integer", minimum=1, default=1),
        is_int("query.limit", "Limit must be between 1 and 100", minimum=1, maximum=100, default=default_limit),
        is_in("query.status", VEHICLE_STATUSES, "Invalid status"),
        is_in("query.sortBy", VEHICLE_SORT_FIELDS, "Invalid sort field", default="sortOrder"),
        is_in("query.sortOrder", SORT_ORDERS, "Sort order must be asc or desc", default="asc"),
        trim("query.category"),
        not_empty("query.category", "Category cannot be empty"),
    )


GET_VEHICLE_RULES: list[Rule] = vehicle_id_rules()

CREATE_VEHICLE_RULES: list[Rule] = [
    trim("body.name"),
    not_empty("body.name", "Vehicle name is required"),
    max_length("body.name", "Vehicle name cannot exceed 100 characters", maximum=100),
    trim("body.description"),
    not_empty("body.description", "Description is required"),
    max_length("body.description", "Description cannot exceed 500 characters", maximum=500),
    trim("body.category"),
    not_empty("body.category", "Category is required"),
    *_sub_object_rules(),
    _non_negative("body.pricing.basePrice", "Base price"),
    _non_negative("body.pricing.pricePerKm", "Price per km"),
    *optional(
        _non_negative("body.pricing.minimumFare", "Minimum fare"),
        _non_negative("body.capacity.maxWeight", "Max weight"),
        _non_negative("body.capacity.maxVolume", "Max volume"),
        _non_negative("body.dimensions.length", "Length"),
        _non_negative("body.dimensions.width", "Width"),
        _non_negative("body.dimensions.height", "Height"),
    ),
    *_listing_rules(),
]

# Body checks shared by PUT (route level) and PATCH (inside the handler)
UPDATE_VEHICLE_BODY_RULES: list[Rule] = [
    *_sub_object_rules(),
    *optional(
        trim("body.name"),
        not_empty("body.name", "Vehicle name cannot be empty"),
        max_length("body.name", "Vehicle name cannot exceed 100 characters", maximum=100),
        trim("body.description"),
        not_empty("body.description", "Description cannot be empty"),
        max_length("body.description", "Description cannot exceed 500 characters", maximum=500),
        _non_negative("body.pricing.basePrice", "Base price"),
        _non_negative("body.pricing.pricePerKm", "Price per km"),
    ),
    *_listing_rules(),
]

UPDATE_VEHICLE_RULES: list[Rule] = [*vehicle_id_rules(), *UPDATE_VEHICLE_BODY_RULES]

PATCH_VEHICLE_RULES: list[Rule] = vehicle_id_rules()

VEHICLE_AVAILABILITY_RULES: list[Rule] = [
    *vehicle_id_rules(),
    *optional(
        is_boolean("body.isActive", "isActive must be a boolean value"),
        is_array("body.availabilityZones", "Availability zones must be an array"),
        is_array("body.timeSlots", "Time slots must be an array"),
    ),
]

VEHICLE_PRICING_RULES: list[Rule] = [
    *vehicle_id_rules(),
    *optional(
        _non_negative("body.basePrice", "Base price"),
        _non_negative("body.pricePerKm", "Price per km"),
        _non_negative("body.pricePerMinute", "Price per minute"),
        _non_negative("body.minimumFare", "Minimum fare"),
        is_float("body.surgeMultiplier", "Surge multiplier must be at least 1", minimum=1),
    ),
]

DELETE_VEHICLE_RULES: list[Rule] = vehicle_id_rules()
