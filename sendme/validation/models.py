"""Validation models.

Rules are plain immutable data. A rule-set is an ordered list of rules that
one generic evaluator interprets, so route declarations stay table-like:

    RULES = [
        is_identifier("params.id", "Invalid review ID"),
        is_int("body.rating", "Rating must be between 1 and 5", minimum=1, maximum=5),
        *optional(
            trim("body.review"),
            max_length("body.review", "Review cannot exceed 1000 characters", maximum=1000),
        ),
    ]
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

LOCATIONS = ("params", "query", "body")
ELEMENT_SUFFIX = ".*"


class _Missing:
    """Marker for a field that is not present in the request.

    An explicit JSON null is a value, not a missing field.
    """

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class RuleKind(Enum):
    """Kinds of field checks"""

    EXISTS = "exists"
    NOT_EMPTY = "not_empty"
    TRIM = "trim"
    IS_IDENTIFIER = "is_identifier"
    IS_INT = "is_int"
    IS_FLOAT = "is_float"
    IS_BOOLEAN = "is_boolean"
    IS_ARRAY = "is_array"
    IS_OBJECT = "is_object"
    IS_IN = "is_in"
    LENGTH = "length"
    PREDICATE = "predicate"


@dataclass
class RequestData:
    """The three request locations rules can address."""

    params: dict[str, Any] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)

    def lookup(self, location: str, path: tuple[str, ...]) -> Any:
        """Resolve a dotted path; any missing hop resolves to MISSING."""
        current: Any = getattr(self, location)
        for key in path:
            if not isinstance(current, dict) or key not in current:
                return MISSING
            current = current[key]
        return current

    def assign(self, location: str, path: tuple[str, ...], value: Any) -> None:
        """Write a value at a dotted path, creating intermediate objects."""
        current: dict[str, Any] = getattr(self, location)
        for key in path[:-1]:
            nxt = current.get(key)
            if not isinstance(nxt, dict):
                nxt = {}
                current[key] = nxt
            current = nxt
        current[path[-1]] = value

    def clone(self) -> RequestData:
        return RequestData(
            params=copy.deepcopy(self.params),
            query=copy.deepcopy(self.query),
            body=copy.deepcopy(self.body),
        )

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {"params": self.params, "query": self.query, "body": self.body}


@dataclass(frozen=True)
class Violation:
    """A single field-level validation failure."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class Rule:
    """One check bound to one field locator.

    The locator is ``<location>.<dotted.path>``; a trailing ``.*`` makes the
    rule apply to every element of an array field.
    """

    field: str
    kind: RuleKind
    message: str = "Invalid value"
    optional: bool = False
    minimum: float | None = None
    maximum: float | None = None
    choices: tuple[str, ...] = ()
    default: Any = None
    predicate: Callable[[Any, RequestData], bool] | None = None

    def __post_init__(self) -> None:
        location, _, rest = self.field.partition(".")
        if location not in LOCATIONS or not rest or rest == "*":
            raise ValueError(f"Invalid field locator {self.field!r}: expected one of {LOCATIONS} plus a path")
        if self.kind is RuleKind.PREDICATE and self.predicate is None:
            raise ValueError(f"Predicate rule for {self.field!r} needs a predicate")

    @property
    def is_element_rule(self) -> bool:
        return self.field.endswith(ELEMENT_SUFFIX)

    @property
    def target(self) -> str:
        """Field locator with any element suffix removed."""
        if self.is_element_rule:
            return self.field[: -len(ELEMENT_SUFFIX)]
        return self.field

    @property
    def location(self) -> str:
        return self.target.partition(".")[0]

    @property
    def path(self) -> tuple[str, ...]:
        return tuple(self.target.partition(".")[2].split("."))


# ========================================
# Rule constructors
# ========================================


def exists(field: str, message: str) -> Rule:
    return Rule(field, RuleKind.EXISTS, message)


def not_empty(field: str, message: str) -> Rule:
    return Rule(field, RuleKind.NOT_EMPTY, message)


def trim(field: str) -> Rule:
    return Rule(field, RuleKind.TRIM)


def is_identifier(field: str, message: str) -> Rule:
    return Rule(field, RuleKind.IS_IDENTIFIER, message)


def is_int(
    field: str,
    message: str,
    minimum: int | None = None,
    maximum: int | None = None,
    default: int | None = None,
) -> Rule:
    return Rule(field, RuleKind.IS_INT, message, minimum=minimum, maximum=maximum, default=default)


def is_float(field: str, message: str, minimum: float | None = None, maximum: float | None = None) -> Rule:
    return Rule(field, RuleKind.IS_FLOAT, message, minimum=minimum, maximum=maximum)


def is_boolean(field: str, message: str) -> Rule:
    return Rule(field, RuleKind.IS_BOOLEAN, message)


def is_array(field: str, message: str) -> Rule:
    return Rule(field, RuleKind.IS_ARRAY, message)


def is_object(field: str, message: str) -> Rule:
    return Rule(field, RuleKind.IS_OBJECT, message)


def is_in(field: str, choices: Iterable[str], message: str, default: str | None = None) -> Rule:
    return Rule(field, RuleKind.IS_IN, message, choices=tuple(choices), default=default)


def max_length(field: str, message: str, maximum: int, minimum: int | None = None) -> Rule:
    return Rule(field, RuleKind.LENGTH, message, minimum=minimum, maximum=maximum)


def predicate(field: str, check: Callable[[Any, RequestData], bool], message: str) -> Rule:
    """Custom check; ``check`` also receives the request so it can compare siblings."""
    return Rule(field, RuleKind.PREDICATE, message, predicate=check)


def optional(*rules: Rule) -> list[Rule]:
    """Mark rules optional: an absent value skips the rest of its field."""
    return [replace(rule, optional=True) for rule in rules]
