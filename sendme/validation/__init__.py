"""Declarative request validation.

Rule-sets are lists of immutable ``Rule`` objects; ``ValidationPipeline``
interprets them against a request's params, query and body.
"""

from __future__ import annotations

from .field_validator import apply_rule, evaluate
from .models import (
    MISSING,
    RequestData,
    Rule,
    RuleKind,
    Violation,
    exists,
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
    predicate,
    trim,
)
from .validation_pipeline import ValidationOutcome, ValidationPipeline, validate

__all__ = [
    "MISSING",
    "RequestData",
    "Rule",
    "RuleKind",
    "ValidationOutcome",
    "ValidationPipeline",
    "Violation",
    "apply_rule",
    "evaluate",
    "exists",
    "is_array",
    "is_boolean",
    "is_float",
    "is_identifier",
    "is_in",
    "is_int",
    "is_object",
    "max_length",
    "not_empty",
    "optional",
    "predicate",
    "trim",
    "validate",
]
