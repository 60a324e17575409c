"""
SendMe - request gating for the SendMe logistics API.

This package contains:
- validation: declarative field rules and the validation pipeline
- access: the role-based access gate
- routing: the explicit route table and dispatch sequence
- jwt_auth / auth_middleware: bearer-token authentication producing principals
"""

from sendme.access import AccessRequirement, Principal, authorize
from sendme.routing import RouteTable, dispatch
from sendme.validation import Rule, ValidationPipeline, Violation, validate

__all__ = [
    "AccessRequirement",
    "Principal",
    "Rule",
    "RouteTable",
    "ValidationPipeline",
    "Violation",
    "authorize",
    "dispatch",
    "validate",
]
