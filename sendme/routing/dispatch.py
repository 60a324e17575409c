"""Request dispatch through the route table.

Order per request: match route, run the access gate, run the validation
pipeline, then await the handler with the validated request. Any failure
raises a ``GatewayError`` and the handler is never invoked.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from ..access import DenyReason, Principal, authorize
from ..errors import (
    ForbiddenError,
    GatewayError,
    MalformedBodyError,
    RouteNotFoundError,
    UnauthenticatedError,
    ValidationFailedError,
)
from ..validation import RequestData, ValidationPipeline
from .route_table import RouteEntry, RouteTable

logger = logging.getLogger(__name__)


@dataclass
class InboundRequest:
    """What the host web layer hands to the gating layer.

    ``raw_body`` holds the unparsed payload. It is only decoded once the route
    matched and the gate allowed the caller; when empty, ``body`` is used.
    """

    method: str
    path: str
    query: dict[str, Any] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)
    principal: Principal | None = None
    raw_body: bytes = b""

    def read_body(self) -> dict[str, Any]:
        """Decode ``raw_body`` as a JSON object; blank payloads fall back to ``body``."""
        if not self.raw_body.strip():
            return dict(self.body)
        try:
            body = json.loads(self.raw_body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedBodyError("Request body is not valid JSON") from e
        if not isinstance(body, dict):
            raise MalformedBodyError("Request body must be a JSON object")
        return body


@dataclass
class ValidatedRequest:
    """A request that passed the gate and the pipeline.

    ``data`` holds the coerced values (trimmed strings, parsed numbers,
    defaults) that handlers should read instead of the raw input.
    """

    route: RouteEntry
    data: RequestData
    principal: Principal | None = None

    @property
    def params(self) -> dict[str, Any]:
        return self.data.params

    @property
    def query(self) -> dict[str, Any]:
        return self.data.query

    @property
    def body(self) -> dict[str, Any]:
        return self.data.body


def prepare(table: RouteTable, request: InboundRequest) -> ValidatedRequest:
    """Match, gate and validate a request without invoking its handler.

    Raises:
        RouteNotFoundError: No route for the verb and path
        UnauthenticatedError: The route needs a principal and there is none
        ForbiddenError: The principal's roles are not permitted
        MalformedBodyError: The payload is not a JSON object
        ValidationFailedError: One or more rules failed
    """
    matched = table.match(request.method, request.path)
    if matched is None:
        logger.debug(f"No route for {request.method} {request.path}")
        raise RouteNotFoundError(request.method, request.path)

    entry = matched.entry
    decision = authorize(entry.access, request.principal)
    if not decision.allowed:
        if decision.reason is DenyReason.UNAUTHENTICATED:
            logger.warning(f"Unauthenticated request to {entry}")
            raise UnauthenticatedError()
        roles = sorted(request.principal.roles) if request.principal else []
        logger.warning(f"Caller with roles {roles} denied on {entry} (requires {entry.access})")
        raise ForbiddenError()

    raw = RequestData(params=dict(matched.path_params), query=dict(request.query), body=request.read_body())
    outcome = ValidationPipeline(entry.rules).run(raw)
    if not outcome.is_valid:
        logger.info(f"Validation failed on {entry}: {[v.field for v in outcome.violations]}")
        raise ValidationFailedError(outcome.violations)

    return ValidatedRequest(route=entry, data=outcome.data, principal=request.principal)


async def dispatch(table: RouteTable, request: InboundRequest) -> Any:
    """Run the full gating sequence and return whatever the handler returns."""
    validated = prepare(table, request)
    logger.debug(f"Dispatching {validated.route} to {validated.route.name}")
    try:
        return await validated.route.handler(validated)
    except GatewayError:
        raise
    except Exception:
        logger.exception(f"Handler {validated.route.name} failed on {validated.route}")
        raise
