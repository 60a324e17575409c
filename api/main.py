#!/usr/bin/env python3
"""
SendMe API - HTTP entry point for the SendMe logistics reviews and vehicle types.

This is the main FastAPI application. FastAPI only terminates HTTP here:
every gated route lives in an explicit route table, and a single catch-all
endpoint hands requests to the gating layer, which
- matches the route (404)
- runs the access gate (401 / 403)
- runs the route's validation rules (422)
- invokes the handler with the validated request
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sendme.auth_middleware import AuthMiddleware, get_principal
from sendme.errors import GatewayError, ValidationFailedError
from sendme.jwt_auth import AccessTokenValidator
from sendme.logging_config import configure_logging
from sendme.routing import InboundRequest, dispatch

from .dependencies import build_route_table
from .services import ReviewService, VehicleService
from .settings import Settings, get_settings
from .utils.responses import failure

# Configure unified logging format
# Format: 2026-01-06T14:05:52Z [api] LEVEL component: message
configure_logging(source="api")
logger = logging.getLogger(__name__)

GATED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle - startup and shutdown."""
    logger.info(f"Serving {len(app.state.route_table)} gated routes under '{app.state.settings.api_prefix or '/'}'")
    yield


def _query_dict(request: Request) -> dict[str, Any]:
    """Flatten query params; a repeated key becomes a list."""
    query: dict[str, Any] = {}
    for key, value in request.query_params.multi_items():
        if key not in query:
            query[key] = value
        elif isinstance(query[key], list):
            query[key].append(value)
        else:
            query[key] = [query[key], value]
    return query


def create_app(
    settings: Settings | None = None,
    review_service: ReviewService | None = None,
    vehicle_service: VehicleService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    app = FastAPI(title="SendMe API", description="SendMe reviews and vehicle types API", lifespan=lifespan)

    app.state.settings = settings
    app.state.route_table = build_route_table(settings, review_service, vehicle_service)

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        violations = exc.violations if isinstance(exc, ValidationFailedError) else None
        return failure(exc.status_code, exc.message, violations)

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=[*GATED_METHODS, "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    # Authentication configuration
    auth_mode = settings.get_effective_auth_mode()
    validator = None
    if settings.jwt_secret:
        validator = AccessTokenValidator(settings.jwt_secret, settings.jwt_issuer, settings.jwt_audience)

    # Add authentication middleware (runs after CORS due to reverse order)
    app.add_middleware(AuthMiddleware, auth_mode=auth_mode, validator=validator)

    # Core endpoints (not in the route table)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "sendme-api"}

    @app.get("/api/config")
    async def get_api_config() -> dict[str, Any]:
        """Get authentication and routing configuration for clients."""
        return {"auth_mode": settings.get_effective_auth_mode(), "api_prefix": settings.api_prefix}

    @app.api_route(f"{settings.api_prefix}/{{path:path}}", methods=GATED_METHODS, response_model=None)
    async def gated(path: str, request: Request) -> Any:
        """Hand the request to the route table; the body is decoded only after the gate."""
        inbound = InboundRequest(
            method=request.method,
            path=f"/{path}",
            query=_query_dict(request),
            principal=get_principal(request),
            raw_body=await request.body() if request.method != "GET" else b"",
        )
        return await dispatch(request.app.state.route_table, inbound)

    return app


# Create app instance for uvicorn
app = create_app()
