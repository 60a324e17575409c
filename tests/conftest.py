"""
Root test configuration and fixtures for the SendMe API.

This conftest.py provides common fixtures for all test categories:
- unit/: Fast, isolated unit tests
- access tokens signed with the test secret
- a TestClient over a freshly built app with empty stores

Note: sys.path manipulation is handled here to ensure imports work correctly.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import jwt
import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from api.services import RecordStore, ReviewService, VehicleService  # noqa: E402
from api.settings import Settings, get_settings  # noqa: E402

TEST_SECRET = "test-secret-for-access-tokens-0123456789"
TEST_ISSUER = "sendme-logistics"
TEST_AUDIENCE = "sendme-users"

ADMIN_ID = "a" * 24
CUSTOMER_ID = "c" * 24
DRIVER_ID = "d" * 24
OTHER_DRIVER_ID = "e" * 24


def make_token(
    user_id: str,
    role: str,
    *,
    secret: str = TEST_SECRET,
    token_type: str = "access",
    expires_in: int = 3600,
    **extra: Any,
) -> str:
    """Sign an HS256 access token the way the auth service issues them."""
    now = int(time.time())
    payload = {
        "id": user_id,
        "role": role,
        "type": token_type,
        "iss": TEST_ISSUER,
        "aud": TEST_AUDIENCE,
        "iat": now,
        "exp": now + expires_in,
        **extra,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_header(user_id: str, role: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    """Settings are lru_cached; every test starts from a clean cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(auth_mode="production", jwt_secret=TEST_SECRET, jwt_issuer=TEST_ISSUER, jwt_audience=TEST_AUDIENCE)


@pytest.fixture
def review_service() -> ReviewService:
    return ReviewService(RecordStore("reviews"))


@pytest.fixture
def vehicle_service() -> VehicleService:
    return VehicleService(RecordStore("vehicles"))


@pytest.fixture
def client(test_settings: Settings, review_service: ReviewService, vehicle_service: VehicleService) -> Iterator[Any]:
    """TestClient over an app in production auth mode with empty stores."""
    from fastapi.testclient import TestClient

    from api.main import create_app

    app = create_app(test_settings, review_service, vehicle_service)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def headers() -> Callable[[str, str], dict[str, str]]:
    return auth_header


@pytest.fixture
def no_docker() -> Iterator[None]:
    """Pretend we are not inside a container so bypass mode is allowed."""
    with patch("sendme.auth_middleware._is_docker_environment", return_value=False):
        yield
