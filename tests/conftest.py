"""
Shared pytest fixtures for the DreamFactory client test suite.

This module provides fixtures that are automatically available to all test files:
- A recording fake transport and the ApiContext built on it
- A fully wired DreamFactoryClient using the fake transport
- Canned upstream payloads for the system resource families
"""

from __future__ import annotations

from typing import Any

import pytest

from dreamfactory.client import DreamFactoryClient
from dreamfactory.config import Config
from dreamfactory.context import ApiContext
from dreamfactory.http.address import HttpAddress, RestApiVersion
from dreamfactory.http.headers import HttpHeaders
from dreamfactory.serialization import JsonContentSerializer
from tests.constants import BASE_URL, TEST_EMAIL
from tests.fakes import FakeFacade

# ============================================================================
# TRANSPORT AND CONTEXT FIXTURES
# ============================================================================


@pytest.fixture
def facade() -> FakeFacade:
    """Create a fresh recording fake transport."""
    return FakeFacade()


@pytest.fixture
def serializer() -> JsonContentSerializer:
    """Create the default JSON serializer."""
    return JsonContentSerializer()


@pytest.fixture
def context(facade: FakeFacade, serializer: JsonContentSerializer) -> ApiContext:
    """Create an ApiContext talking to the fake transport."""
    return ApiContext(
        address=HttpAddress(BASE_URL, RestApiVersion.V2),
        headers=HttpHeaders({"Accept": "application/json"}),
        serializer=serializer,
        facade=facade,
    )


@pytest.fixture
def config() -> Config:
    """Create a test configuration."""
    return Config(base_url=BASE_URL, timeout=10.0)


@pytest.fixture
def client(config: Config, facade: FakeFacade) -> DreamFactoryClient:
    """Create a client wired to the fake transport."""
    return DreamFactoryClient(config, facade=facade)


# ============================================================================
# CANNED PAYLOADS
# ============================================================================


@pytest.fixture
def apps_payload() -> dict[str, Any]:
    """Four applications, as listed by a stock installation."""
    return {
        "resource": [
            {"id": 1, "name": "Todo List jQuery", "api_name": "todojquery", "is_active": True},
            {"id": 2, "name": "Todo List Angular", "api_name": "todoangular", "is_active": True},
            {"id": 3, "name": "Address Book", "api_name": "addressbook", "is_active": True},
            {"id": 4, "name": "Calendar", "api_name": "calendar", "is_active": False},
        ]
    }


@pytest.fixture
def users_payload() -> dict[str, Any]:
    """Two users."""
    return {
        "resource": [
            {
                "id": 1,
                "display_name": "Andrei Smirnov",
                "email": "andrei@example.com",
                "is_active": True,
                "created_date": "2015-05-01T10:00:00Z",
            },
            {
                "id": 2,
                "display_name": "Dream Factory",
                "email": TEST_EMAIL,
                "is_active": True,
            },
        ]
    }
