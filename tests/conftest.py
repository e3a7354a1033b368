"""Shared pytest fixtures and configuration for all tests."""

import os

# Keep src.main from building the real application during collection
os.environ["ENVIRONMENT"] = "test"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from tavern_menu_service.config.settings import Environment, Settings  # noqa: E402
from tavern_menu_service.handlers.api_handler import create_app  # noqa: E402
from tavern_menu_service.models.menu_models import NewMenuItem  # noqa: E402
from tavern_menu_service.services.menu_service import MenuService  # noqa: E402


@pytest.fixture
def menu_service() -> MenuService:
    """Fixture providing a freshly seeded menu service."""
    return MenuService()


@pytest.fixture
def test_settings() -> Settings:
    """Fixture providing settings for the test environment."""
    return Settings(ENVIRONMENT=Environment.TEST)


@pytest.fixture
def client(menu_service: MenuService, test_settings: Settings) -> TestClient:
    """Create a test client backed by a fresh menu service."""
    app = create_app(menu_service=menu_service, settings=test_settings)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def new_ale() -> NewMenuItem:
    """Fixture providing a valid item to add to a menu."""
    return NewMenuItem(name="Saxon Hoard", description="A crisp golden ale", price=1.1)


@pytest.fixture
def new_item_payload() -> dict:
    """Fixture providing a valid JSON body for adding a menu item."""
    return {
        "name": "Test Ale",
        "description": "A test ale description...",
        "price": 5.99,
    }
