"""Unit tests for main application entry point."""

import os
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.main import create_application, load_settings_or_exit
from tavern_menu_service.config.settings import Environment, Settings


@pytest.mark.unit
class TestLoadSettingsOrExit:
    """Tests for load_settings_or_exit function."""

    @patch.dict(os.environ, {"ENVIRONMENT": "test", "PORT": "9000", "DEBUG": "false"}, clear=True)
    def test_returns_settings_when_valid(self) -> None:
        """Test valid environments load without exiting."""
        settings = load_settings_or_exit()

        assert settings.ENVIRONMENT is Environment.TEST
        assert settings.PORT == 9000

    @patch.dict(os.environ, {"ENVIRONMENT": "staging"}, clear=True)
    @patch("src.main.configure_logging")
    def test_exits_on_invalid_environment(self, mock_configure_logging: MagicMock) -> None:
        """Test an unknown environment exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            load_settings_or_exit()

        assert exc_info.value.code == 1

    @patch.dict(os.environ, {"PORT": "not-a-port"}, clear=True)
    @patch("src.main.configure_logging")
    def test_exits_on_invalid_port(self, mock_configure_logging: MagicMock) -> None:
        """Test an invalid port exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            load_settings_or_exit()

        assert exc_info.value.code == 1


@pytest.mark.unit
class TestCreateApplication:
    """Tests for create_application function."""

    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    def test_creates_app_with_seeded_menus(
        self,
        mock_configure_logging: MagicMock,
        mock_setup_observability: MagicMock,
    ) -> None:
        """Test the application serves the seeded menus."""
        settings = Settings(ENVIRONMENT=Environment.TEST)

        app = create_application(settings)

        assert isinstance(app, FastAPI)
        mock_configure_logging.assert_called_once_with("INFO")
        mock_setup_observability.assert_called_once_with(app, environment="test")

        response = TestClient(app).get("/api/menus/ale")
        assert response.status_code == 200
        assert len(response.json()["data"]) == 3

    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    def test_debug_enables_debug_logging(
        self,
        mock_configure_logging: MagicMock,
        mock_setup_observability: MagicMock,
    ) -> None:
        """Test DEBUG forces the DEBUG log level."""
        create_application(Settings(ENVIRONMENT=Environment.TEST, DEBUG=True))

        mock_configure_logging.assert_called_once_with("DEBUG")

    @patch.dict(os.environ, {"ENVIRONMENT": "test", "PORT": "8080"}, clear=True)
    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    def test_loads_settings_from_environment(
        self,
        mock_configure_logging: MagicMock,
        mock_setup_observability: MagicMock,
    ) -> None:
        """Test settings are read from the environment when not supplied."""
        app = create_application()

        assert app.state.settings.PORT == 8080

    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    def test_each_application_has_its_own_menus(
        self,
        mock_configure_logging: MagicMock,
        mock_setup_observability: MagicMock,
    ) -> None:
        """Test applications do not share menu state."""
        settings = Settings(ENVIRONMENT=Environment.TEST)
        first = TestClient(create_application(settings))
        second = TestClient(create_application(settings))

        first.post(
            "/api/menus/ale/items",
            json={"name": "Extra Ale", "description": "An additional pale ale", "price": 1.0},
        )

        assert len(first.get("/api/menus/ale").json()["data"]) == 4
        assert len(second.get("/api/menus/ale").json()["data"]) == 3
