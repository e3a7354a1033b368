"""Main application entry point for the tavern menu service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os

from fastapi import FastAPI

from tavern_menu_service.config.settings import ConfigurationError, Settings, load_settings
from tavern_menu_service.handlers.api_handler import create_app
from tavern_menu_service.observability import configure_logging, setup_observability
from tavern_menu_service.services.menu_service import MenuService

logger = logging.getLogger(__name__)


def load_settings_or_exit() -> Settings:
    """Load settings from the environment, exiting the process if they are invalid.

    Returns:
        Validated settings

    Raises:
        SystemExit: With status 1 when the environment is invalid
    """
    try:
        settings = load_settings()
    except ConfigurationError as e:
        configure_logging("INFO")
        logger.critical(
            "Environment variables failed validation, exiting",
            extra={"issues": e.issues},
        )
        raise SystemExit(1) from e

    return settings


def create_application(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Loads and validates settings
    2. Configures logging
    3. Seeds the menu service
    4. Creates the FastAPI app with the menu and utility routes
    5. Sets up observability

    Args:
        settings: Pre-loaded settings, read from the environment when omitted

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or load_settings_or_exit()

    configure_logging(settings.effective_log_level)
    logger.info(f"Environment variables successfully loaded. Running in {settings.ENVIRONMENT.value} mode.")

    menu_service = MenuService()
    logger.info("Menu service seeded")

    app = create_app(menu_service=menu_service, settings=settings)

    setup_observability(app, environment=settings.ENVIRONMENT.value)

    logger.info("Tavern menu service initialized successfully")
    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    settings = load_settings_or_exit()

    logger.info(f"Starting server on {settings.HOST}:{settings.PORT}")
    logger.info(f"API documentation available at http://{settings.HOST}:{settings.PORT}/docs")

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.effective_log_level.lower(),
        log_config=None,
    )
