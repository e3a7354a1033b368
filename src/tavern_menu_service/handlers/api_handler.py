"""FastAPI application for the menu API endpoints."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from tavern_menu_service.config.settings import Settings
from tavern_menu_service.handlers.error_handler import UnhandledErrorMiddleware, register_error_handlers
from tavern_menu_service.handlers.request_logger import RequestLoggerMiddleware
from tavern_menu_service.handlers.validation import ValidationProperty, validate
from tavern_menu_service.models.menu_models import (
    EchoRequest,
    MenuItem,
    MenuItemParams,
    MenuQuery,
    MenuTypeParams,
    NewMenuItem,
)
from tavern_menu_service.services.menu_service import MenuService

logger = logging.getLogger(__name__)


class MenuResponse(BaseModel):
    """Envelope for endpoints returning a menu."""

    data: list[MenuItem]


class PingData(BaseModel):
    """Liveness payload."""

    dateTime: int
    status: str


class PingResponse(BaseModel):
    """Envelope for the ping endpoint."""

    data: PingData


class EchoResponse(BaseModel):
    """Response model for the echo endpoint."""

    echo: str


def configure_cors(app: FastAPI, settings: Settings) -> None:
    """Install the CORS policy for the current environment.

    Outside production any origin is allowed. In production cross-origin
    requests are blocked until origins are configured for the deployment.
    """
    if not settings.is_production:
        app.add_middleware(CORSMiddleware, allow_origins=["*"])
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[],
            allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
            max_age=86_400,
        )


def create_app(menu_service: MenuService, settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        menu_service: Service holding the menus served by the API
        settings: Service settings, defaults to development settings

    Returns:
        Configured FastAPI application
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Tavern Menu Service API",
        description="In-memory ale, wine and food menus",
        version="1.0.0",
    )

    # Store services in app state for access in route handlers
    app.state.menu_service = menu_service
    app.state.settings = settings

    # Unexpected errors are answered innermost so the 500 still carries CORS headers.
    # Logger is added last so it wraps CORS and sees the final response headers
    app.add_middleware(UnhandledErrorMiddleware)
    configure_cors(app, settings)
    app.add_middleware(RequestLoggerMiddleware)

    api = APIRouter(prefix="/api")

    @api.get("/ping", response_model=PingResponse, tags=["Utility"])
    async def ping() -> PingResponse:
        """Liveness check reporting the server time in unix seconds."""
        return PingResponse(data=PingData(dateTime=int(datetime.now(UTC).timestamp()), status="OK"))

    @api.post("/echo", response_model=EchoResponse, tags=["Utility"])
    async def echo(body: EchoRequest = Depends(validate(EchoRequest))) -> EchoResponse:
        """Echo back the submitted text."""
        return EchoResponse(echo=body.text)

    @api.post("/menus/{type}/items", response_model=MenuResponse, tags=["Menus"])
    async def add_menu_item(
        params: MenuTypeParams = Depends(validate(MenuTypeParams, ValidationProperty.PARAMS)),
        body: NewMenuItem = Depends(validate(NewMenuItem, ValidationProperty.BODY)),
    ) -> MenuResponse:
        """Add an item to a menu.

        Returns:
            The full menu including the new item, in insertion order
        """
        menu = app.state.menu_service.add(params.type, body)
        return MenuResponse(data=menu)

    @api.get("/menus/{type}", response_model=MenuResponse, tags=["Menus"])
    async def retrieve_menu(
        params: MenuTypeParams = Depends(validate(MenuTypeParams, ValidationProperty.PARAMS)),
        query: MenuQuery = Depends(validate(MenuQuery, ValidationProperty.QUERY)),
    ) -> MenuResponse:
        """Retrieve a menu sorted by the requested field and order."""
        menu = app.state.menu_service.retrieve(params.type, query.sort, query.order)
        return MenuResponse(data=menu)

    @api.delete("/menus/{type}/{id}", status_code=204, tags=["Menus"])
    async def remove_menu_item(
        params: MenuItemParams = Depends(validate(MenuItemParams, ValidationProperty.PARAMS)),
    ) -> Response:
        """Remove an item from a menu.

        A 204 carries no body, so the success flag is not sent on the wire.
        """
        app.state.menu_service.remove(params.type, params.id)
        return Response(status_code=204)

    app.include_router(api)

    # Error handlers are registered after all routes
    register_error_handlers(app)

    logger.info("Menu API routes registered")
    return app
