"""Unit tests for logging and OpenTelemetry helpers."""

import asyncio
import inspect
import json
import logging
from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from tavern_menu_service.models.error_models import missing_resource
from tavern_menu_service.observability import configure_logging, setup_observability, traced


@pytest.fixture(scope="module")
def span_exporter() -> InMemorySpanExporter:
    """Install an in-memory span exporter on the global tracer provider."""
    exporter = InMemorySpanExporter()
    provider = trace.get_tracer_provider()
    if not isinstance(provider, TracerProvider):
        provider = TracerProvider()
        trace.set_tracer_provider(provider)
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return exporter


@pytest.fixture
def spans(span_exporter: InMemorySpanExporter) -> Iterator[InMemorySpanExporter]:
    span_exporter.clear()
    yield span_exporter
    span_exporter.clear()


@pytest.mark.unit
class TestTraced:
    """Test suite for the traced decorator."""

    def test_sync_success(self, spans: InMemorySpanExporter) -> None:
        """Test a successful call produces a successful span."""

        @traced("menu.test")
        def work(x: int) -> int:
            return x * 2

        assert work(21) == 42

        (span,) = spans.get_finished_spans()
        assert span.name == "menu.test"
        assert span.attributes["success"] is True
        assert span.attributes["function.name"] == "work"
        assert span.attributes["service.name"] == "menu-svc"

    def test_api_error_tagged(self, spans: InMemorySpanExporter) -> None:
        """Test ApiError failures are tagged with kind and status."""

        @traced()
        def lookup() -> None:
            raise missing_resource("Menu type DESSERT does not exist")

        with pytest.raises(Exception, match="DESSERT"):
            lookup()

        (span,) = spans.get_finished_spans()
        assert span.name == "lookup"
        assert span.attributes["success"] is False
        assert span.attributes["error.kind"] == "missing_resource"
        assert span.attributes["http.status_code"] == 404
        assert "function.name" not in span.attributes

    def test_unexpected_error_recorded(self, spans: InMemorySpanExporter) -> None:
        """Test other exceptions are recorded on the span."""

        @traced("menu.broken")
        def broken() -> None:
            raise ValueError("bad")

        with pytest.raises(ValueError):
            broken()

        (span,) = spans.get_finished_spans()
        assert span.attributes["error.type"] == "ValueError"
        assert any(event.name == "exception" for event in span.events)

    def test_async_function(self, spans: InMemorySpanExporter) -> None:
        """Test coroutine functions are traced and stay awaitable."""

        @traced("menu.async")
        async def work() -> str:
            return "done"

        assert inspect.iscoroutinefunction(work)
        assert asyncio.run(work()) == "done"
        assert spans.get_finished_spans()[0].name == "menu.async"


@pytest.mark.unit
class TestConfigureLogging:
    """Test suite for configure_logging."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self) -> Iterator[None]:
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers = handlers
        root.setLevel(level)

    def test_installs_single_json_handler(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test the root logger emits JSON lines at the configured level."""
        configure_logging("debug")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

        logging.getLogger("tavern_menu_service.test").info("hello", extra={"menu_type": "ale"})

        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["message"] == "hello"
        assert payload["menu_type"] == "ale"
        assert payload["levelname"] == "INFO"

    def test_unknown_level_falls_back_to_info(self) -> None:
        """Test unknown level names fall back to INFO."""
        configure_logging("chatty")

        assert logging.getLogger().level == logging.INFO


@pytest.mark.unit
class TestSetupObservability:
    """Test suite for setup_observability."""

    @patch("tavern_menu_service.observability.config.FastAPIInstrumentor")
    @patch("tavern_menu_service.observability.config.metrics.set_meter_provider")
    @patch("tavern_menu_service.observability.config.trace.set_tracer_provider")
    @patch("tavern_menu_service.observability.config.setup_tracing")
    def test_test_environment_skips_exporters(
        self,
        mock_setup_tracing: MagicMock,
        mock_set_tracer_provider: MagicMock,
        mock_set_meter_provider: MagicMock,
        mock_instrumentor: MagicMock,
    ) -> None:
        """Test the test environment installs local providers and instruments the app."""
        app = MagicMock()

        setup_observability(app, environment="test")

        mock_setup_tracing.assert_not_called()
        mock_set_tracer_provider.assert_called_once()
        mock_set_meter_provider.assert_called_once()
        mock_instrumentor.instrument_app.assert_called_once_with(app)

    @patch("tavern_menu_service.observability.config.FastAPIInstrumentor")
    @patch("tavern_menu_service.observability.config.setup_metrics")
    @patch("tavern_menu_service.observability.config.setup_tracing")
    def test_other_environments_export(
        self,
        mock_setup_tracing: MagicMock,
        mock_setup_metrics: MagicMock,
        mock_instrumentor: MagicMock,
    ) -> None:
        """Test exporters are configured outside the test environment."""
        setup_observability(None, environment="production")

        mock_setup_tracing.assert_called_once()
        mock_setup_metrics.assert_called_once()
        mock_instrumentor.instrument_app.assert_not_called()
