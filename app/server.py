"""FastAPI server setup and routes"""
import time
from typing import Tuple
from fastapi import FastAPI, Response, HTTPException
from fastapi.responses import PlainTextResponse
from prometheus_client import disable_created_metrics, enable_created_metrics
from config import Config
from metrics.counter import RequestCounter
from metrics.exceptions import InternalError
from metrics.models import RequestLabels
from metrics.registry import MetricsRegistry
from logging_config import get_logger, log_metrics_render, log_error
from middleware.request_logging import RequestLoggingMiddleware


logger = get_logger(__name__)

SUCCESS_LABELS = RequestLabels(method="GET", status="200")
ERROR_LABELS = RequestLabels(method="GET", status="500")


def configure_exposition(config: Config) -> None:
    """Apply exposition settings that prometheus_client keeps process-wide.

    The _created switch affects every counter in the process, whichever
    registry it belongs to, so main() calls this once before building the
    registry.
    """
    if config.expose_created_series:
        enable_created_metrics()
    else:
        disable_created_metrics()


def create_registry(config: Config) -> Tuple[MetricsRegistry, RequestCounter]:
    """Build the process registry with the request counter and default metrics.

    Raises DuplicateNameError if any metric name collides.
    """
    registry = MetricsRegistry(config)
    request_counter = registry.register(RequestCounter())
    if config.collect_default_metrics:
        registry.collect_default_metrics()
    return registry, request_counter


class MetricsServer:
    """FastAPI server counting demo requests and exposing the registry"""

    def __init__(self, config: Config, registry: MetricsRegistry, request_counter: RequestCounter):
        self.config = config
        self.registry = registry
        self.request_counter = request_counter
        self.app = FastAPI(
            title=config.service_name,
            version=config.service_version,
            docs_url=None,
            redoc_url=None,
            openapi_url=None
        )

        self._setup_middleware()
        self._setup_routes()
        self._setup_events()

    def _setup_middleware(self):
        """Setup middleware"""
        if self.config.enable_request_logging:
            self.app.add_middleware(RequestLoggingMiddleware)

    def _setup_routes(self):
        """Setup FastAPI routes"""

        @self.app.get('/', response_class=PlainTextResponse)
        async def index():
            """Successful demo request"""
            self.request_counter.count(SUCCESS_LABELS)
            return PlainTextResponse("OK")

        @self.app.get('/error', response_class=PlainTextResponse)
        async def error():
            """Failing demo request"""
            self.request_counter.count(ERROR_LABELS)
            return PlainTextResponse("ERROR", status_code=500)

        @self.app.get('/metrics', response_class=Response)
        async def get_metrics():
            """Serve the registry in the Prometheus exposition format"""
            start_time = time.time()
            try:
                content = self.registry.render()
            except InternalError as e:
                log_error(logger, e, {"component": "metrics_render", "endpoint": "/metrics"})
                raise HTTPException(status_code=500, detail="Failed to render metrics")

            log_metrics_render(logger, len(content), time.time() - start_time)
            return Response(content, media_type=self.registry.content_type)

    def _setup_events(self):
        """Setup FastAPI startup/shutdown events"""

        @self.app.on_event("startup")
        async def startup_event():
            """Start runtime collectors on the serving loop"""
            for collector in self.registry.runtime_collectors:
                await collector.start()
            logger.info(
                "Application startup complete",
                service_name=self.config.service_name,
                metrics=self.registry.names(),
                collectors=self.registry.collector_names(),
                event_type="server_startup"
            )

        @self.app.on_event("shutdown")
        async def shutdown_event():
            """Cleanup on shutdown"""
            logger.info("Shutting down", event_type="server_shutdown")
            for collector in self.registry.runtime_collectors:
                await collector.shutdown()

    def get_app(self) -> FastAPI:
        """Get the FastAPI application"""
        return self.app
