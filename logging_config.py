"""Structured logging configuration for the request metrics demo server"""
import logging
import os
import sys
from typing import Any, Dict, List
import structlog
from structlog.stdlib import LoggerFactory
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer, TimeStamper, StackInfoRenderer
from config import Config

# Access lines come from RequestLoggingMiddleware
QUIET_LOGGERS = ('uvicorn.access', 'fastapi')


def _build_processors(development: bool) -> List[Any]:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        TimeStamper(fmt="iso"),
        StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    # Readable lines on a terminal, one JSON object per event everywhere else
    processors.append(ConsoleRenderer() if development else JSONRenderer())
    return processors


def _build_handlers(config: Config, level: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(config.log_file)))
    for handler in handlers:
        handler.setLevel(level)
    return handlers


def setup_structured_logging(config: Config) -> None:
    """Route structlog events through stdlib logging to stdout and the optional log file.

    ENVIRONMENT=development switches to console rendering. Every event
    carries the service name bound here.
    """
    development = os.getenv("ENVIRONMENT", "production").lower() == "development"
    structlog.configure(
        processors=_build_processors(development),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=config.service_name)

    level = getattr(logging, config.log_level.upper())
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=_build_handlers(config, level),
        force=True
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)


def log_server_startup(logger: structlog.stdlib.BoundLogger, config: Config) -> None:
    """Log server startup with configuration details"""
    logger.info(
        "Server starting up",
        service_name=config.service_name,
        service_version=config.service_version,
        metrics_host=config.metrics_host,
        metrics_port=config.metrics_port,
        collect_default_metrics=config.collect_default_metrics,
        event_type="server_startup"
    )


def log_metrics_render(logger: structlog.stdlib.BoundLogger, size_bytes: int, render_time: float) -> None:
    """Log a metrics scrape with structured data"""
    logger.debug(
        "Metrics rendered",
        size_bytes=size_bytes,
        render_time_seconds=round(render_time, 4),
        event_type="metrics_render"
    )


def log_error(logger: structlog.stdlib.BoundLogger, error: Exception, context: Dict[str, Any] = None) -> None:
    """Log error with structured context"""
    logger.error(
        "Error occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context or {},
        event_type="error",
        exc_info=True
    )
