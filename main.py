#!/usr/bin/env python3
"""Main entry point for the request metrics demo server"""
import sys
import uvicorn
from config import Config
from app.server import MetricsServer, configure_exposition, create_registry
from logging_config import setup_structured_logging, get_logger, log_server_startup, log_error


def main():
    """Main application entry point"""
    try:
        config = Config()

        setup_structured_logging(config)
        logger = get_logger(__name__)
        log_server_startup(logger, config)

        configure_exposition(config)

        # Registry errors abort startup instead of serving an inconsistent registry
        registry, request_counter = create_registry(config)
        server = MetricsServer(config, registry, request_counter)

        uvicorn.run(
            server.get_app(),
            host=config.metrics_host,
            port=config.metrics_port,
            log_config=None  # We handle logging ourselves
        )

    except Exception as e:
        logger = get_logger(__name__)
        log_error(logger, e, {"component": "main", "phase": "startup"})
        sys.exit(1)


if __name__ == '__main__':
    main()
