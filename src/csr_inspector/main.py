"""
Application entry point — configures logging and serves the ASGI app.

Composition root: loads settings, configures structlog, and hands the
FastAPI application to uvicorn.

Responsibilities:
  1. Configure structlog for structured logging
  2. Load and validate configuration from environment
  3. Start uvicorn on the configured host/port
"""

from __future__ import annotations

import logging
import sys

import structlog
import uvicorn

from csr_inspector import __version__
from csr_inspector.config import AppSettings


def configure_structlog(log_level: str = "INFO") -> None:
    """
    Configure structlog for structured, human-readable console logging.

    Unknown level names fall back to INFO.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def main() -> None:
    """Load settings and serve csr_inspector.asgi:app until interrupted."""
    try:
        settings = AppSettings()
    except Exception as e:
        print(f"FATAL: Configuration error — {e}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    configure_structlog(settings.log_level)
    log = structlog.get_logger()

    log.info(
        "app.starting",
        version=__version__,
        log_level=settings.log_level,
        host=settings.server.host,
        port=settings.server.port,
        max_pem_chars=settings.limits.max_pem_chars,
    )

    uvicorn.run(
        "csr_inspector.asgi:app",
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.log_level.lower(),
    )
    log.info("app.shutdown")


if __name__ == "__main__":
    main()
