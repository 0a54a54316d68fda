"""Logging infrastructure.

Provides structured logging with:
- JSONL format for log aggregation
- QueueHandler + QueueListener for non-blocking I/O
- Lazy evaluation for expensive debug output
- OpenTelemetry trace correlation

Basic usage:
    import logging

    from keyset_service.infra.logging import get_lazy_logger, setup_logging

    setup_logging()

    logger = logging.getLogger(__name__)
    logger.info("Serving page")

    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Cursor: {dict(cursor)}")  # Only runs if DEBUG enabled
"""

from keyset_service.infra.logging.config import configure_logging, setup_logging, shutdown
from keyset_service.infra.logging.formatters import JSONFormatter
from keyset_service.infra.logging.lazy import (
    LazyLoggerAdapter,
    get_lazy_logger,
)

__all__ = [
    "JSONFormatter",
    "LazyLoggerAdapter",
    "configure_logging",
    "get_lazy_logger",
    "setup_logging",
    "shutdown",
]
