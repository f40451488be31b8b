"""
Structured logging configuration using structlog.

Provides JSON-formatted logging with context processors for
request tracking, timestamps, and log levels.
"""
import logging
import os
import sys
from typing import Any

import structlog


def setup_logging(level: str = "INFO") -> None:
    """
    Configure structured logging with structlog.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Sets up:
        - JSON output format for production
        - Console output with colors for development
        - Context processors for timestamps and metadata
        - Integration with standard library logging
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    # Determine if we're in development mode
    is_dev = os.getenv("ENVIRONMENT", "production") == "development"

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if is_dev:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Configured structlog logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("cache_hit", partition="anki-dashboard-static-v1")
    """
    return structlog.get_logger(name)


def log_request_handled(
    strategy: str,
    source: str,
    duration_ms: float,
    url: str,
    status: int | None = None,
    **extra: Any,
) -> None:
    """
    Log the outcome of one intercepted request in structured format.

    Args:
        strategy: Strategy that handled the request (network_first, ...)
        source: Where the response came from (network, cache, fallback)
        duration_ms: Handling time in milliseconds
        url: Request URL
        status: HTTP status of the returned response
        **extra: Additional context to log

    Example:
        >>> log_request_handled(
        ...     strategy="network_first",
        ...     source="cache",
        ...     duration_ms=12.5,
        ...     url="https://api.jsonbin.io/v3/b/123",
        ...     status=200,
        ... )
    """
    logger = get_logger("request_handling")

    log_data = {
        "strategy": strategy,
        "source": source,
        "duration_ms": round(duration_ms, 2),
        "url": url,
        "status": status,
        **extra,
    }

    if source == "fallback":
        logger.warning("request_served_fallback", **log_data)
    else:
        logger.info("request_handled", **log_data)
