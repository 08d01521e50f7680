# Copyright 2025 Google LLC
# SPDX-License-Identifier: Apache-2.0

"""Typed logging utilities for promptkit.

This module provides a typed wrapper around structlog. The `Logger` protocol
defines the interface used throughout the engine, `get_logger()` returns a
properly typed logger instance and `configure_logging()` picks a renderer for
the running environment.

Usage:
    from promptkit.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info('prompt registered', prompt_key='research_business@2')
"""

from typing import Protocol

import structlog

from promptkit.core.environment import get_log_level, is_dev_environment


class Logger(Protocol):
    """Protocol defining the logger interface used throughout promptkit.

    This protocol matches structlog's BoundLogger interface.
    """

    def debug(self, event: str | None = None, **kw: object) -> None:
        """Log a debug message."""
        ...

    def info(self, event: str | None = None, **kw: object) -> None:
        """Log an info message."""
        ...

    def warning(self, event: str | None = None, **kw: object) -> None:
        """Log a warning message."""
        ...

    def error(self, event: str | None = None, **kw: object) -> None:
        """Log an error message."""
        ...

    def exception(self, event: str | None = None, **kw: object) -> None:
        """Log an exception with traceback."""
        ...

    async def ainfo(self, event: str | None = None, **kw: object) -> None:
        """Log an info message asynchronously."""
        ...

    async def aerror(self, event: str | None = None, **kw: object) -> None:
        """Log an error message asynchronously."""
        ...

    def bind(self, **new_values: object) -> 'Logger':
        """Return a new logger with bound context values."""
        ...


def configure_logging() -> None:
    """Configure structlog for the current environment.

    Development gets coloured console output; production gets one JSON object
    per line so call logs can be shipped and queried as structured records.
    """
    renderer = structlog.dev.ConsoleRenderer() if is_dev_environment() else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso', utc=True, key='logged_at'),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(get_log_level()),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Logger:
    """Get a typed logger instance.

    Args:
        name: Optional logger name (typically __name__).

    Returns:
        A typed logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info('prompt rendered', prompt_key='site_copy@3:b')
    """
    return structlog.get_logger(name)
