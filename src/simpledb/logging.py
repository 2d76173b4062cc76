"""Structured logging configuration for SimpleDB."""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import Processor

from simpledb.config import get_config


def add_service_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add the service name to log entries."""
    event_dict["service"] = "simpledb"
    return event_dict


def setup_logging(
    level: Optional[str] = None, log_format: Optional[str] = None
) -> structlog.stdlib.BoundLogger:
    """Configure structured logging on stderr; stdout carries command output."""
    config = get_config()
    level = level or config.log_level
    log_format = log_format or config.log_format

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        add_service_context,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level]
        + shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())

    return structlog.get_logger("simpledb")


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance with optional name binding.

    The logger always writes to the stdlib "simpledb" logger and picks up
    whatever processors are configured when it is first used, so importing
    the library leaves global structlog state alone.
    """
    initial_values = {"component": name} if name else {}
    return structlog.wrap_logger(
        logging.getLogger("simpledb"),
        wrapper_class=structlog.stdlib.BoundLogger,
        **initial_values,
    )
