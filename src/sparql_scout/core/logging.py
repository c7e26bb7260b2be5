"""Structured logging configuration for sparql-scout.

Uses structlog on top of the standard library so log records can be
rendered for humans or emitted as JSON lines for log aggregation.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any

import structlog


_installed_handlers: list[logging.Handler] = []


def get_utc_timestamp() -> str:
    """Get current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add UTC timestamp to log events."""
    event_dict["timestamp"] = get_utc_timestamp()
    return event_dict


def add_context(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add default context fields to log events."""
    event_dict.setdefault("service", "sparql-scout")
    return event_dict


def configure_logging(
    level: str = "WARNING",
    json_format: bool = False,
    log_file: str | None = None,
) -> Any:
    """Configure structured logging.
    
    Log output goes to stderr; stdout is reserved for the run summary.
    
    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: If True, output JSON logs for machine parsing
        log_file: Optional file path for logging
        
    Returns:
        Configured logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    
    processors = [
        structlog.stdlib.filter_by_level,
        add_timestamp,
        add_context,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        )
    
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    
    # Reconfiguring replaces the handlers from the previous call
    for old in _installed_handlers:
        root_logger.removeHandler(old)
        old.close()
    _installed_handlers.clear()
    
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    
    for handler in handlers:
        handler.setLevel(numeric_level)
        root_logger.addHandler(handler)
        _installed_handlers.append(handler)
    
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))
    
    return structlog.get_logger("sparql_scout")


def configure_default_logging() -> None:
    """Drop events below WARNING unless structlog was configured already.
    
    Applies when sparql-scout is used as a library; ``configure_logging``
    and any configuration done by the host application take precedence.
    """
    if not structlog.is_configured():
        structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        )


def get_logger(name: str = "sparql_scout") -> Any:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)


configure_default_logging()
