"""
Centralized logging configuration for the options flow engine.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the system should use this
configuration to ensure consistent formatting and structured logging.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_flow_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound to the flow analytics subsystem.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for analytics passes
    """
    logger = get_logger(name)

    return logger.bind(subsystem="flow")


def log_degraded_parse(
    logger: FilteringBoundLogger,
    source: str,
    counters: dict[str, int],
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a summary of fields that fell back to their defaults during a parse.

    Nothing is logged when every counter is zero.

    Args:
        logger: Structlog logger instance
        source: Where the rows came from (csv, project, rows)
        counters: Degradation counters keyed by field
        context: Additional context data
    """
    degraded = {key: value for key, value in counters.items() if value}
    if not degraded:
        return

    bound_logger = logger.bind(source=source, degraded_fields=degraded)

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.warning("Parsed with degraded fields")
