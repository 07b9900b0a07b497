"""Structured logging configuration for gdocs-mcp.

JSON logs via structlog, written to stderr. stdout is reserved for the MCP
stdio transport, so nothing here may print to it.
"""

import logging
import sys

import structlog

from .config import get_log_level


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog and stdlib logging.

    Args:
        level: Log level name, e.g. "INFO" or "DEBUG". Unknown names fall back to INFO.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level, logging.INFO),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with the module name (typically __name__)."""
    return structlog.get_logger(name)


configure_logging(get_log_level())
