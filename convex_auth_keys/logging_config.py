"""
Structured logging configuration using structlog.

Records go to stderr as JSON; stdout is reserved for generated values and
sync output.
"""
import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger


def setup_logging(debug: bool = False) -> None:
    """
    Configure structured logging for the tool.

    Args:
        debug: Enable debug level logging (warnings only otherwise)
    """
    log_level = logging.DEBUG if debug else logging.WARNING

    log_handler = logging.StreamHandler(sys.stderr)
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(name)s %(levelname)s %(message)s",
        rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"}
    )
    log_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []
    root_logger.addHandler(log_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)
