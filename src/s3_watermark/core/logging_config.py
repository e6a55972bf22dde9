"""Logging setup shared by the CLI, the gateway and the worker pool.

Worker threads are named ``watermark-worker_N`` by the thread pool, so the
structured format carries ``%(threadName)s`` to tell concurrent items apart.
"""

import os
import sys
import logging
from typing import Optional

ROOT_LOGGER_NAME = "s3-watermark"
STDOUT_HANDLER_NAME = "s3-watermark-stdout"

STRUCTURED_FORMAT = (
    "%(asctime)s | [S3-WATERMARK] %(name)s | %(levelname)-8s | "
    "%(threadName)s | %(filename)s:%(lineno)d | %(message)s"
)
SIMPLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    return getattr(logging, name, logging.INFO)


def _build_formatter(format_type: str) -> logging.Formatter:
    if os.getenv("LOG_FORMAT", format_type).lower() == "structured":
        return logging.Formatter(STRUCTURED_FORMAT, datefmt=DATE_FORMAT)
    return logging.Formatter(SIMPLE_FORMAT)


def stdout_handlers(logger: logging.Logger) -> list:
    """Handlers installed on ``logger`` by :func:`setup_logger`."""
    return [h for h in logger.handlers if h.name == STDOUT_HANDLER_NAME]


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Configure a logger that writes to stdout.

    Args:
        name: Logger name
        level: Log level override; falls back to ``LOG_LEVEL`` then INFO
        format_type: "structured" or "simple"; ``LOG_FORMAT`` overrides it

    Returns:
        The configured logger. Calling this again for the same name never
        adds a second stdout handler, whatever other handlers are attached.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))

    if not stdout_handlers(logger):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(STDOUT_HANDLER_NAME)
        handler.setFormatter(_build_formatter(format_type))
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    return setup_logger(name)


def set_debug(name: str = ROOT_LOGGER_NAME) -> None:
    """Switch the named logger, its children and the root logger to DEBUG."""
    logging.getLogger(name).setLevel(logging.DEBUG)
    for logger_name in list(logging.root.manager.loggerDict):
        if logger_name.startswith(f"{name}."):
            logging.getLogger(logger_name).setLevel(logging.DEBUG)
    logging.getLogger().setLevel(logging.DEBUG)


logger = setup_logger()
