"""Observability utilities for contextual logging."""

import logging
import uuid
from typing import Any, Dict, Optional
from dataclasses import dataclass, field
from enum import Enum

from .logging_config import setup_logger


class LogLevel(Enum):
    """Log levels for structured logging."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class LogContext:
    """Context information for structured logging."""

    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    operation: str = ""
    component: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_operation(self, operation: str) -> "LogContext":
        """Create new context with operation set."""
        return LogContext(
            correlation_id=self.correlation_id,
            operation=operation,
            component=self.component,
            metadata=self.metadata.copy(),
        )

    def with_metadata(self, **kwargs) -> "LogContext":
        """Create new context with additional metadata."""
        new_metadata = self.metadata.copy()
        new_metadata.update(kwargs)
        return LogContext(
            correlation_id=self.correlation_id,
            operation=self.operation,
            component=self.component,
            metadata=new_metadata,
        )


def format_message(
    message: str, context: Optional[LogContext] = None, **kwargs: Any
) -> str:
    """Render a message with its context as a single log line."""
    if context is None:
        if not kwargs:
            return message
        metadata_str = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        return f"{message} ({metadata_str})"

    formatted_message = f"[{context.correlation_id}] {message}"
    if context.operation:
        formatted_message = f"[{context.operation}] {formatted_message}"

    if context.metadata or kwargs:
        metadata_str = ", ".join(
            f"{k}={v}" for k, v in {**context.metadata, **kwargs}.items()
        )
        formatted_message = f"{formatted_message} ({metadata_str})"
    return formatted_message


class StructuredLogger:
    """Structured logger with context support."""

    def __init__(self, name: str = "s3-watermark", level: Optional[str] = None):
        self._logger = setup_logger(name, level)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _log(
        self,
        level: LogLevel,
        message: str,
        context: Optional[LogContext] = None,
        **kwargs: Any,
    ) -> None:
        getattr(self._logger, level.value.lower())(
            format_message(message, context, **kwargs)
        )

    def debug(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log debug message."""
        self._log(LogLevel.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log info message."""
        self._log(LogLevel.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log warning message."""
        self._log(LogLevel.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log error message."""
        self._log(LogLevel.ERROR, message, context, **kwargs)
