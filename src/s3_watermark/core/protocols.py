"""Protocol definitions for dependency injection and testability."""

from abc import ABC, abstractmethod
from threading import Event
from typing import Any, Dict, List, Optional, Protocol

from .models import ImageRef, ProcessOutcome, StoredObject


class S3ClientProtocol(Protocol):
    """Protocol for the subset of the boto3 S3 client in use."""

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Get object from S3."""
        ...

    def put_object(
        self, Bucket: str, Key: str, Body: Any, ContentType: str
    ) -> Dict[str, Any]:
        """Put object to S3."""
        ...

    def get_paginator(self, operation_name: str) -> Any:
        """Get paginator for S3 operations."""
        ...


class ObjectStoreGateway(Protocol):
    """Blob store interface the pipeline reads from and writes to."""

    def list_objects(self, bucket: str, prefix: str) -> List[StoredObject]:
        """List every object under a prefix."""
        ...

    def get_object(self, bucket: str, key: str) -> bytes:
        """Fetch the body of an object."""
        ...

    def put_object(
        self, bucket: str, key: str, body: bytes, content_type: Optional[str] = None
    ) -> None:
        """Store an in-memory body as an object."""
        ...

    def put_file(self, bucket: str, key: str, path: str) -> None:
        """Upload a local file as an object."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...


class ProcessingService(ABC):
    """Abstract service for processing images."""

    @abstractmethod
    def process_image(self, item: ImageRef) -> ProcessOutcome:
        """Process a single image."""
        ...


class BatchProcessor(ABC):
    """Abstract batch processor."""

    @abstractmethod
    def process_batch(
        self, items: List[ImageRef], cancel_event: Optional[Event] = None
    ) -> List[ProcessOutcome]:
        """Process a batch of images."""
        ...
