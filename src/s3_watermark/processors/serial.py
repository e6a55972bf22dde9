"""Serial processor implementation - processes images one by one."""

from threading import Event
from typing import List, Optional

from ..core.models import ImageRef, ProcessOutcome
from ..core.protocols import BatchProcessor, ProcessingService
from .common import process_item


class SerialBatchProcessor(BatchProcessor):
    """Processes every item on the calling thread, in listing order."""

    def __init__(self, processing_service: ProcessingService):
        self._processing_service = processing_service

    def process_batch(
        self, items: List[ImageRef], cancel_event: Optional[Event] = None
    ) -> List[ProcessOutcome]:
        """
        Processes a batch of images serially.

        Args:
            items: Image references to process.
            cancel_event: Once set, remaining items are reported as cancelled.

        Returns:
            One outcome per item.
        """
        return [
            process_item(self._processing_service, item, cancel_event) for item in items
        ]
