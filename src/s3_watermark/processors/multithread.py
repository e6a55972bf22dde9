"""Multithreaded processor implementation - uses thread pool for parallelism."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from threading import Event
from typing import List, Optional

from ..core.models import ImageRef, ProcessOutcome
from ..core.protocols import BatchProcessor, ProcessingService
from .common import failed_outcome, process_item


class ThreadPoolBatchProcessor(BatchProcessor):
    """Fans items out to a fixed-size pool of worker threads."""

    def __init__(self, processing_service: ProcessingService, max_workers: int = 5):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._processing_service = processing_service
        self._max_workers = max_workers

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def process_batch(
        self, items: List[ImageRef], cancel_event: Optional[Event] = None
    ) -> List[ProcessOutcome]:
        """
        Process a batch of images using a thread pool.

        Outcomes are returned in completion order.

        Args:
            items: Image references to process
            cancel_event: Once set, items not yet started are reported as cancelled

        Returns:
            One outcome per item
        """
        if not items:
            return []

        outcomes: List[ProcessOutcome] = []
        with ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="watermark-worker"
        ) as executor:
            future_to_item = {
                executor.submit(process_item, self._processing_service, item, cancel_event): item
                for item in items
            }

            try:
                for future in as_completed(future_to_item):
                    try:
                        outcomes.append(future.result())
                    except Exception as e:  # noqa: BLE001
                        outcomes.append(failed_outcome(future_to_item[future], e))
            except KeyboardInterrupt:
                # In-flight items finish and release their temp files
                if cancel_event is not None:
                    cancel_event.set()
                for future in future_to_item:
                    future.cancel()
                raise

        return outcomes
