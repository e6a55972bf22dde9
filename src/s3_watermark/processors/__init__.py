"""Image processors with different concurrency strategies."""

from ..core.protocols import BatchProcessor, ProcessingService
from .multithread import ThreadPoolBatchProcessor
from .serial import SerialBatchProcessor

PROCESSORS = ("serial", "multithread")


def create_batch_processor(
    name: str, processing_service: ProcessingService, max_workers: int = 5
) -> BatchProcessor:
    """Build the batch processor registered under ``name``."""
    if name == "serial":
        return SerialBatchProcessor(processing_service)
    if name == "multithread":
        return ThreadPoolBatchProcessor(processing_service, max_workers=max_workers)
    raise ValueError(f"Unknown processor: {name}")


__all__ = [
    "PROCESSORS",
    "SerialBatchProcessor",
    "ThreadPoolBatchProcessor",
    "create_batch_processor",
]
