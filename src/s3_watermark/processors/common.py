"""Common functions shared across all processor implementations."""

from threading import Event
from typing import Optional

from ..core.logging_config import get_logger
from ..core.models import ImageRef, ProcessOutcome, RunSummary, WatermarkConfig
from ..core.protocols import ProcessingService

CANCELLED_ERROR = "processing cancelled before the item was started"


def cancelled_outcome(item: ImageRef) -> ProcessOutcome:
    return ProcessOutcome(
        source_key=item.source_key,
        target_key=item.target_key,
        success=False,
        error=CANCELLED_ERROR,
    )


def failed_outcome(item: ImageRef, error: BaseException) -> ProcessOutcome:
    """Outcome for an item whose processing raised instead of returning."""
    return ProcessOutcome(
        source_key=item.source_key,
        target_key=item.target_key,
        success=False,
        error=f"{type(error).__name__}: {error}",
    )


def process_item(
    service: ProcessingService, item: ImageRef, cancel_event: Optional[Event] = None
) -> ProcessOutcome:
    """Run one item through the service unless the run was cancelled."""
    if cancel_event is not None and cancel_event.is_set():
        return cancelled_outcome(item)
    try:
        return service.process_image(item)
    except Exception as e:  # noqa: BLE001
        get_logger("s3-watermark.processor").error(
            f"[{item.source_key}] Unhandled error: {e}", exc_info=True
        )
        return failed_outcome(item, e)


def log_configuration(config: WatermarkConfig) -> None:
    """Log processing configuration."""
    logger = get_logger("s3-watermark.processor")
    logger.info("=" * 80)
    logger.info("S3 WATERMARK PROCESSOR")
    logger.info("=" * 80)
    logger.info("CONFIGURATION:")
    logger.info(f"  Source:          s3://{config.bucket}/{config.source_prefix}")
    logger.info(f"  Target:          s3://{config.bucket}/{config.target_prefix}")
    logger.info(f"  Left watermark:  {config.left_watermark}")
    logger.info(f"  Right watermark: {config.right_watermark}")
    logger.info("")
    logger.info("PROCESSING OPTIONS:")
    logger.info(f"  Max watermark height: {config.max_watermark_height}px")
    logger.info(f"  Watermark padding:    {config.watermark_padding}px")
    logger.info(f"  Processor:            {config.processor}")
    if config.processor == "multithread":
        logger.info(f"  Workers:              {config.max_workers}")
    logger.info("=" * 80)


def log_final_statistics(summary: RunSummary) -> None:
    """Log final processing statistics."""
    logger = get_logger("s3-watermark.processor")
    logger.info("=" * 80)
    logger.info("PROCESSING COMPLETED")
    logger.info("=" * 80)
    logger.info(f"Total execution time: {summary.duration:.1f}s")
    logger.info(f"Overall processing rate: {summary.rate:.1f} items/sec")
    logger.info(f"Objects listed: {summary.total_objects}")
    logger.info(f"Successfully processed: {summary.processed}")
    logger.info(f"Skipped (not an image): {summary.skipped}")
    logger.info(f"Errors encountered: {summary.failed}")
    for outcome in summary.failures:
        logger.info(f"  Failed: {outcome.source_key}: {outcome.error}")
    logger.info("=" * 80)
