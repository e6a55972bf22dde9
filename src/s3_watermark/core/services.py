"""Service implementations for the watermark pipeline."""

import io
import os
import tempfile
import threading
import time
from threading import Event
from typing import Callable, List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .error_handling import BatchOperationContextManager
from .exceptions import ImageProcessingError, ListingError, PartialFailureError, S3Error
from .image_utils import (
    calculate_target_key,
    composite_watermarks,
    image_format_for_key,
    is_candidate,
    prepare_for_format,
)
from .models import ImageRef, ProcessOutcome, RunSummary, StoredObject, WatermarkAsset
from .observability import LogContext
from .protocols import BatchProcessor, LoggerProtocol, ObjectStoreGateway, ProcessingService

JPEG_QUALITY = 95


def decode_image(image_bytes: bytes, key: str) -> Image.Image:
    """Decode an object body, raising ImageProcessingError on bad payloads."""
    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
    except (UnidentifiedImageError, OSError, SyntaxError, Image.DecompressionBombError) as e:
        raise ImageProcessingError(f"failed to decode image {key}: {e}") from e
    return image


class ObjectClassifier:
    """Splits a listing into watermark candidates and skipped keys."""

    def __init__(self, source_prefix: str, target_prefix: str):
        self._source_prefix = source_prefix
        self._target_prefix = target_prefix

    def to_image_ref(self, key: str) -> ImageRef:
        return ImageRef(
            source_key=key,
            target_key=calculate_target_key(key, self._source_prefix, self._target_prefix),
            format=image_format_for_key(key),
        )

    def partition(
        self, objects: List[StoredObject]
    ) -> Tuple[List[ImageRef], List[str]]:
        """Return (candidates, skipped keys) preserving listing order."""
        candidates: List[ImageRef] = []
        skipped: List[str] = []
        for obj in objects:
            if is_candidate(obj.key):
                candidates.append(self.to_image_ref(obj.key))
            else:
                skipped.append(obj.key)
        return candidates, skipped


class WatermarkProcessingService(ProcessingService):
    """Fetch, watermark and upload a single image."""

    def __init__(
        self,
        gateway: ObjectStoreGateway,
        bucket: str,
        left: WatermarkAsset,
        right: WatermarkAsset,
        logger: LoggerProtocol,
        max_watermark_height: int = 250,
        watermark_padding: int = 20,
    ):
        self._gateway = gateway
        self._bucket = bucket
        self._left = left
        self._right = right
        self._logger = logger
        self._max_watermark_height = max_watermark_height
        self._watermark_padding = watermark_padding

    def watermark(self, image: Image.Image) -> Image.Image:
        return composite_watermarks(
            image,
            self._left,
            self._right,
            max_height=self._max_watermark_height,
            padding=self._watermark_padding,
            logger=self._logger,
        )

    @staticmethod
    def _create_temp_path(item: ImageRef) -> str:
        """Reserve an empty temporary file for one item; the caller removes it."""
        suffix = "." + item.source_key.rsplit(".", 1)[-1].lower()
        with tempfile.NamedTemporaryFile(
            prefix="watermarked-", suffix=suffix, delete=False
        ) as handle:
            return handle.name

    def _encode_to_file(self, image: Image.Image, item: ImageRef, path: str) -> None:
        encoded = prepare_for_format(image, item.format)
        try:
            with open(path, "wb") as handle:
                if item.format == "JPEG":
                    encoded.save(handle, format=item.format, quality=JPEG_QUALITY)
                else:
                    encoded.save(handle, format=item.format)
        except (OSError, ValueError) as e:
            raise ImageProcessingError(
                f"failed to save processed image {item.source_key}: {e}"
            ) from e

    def process_image(self, item: ImageRef) -> ProcessOutcome:
        """Process a single image; failures are returned, never raised."""
        start_time = time.time()
        worker = threading.current_thread().name
        log_context = LogContext(
            operation="process_image",
            component="watermark_processing_service",
        ).with_metadata(source_key=item.source_key, worker=worker)

        outcome = ProcessOutcome(
            source_key=item.source_key, target_key=item.target_key, worker=worker
        )
        temp_path: Optional[str] = None
        self._logger.info("Starting processing of image", log_context)

        try:
            self._logger.debug("Downloading image", log_context.with_operation("download_image"))
            image_bytes = self._gateway.get_object(self._bucket, item.source_key)

            image = decode_image(image_bytes, item.source_key)
            self._logger.debug(
                "Decoded image",
                log_context.with_operation("decode_image"),
                dimensions=f"{image.width}x{image.height}",
            )

            watermarked = self.watermark(image)

            # Assigned before encoding so the finally block owns removal
            temp_path = self._create_temp_path(item)
            self._encode_to_file(watermarked, item, temp_path)
            self._logger.debug(
                "Uploading processed image",
                log_context.with_operation("upload_image"),
                target_key=item.target_key,
            )
            self._gateway.put_file(self._bucket, item.target_key, temp_path)

            outcome.success = True
            outcome.processing_time = time.time() - start_time
            self._logger.info(
                "Successfully processed image",
                log_context,
                target_key=item.target_key,
                processing_time_ms=round(outcome.processing_time * 1000, 1),
            )
        except (S3Error, ImageProcessingError) as e:
            outcome.error = str(e)
            outcome.processing_time = time.time() - start_time
            self._logger.error("Image processing failed", log_context.with_metadata(error=str(e)))
        except Exception as e:  # noqa: BLE001
            outcome.error = f"{type(e).__name__}: {e}"
            outcome.processing_time = time.time() - start_time
            self._logger.error(
                "Unexpected error while processing image",
                log_context.with_metadata(error=outcome.error),
            )
        finally:
            if temp_path is not None:
                try:
                    os.remove(temp_path)
                except FileNotFoundError:
                    pass

        return outcome


BatchProcessorFactory = Callable[[ProcessingService], BatchProcessor]


class ProcessingOrchestrator:
    """List, classify, fan out and aggregate one watermarking run."""

    def __init__(
        self,
        gateway: ObjectStoreGateway,
        batch_processor_factory: BatchProcessorFactory,
        logger: LoggerProtocol,
        max_watermark_height: int = 250,
        watermark_padding: int = 20,
    ):
        self._gateway = gateway
        self._batch_processor_factory = batch_processor_factory
        self._logger = logger
        self._max_watermark_height = max_watermark_height
        self._watermark_padding = watermark_padding

    def _list(self, bucket: str, source_prefix: str) -> List[StoredObject]:
        try:
            return self._gateway.list_objects(bucket, source_prefix)
        except Exception as e:
            self._logger.error(f"Failed to list objects: {e}")
            raise ListingError(f"failed to list objects: {e}") from e

    def run(
        self,
        bucket: str,
        source_prefix: str,
        target_prefix: str,
        left: WatermarkAsset,
        right: WatermarkAsset,
        cancel_event: Optional[Event] = None,
    ) -> RunSummary:
        """
        Watermark every image under ``source_prefix``.

        Returns:
            The run summary when every candidate succeeded

        Raises:
            ListingError: If the listing itself fails; nothing is processed
            PartialFailureError: After all items finished, if any failed
        """
        start_time = time.time()
        self._logger.info("Starting image processing workflow")

        objects = self._list(bucket, source_prefix)
        summary = RunSummary(total_objects=len(objects))

        if not objects:
            self._logger.info(f"No images found in bucket {bucket} with prefix {source_prefix}")
            summary.duration = time.time() - start_time
            return summary

        candidates, skipped = ObjectClassifier(source_prefix, target_prefix).partition(objects)
        summary.candidates = len(candidates)
        summary.skipped = len(skipped)
        for key in skipped:
            self._logger.debug(f"Skipping non-image object: {key}")

        if candidates:
            service = WatermarkProcessingService(
                self._gateway,
                bucket,
                left,
                right,
                self._logger,
                max_watermark_height=self._max_watermark_height,
                watermark_padding=self._watermark_padding,
            )
            batch_processor = self._batch_processor_factory(service)
            self._logger.info(f"Processing {len(candidates)} images ({len(skipped)} skipped)")

            with BatchOperationContextManager("Watermark run") as batch_manager:
                outcomes = batch_processor.process_batch(candidates, cancel_event)
                for outcome in outcomes:
                    if outcome.success:
                        summary.processed += 1
                    else:
                        summary.failed += 1
                        summary.failures.append(outcome)
                        batch_manager.add_error(
                            outcome.error or "Unknown error", outcome.source_key
                        )
        else:
            self._logger.info("No candidate images to process")

        summary.duration = time.time() - start_time
        self._logger.info(
            f"Processing complete. Successfully processed {summary.processed}/{summary.candidates} images",
            skipped=summary.skipped,
            failed=summary.failed,
            duration_s=round(summary.duration, 3),
        )

        if summary.failed:
            raise PartialFailureError(summary)
        return summary
