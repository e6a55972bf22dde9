"""Core utilities and shared components for the watermark pipeline."""

from .image_utils import (
    calculate_target_key,
    composite_watermarks,
    fit_to_height,
    is_candidate,
)
from .logging_config import get_logger, setup_logger
from .exceptions import (
    WatermarkPipelineError,
    ConfigurationError,
    WatermarkSourceError,
    S3Error,
    ListingError,
    ImageProcessingError,
    PartialFailureError,
)
from .models import (
    ImageRef,
    ProcessOutcome,
    RunSummary,
    StoredObject,
    WatermarkAsset,
    WatermarkConfig,
)

__all__ = [
    "WatermarkConfig",
    "ImageRef",
    "StoredObject",
    "ProcessOutcome",
    "RunSummary",
    "WatermarkAsset",
    "calculate_target_key",
    "composite_watermarks",
    "fit_to_height",
    "is_candidate",
    "setup_logger",
    "get_logger",
    "WatermarkPipelineError",
    "ConfigurationError",
    "WatermarkSourceError",
    "S3Error",
    "ListingError",
    "ImageProcessingError",
    "PartialFailureError",
]
