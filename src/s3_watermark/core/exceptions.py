"""Custom exceptions for the watermark pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from .models import RunSummary


class WatermarkPipelineError(Exception):
    """Base exception for all watermark pipeline errors."""


class ConfigurationError(WatermarkPipelineError):
    """Error raised for missing or invalid configuration options."""


class WatermarkSourceError(ConfigurationError):
    """Error raised when a watermark reference cannot be validated or loaded."""

    def __init__(self, message: str, reference: str = "") -> None:
        super().__init__(message)
        self.reference = reference


class S3Error(WatermarkPipelineError):
    """Error raised for S3 related failures."""


class ListingError(S3Error):
    """Error raised when the source listing cannot be obtained."""


class ImageProcessingError(WatermarkPipelineError):
    """Error raised when processing a single image fails."""


class PartialFailureError(WatermarkPipelineError):
    """Raised after a run in which one or more items failed."""

    def __init__(self, summary: "RunSummary") -> None:
        self.summary = summary
        details = "; ".join(
            f"{outcome.source_key}: {outcome.error}" for outcome in summary.failures
        )
        super().__init__(
            f"encountered {summary.failed} error(s) during processing: {details}"
        )

    @property
    def failed_keys(self) -> List[str]:
        return self.summary.failed_keys
