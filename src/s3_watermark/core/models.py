"""Shared data models for the watermark pipeline."""

from dataclasses import dataclass
from typing import List, Optional

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, field_validator


class WatermarkConfig(BaseModel):
    """Configuration for one watermarking run."""

    bucket: str
    source_prefix: str
    target_prefix: str
    left_watermark: str
    right_watermark: str
    max_watermark_height: int = 250
    watermark_padding: int = 20
    max_workers: int = 5
    processor: str = "multithread"
    download_timeout: float = 30.0
    s3_max_attempts: int = 1
    debug: bool = False

    @field_validator("max_watermark_height", "max_workers", "s3_max_attempts")
    @classmethod
    def _must_be_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be a positive integer")
        return value

    @field_validator("watermark_padding")
    @classmethod
    def _must_not_be_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must not be negative")
        return value

    @field_validator("download_timeout")
    @classmethod
    def _timeout_must_be_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @field_validator("processor")
    @classmethod
    def _known_processor(cls, value: str) -> str:
        if value not in ("serial", "multithread"):
            raise ValueError("must be 'serial' or 'multithread'")
        return value


class ImageRef(BaseModel):
    """An object key selected for watermarking and where its result goes."""

    model_config = ConfigDict(frozen=True)

    source_key: str
    target_key: str
    format: str


class StoredObject(BaseModel):
    """A single entry returned by an object store listing."""

    key: str
    size: int = 0


class ProcessOutcome(BaseModel):
    """Result of processing a single image."""

    source_key: str
    target_key: str = ""
    success: bool = False
    error: str = ""
    processing_time: float = 0.0
    worker: str = ""


class RunSummary(BaseModel):
    """Aggregate counts for a complete run."""

    total_objects: int = 0
    candidates: int = 0
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    duration: float = 0.0
    failures: List[ProcessOutcome] = Field(default_factory=list)

    @property
    def failed_keys(self) -> List[str]:
        return [outcome.source_key for outcome in self.failures]

    @property
    def success(self) -> bool:
        return self.failed == 0

    @property
    def rate(self) -> float:
        """Candidate images handled per second, successful or not."""
        return self.candidates / self.duration if self.duration > 0 else 0.0


@dataclass(frozen=True)
class WatermarkAsset:
    """A decoded watermark image shared read-only between workers.

    Resizing never touches ``image``; callers get a new asset back from
    :func:`s3_watermark.core.image_utils.fit_to_height`.
    """

    image: Image.Image
    source: Optional[str] = None

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self):
        return self.image.size
