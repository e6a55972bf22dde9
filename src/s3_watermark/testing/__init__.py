"""Testing utilities and fakes for the watermark pipeline."""

from .fakes import (
    FakeS3Client,
    FakeLogger,
    S3Object,
    S3Bucket,
    create_test_image,
    create_test_watermark,
    save_test_watermark,
    setup_test_s3_environment,
)

__all__ = [
    "FakeS3Client",
    "FakeLogger",
    "S3Object",
    "S3Bucket",
    "create_test_image",
    "create_test_watermark",
    "save_test_watermark",
    "setup_test_s3_environment",
]
