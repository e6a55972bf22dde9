"""Shared fixtures for the watermark pipeline tests."""

import pytest

from s3_watermark.core.models import WatermarkAsset, WatermarkConfig
from s3_watermark.testing.fakes import (
    create_test_watermark,
    save_test_watermark,
    setup_test_s3_environment,
)


@pytest.fixture
def left_asset():
    return WatermarkAsset(image=create_test_watermark(100, 50, (255, 0, 0, 255)), source="left.png")


@pytest.fixture
def right_asset():
    return WatermarkAsset(image=create_test_watermark(120, 60, (0, 0, 255, 255)), source="right.png")


@pytest.fixture
def watermark_files(tmp_path):
    left = save_test_watermark(str(tmp_path / "left.png"), 100, 50, (255, 0, 0, 255))
    right = save_test_watermark(str(tmp_path / "right.png"), 120, 60, (0, 0, 255, 255))
    return left, right


@pytest.fixture
def fake_s3():
    return setup_test_s3_environment()


@pytest.fixture
def config(watermark_files):
    left, right = watermark_files
    return WatermarkConfig(
        bucket="test-bucket",
        source_prefix="source/",
        target_prefix="target/",
        left_watermark=left,
        right_watermark=right,
        max_workers=3,
    )


@pytest.fixture
def env(watermark_files):
    left, right = watermark_files
    return {
        "S3_BUCKET": "test-bucket",
        "SOURCE_PREFIX": "source/",
        "TARGET_PREFIX": "target/",
        "LEFT_WATERMARK_PATH": left,
        "RIGHT_WATERMARK_PATH": right,
    }
