"""Integration tests for the complete pipeline."""

import io
import tempfile

import pytest
from PIL import Image

from s3_watermark.core.exceptions import ListingError, PartialFailureError
from s3_watermark.core.factories import ProcessingPipelineFactory
from s3_watermark.core.watermark_source import load_watermark_pair
from s3_watermark.testing.fakes import FakeLogger, create_test_image


@pytest.fixture(autouse=True)
def isolated_tempdir(tmp_path, monkeypatch):
    temp_dir = tmp_path / "tmp"
    temp_dir.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(temp_dir))
    return temp_dir


class TestPipelineIntegration:
    """Integration tests for the complete processing pipeline."""

    @pytest.mark.parametrize("processor", ["serial", "multithread"])
    def test_end_to_end(self, fake_s3, config, processor, isolated_tempdir):
        config = config.model_copy(update={"processor": processor})
        left, right = load_watermark_pair(config.left_watermark, config.right_watermark)
        pipeline = ProcessingPipelineFactory.create_pipeline(
            config, s3_client=fake_s3, logger=FakeLogger()
        )

        summary = pipeline.run(
            config.bucket, config.source_prefix, config.target_prefix, left, right
        )

        assert summary.total_objects == 7
        assert summary.processed == 4
        assert summary.skipped == 3
        assert summary.failed == 0

        bucket = fake_s3.get_bucket("test-bucket")
        expected = {
            "target/photo1.jpg": ((800, 600), "JPEG"),
            "target/photo2.JPEG": ((400, 300), "JPEG"),
            "target/graphic.png": ((640, 480), "PNG"),
            "target/nested/deeper/photo3.jpg": ((500, 400), "JPEG"),
        }
        for key, (size, format_type) in expected.items():
            stored = bucket.get_object(key)
            assert stored is not None, key
            image = Image.open(io.BytesIO(stored.body))
            assert image.size == size
            assert image.format == format_type

        assert bucket.get_object("target/readme.txt") is None
        assert list(isolated_tempdir.iterdir()) == []

    def test_watermark_visible_in_uploaded_png(self, fake_s3, config):
        left, right = load_watermark_pair(config.left_watermark, config.right_watermark)
        pipeline = ProcessingPipelineFactory.create_pipeline(
            config, s3_client=fake_s3, logger=FakeLogger()
        )

        pipeline.run("test-bucket", "source/", "target/", left, right)

        stored = fake_s3.get_bucket("test-bucket").get_object("target/graphic.png")
        image = Image.open(io.BytesIO(stored.body)).convert("RGB")
        # 640x480 base: left at (20, 210), right at (500, 210)
        assert image.getpixel((30, 220)) == (255, 0, 0)
        assert image.getpixel((510, 220)) == (0, 0, 255)
        assert image.getpixel((320, 100)) == (255, 255, 255)

    def test_partial_failure(self, fake_s3, config):
        fake_s3.get_bucket("test-bucket").add_object("source/broken.jpg", b"not a jpeg")
        fake_s3.fail_put_for("target/photo1.jpg")
        left, right = load_watermark_pair(config.left_watermark, config.right_watermark)
        pipeline = ProcessingPipelineFactory.create_pipeline(
            config, s3_client=fake_s3, logger=FakeLogger()
        )

        with pytest.raises(PartialFailureError) as exc_info:
            pipeline.run("test-bucket", "source/", "target/", left, right)

        summary = exc_info.value.summary
        assert sorted(summary.failed_keys) == ["source/broken.jpg", "source/photo1.jpg"]
        assert summary.processed == 3
        assert summary.processed + summary.skipped + summary.failed == summary.total_objects

    def test_many_items_small_pool(self, config, isolated_tempdir):
        from s3_watermark.testing.fakes import FakeS3Client

        fake_s3 = FakeS3Client(page_size=10)
        bucket = fake_s3.create_bucket("test-bucket")
        for i in range(25):
            bucket.add_object(f"source/batch/{i:03d}.jpg", create_test_image(60, 40))
        config = config.model_copy(update={"max_workers": 2})
        left, right = load_watermark_pair(config.left_watermark, config.right_watermark)
        pipeline = ProcessingPipelineFactory.create_pipeline(
            config, s3_client=fake_s3, logger=FakeLogger()
        )

        summary = pipeline.run("test-bucket", "source/", "target/", left, right)

        assert summary.processed == 25
        assert sorted(fake_s3.get_calls) == sorted(f"source/batch/{i:03d}.jpg" for i in range(25))
        assert len(fake_s3.put_calls) == 25

    def test_listing_failure(self, fake_s3, config):
        fake_s3.fail_listing()
        left, right = load_watermark_pair(config.left_watermark, config.right_watermark)
        pipeline = ProcessingPipelineFactory.create_pipeline(
            config, s3_client=fake_s3, logger=FakeLogger()
        )

        with pytest.raises(ListingError):
            pipeline.run("test-bucket", "source/", "target/", left, right)
