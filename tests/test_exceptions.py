from s3_watermark.core.exceptions import (
    ConfigurationError,
    ListingError,
    PartialFailureError,
    S3Error,
    WatermarkPipelineError,
    WatermarkSourceError,
)
from s3_watermark.core.models import ProcessOutcome, RunSummary


def test_hierarchy() -> None:
    assert issubclass(WatermarkSourceError, ConfigurationError)
    assert issubclass(ListingError, S3Error)
    assert issubclass(PartialFailureError, WatermarkPipelineError)


def test_watermark_source_error_keeps_reference() -> None:
    error = WatermarkSourceError("bad watermark", "logo.jpg")

    assert error.reference == "logo.jpg"
    assert str(error) == "bad watermark"


def test_partial_failure_lists_every_failed_key() -> None:
    summary = RunSummary(
        candidates=3,
        processed=1,
        failed=2,
        failures=[
            ProcessOutcome(source_key="src/a.jpg", error="timeout"),
            ProcessOutcome(source_key="src/b.png", error="decode"),
        ],
    )

    error = PartialFailureError(summary)

    assert error.summary is summary
    assert error.failed_keys == ["src/a.jpg", "src/b.png"]
    assert "encountered 2 error(s)" in str(error)
    assert "src/a.jpg: timeout" in str(error)
    assert "src/b.png: decode" in str(error)
