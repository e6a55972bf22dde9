"""Tests for main.py CLI functionality."""

from unittest.mock import Mock, patch

import pytest

from s3_watermark.core.factories import ProcessingPipelineFactory
from s3_watermark.main import EXIT_FAILURE, EXIT_INTERRUPTED, EXIT_OK, main, parse_args, run


@pytest.fixture(autouse=True)
def isolated_tempdir(tmp_path, monkeypatch):
    import tempfile

    temp_dir = tmp_path / "tmp"
    temp_dir.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(temp_dir))


@pytest.fixture
def main_logger():
    logger = Mock()
    with patch("s3_watermark.main.get_logger", return_value=logger):
        yield logger


def _errors(logger):
    return " ".join(str(call) for call in logger.error.call_args_list)


@pytest.fixture
def use_fake_s3(fake_s3):
    original = ProcessingPipelineFactory.create_pipeline

    def create_pipeline(config):
        return original(config, s3_client=fake_s3)

    with patch("s3_watermark.main.ProcessingPipelineFactory.create_pipeline", side_effect=create_pipeline):
        yield fake_s3


class TestMainCLI:
    """Tests for the main CLI functionality."""

    def test_parse_args_defaults(self):
        args = parse_args([])

        assert args.debug is False

    def test_version_flag(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "s3-watermark 0.1.0" in capsys.readouterr().out

    def test_successful_run(self, env, use_fake_s3):
        assert run([], env) == EXIT_OK

        assert use_fake_s3.get_bucket("test-bucket").get_object("target/photo1.jpg") is not None

    def test_missing_configuration(self, env, main_logger):
        del env["S3_BUCKET"]
        del env["TARGET_PREFIX"]

        assert run([], env) == EXIT_FAILURE

        output = _errors(main_logger)
        assert "S3_BUCKET" in output
        assert "TARGET_PREFIX" in output
        assert "Required environment variables" in output

    def test_invalid_watermark_reference(self, env, main_logger):
        env["LEFT_WATERMARK_PATH"] = "https://cdn.example.com/left.jpg"

        assert run([], env) == EXIT_FAILURE
        assert "left.jpg" in _errors(main_logger)

    def test_unreachable_watermark_url(self, env):
        env["RIGHT_WATERMARK_PATH"] = "https://cdn.example.com/right.png"
        import requests

        with patch(
            "s3_watermark.core.watermark_source.requests.get",
            side_effect=requests.ConnectionError("unreachable"),
        ):
            assert run([], env) == EXIT_FAILURE

    def test_partial_failure_exit_code(self, env, use_fake_s3, main_logger):
        use_fake_s3.fail_get_for("source/photo1.jpg")

        assert run([], env) == EXIT_FAILURE
        assert "source/photo1.jpg" in _errors(main_logger)

    def test_listing_failure_exit_code(self, env, use_fake_s3):
        use_fake_s3.fail_listing()

        assert run([], env) == EXIT_FAILURE

    def test_interrupt_exit_code(self, env, use_fake_s3):
        with patch(
            "s3_watermark.core.services.ProcessingOrchestrator.run",
            side_effect=KeyboardInterrupt,
        ):
            assert run([], env) == EXIT_INTERRUPTED

    def test_debug_flag(self, env, use_fake_s3):
        with patch("s3_watermark.main.set_debug") as mock_set_debug:
            assert run(["--debug"], env) == EXIT_OK

        mock_set_debug.assert_called_once()

    def test_main_exits_with_run_result(self):
        with patch("s3_watermark.main.run", return_value=EXIT_FAILURE):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == EXIT_FAILURE
