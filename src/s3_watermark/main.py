"""Main module for the s3-watermark CLI."""

import sys
import argparse
import threading
from typing import List, Optional

from . import __version__
from .core.config import describe_required_environment, load_and_validate_config
from .core.exceptions import (
    ConfigurationError,
    ListingError,
    PartialFailureError,
    WatermarkPipelineError,
)
from .core.factories import ProcessingPipelineFactory
from .core.logging_config import get_logger, set_debug
from .core.watermark_source import load_watermark_pair
from .processors.common import log_configuration, log_final_statistics

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments.

    Everything that shapes a run comes from the environment; the command
    line only toggles debug logging and prints the version.
    """
    parser = argparse.ArgumentParser(
        prog="s3-watermark",
        description="Add left and right corner watermarks to every image under an S3 prefix",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=describe_required_environment()
        + """

Optional environment variables:
  MAX_WATERMARK_HEIGHT, WATERMARK_PADDING, MAX_WORKERS, PROCESSOR,
  WATERMARK_DOWNLOAD_TIMEOUT, S3_MAX_ATTEMPTS, DEBUG, LOG_LEVEL, LOG_FORMAT
""",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


def run(argv: Optional[List[str]] = None, environ=None) -> int:
    """
    Execute one watermarking run and return the process exit code.

    Configuration and watermark problems, listing failures and failed
    items all map to a non-zero exit code.
    """
    args = parse_args(argv)
    logger = get_logger("s3-watermark")
    logger.info("Starting S3 Watermark Script")

    try:
        config = load_and_validate_config(environ)
    except ConfigurationError as e:
        logger.error(f"Environment validation failed: {e}\n{describe_required_environment()}")
        return EXIT_FAILURE

    if args.debug or config.debug:
        set_debug()

    log_configuration(config)

    try:
        left, right = load_watermark_pair(
            config.left_watermark, config.right_watermark, timeout=config.download_timeout
        )
        pipeline = ProcessingPipelineFactory.create_pipeline(config)
    except ConfigurationError as e:
        logger.error(f"Failed to initialize image processor: {e}")
        return EXIT_FAILURE

    cancel_event = threading.Event()
    try:
        summary = pipeline.run(
            config.bucket,
            config.source_prefix,
            config.target_prefix,
            left,
            right,
            cancel_event=cancel_event,
        )
    except KeyboardInterrupt:
        cancel_event.set()
        logger.warning("Processing interrupted by user.")
        return EXIT_INTERRUPTED
    except PartialFailureError as e:
        log_final_statistics(e.summary)
        logger.error(f"Failed to process images: {e}")
        return EXIT_FAILURE
    except ListingError as e:
        logger.error(f"Failed to process images: {e}")
        return EXIT_FAILURE
    except WatermarkPipelineError as e:
        logger.error(f"Processing failed: {e}", exc_info=True)
        return EXIT_FAILURE

    log_final_statistics(summary)
    logger.info("Successfully completed all image processing")
    return EXIT_OK


def main() -> None:
    """Entry point for the ``s3-watermark`` console script."""
    sys.exit(run())


if __name__ == "__main__":
    main()
