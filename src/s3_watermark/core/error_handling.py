# src/s3_watermark/core/error_handling.py

import functools
import logging
import time

from botocore.exceptions import BotoCoreError, ClientError
from PIL import UnidentifiedImageError

from .exceptions import ImageProcessingError, S3Error

RETRYABLE_S3_ERROR_CODES = (
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "SlowDown",
    "RequestTimeout",
)


def with_error_handling(func):
    """
    A decorator to wrap functions with standardized error handling.

    botocore failures become S3Error and undecodable payloads become
    ImageProcessingError; anything else is logged and re-raised unchanged.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__ + "." + func.__name__)
        try:
            return func(*args, **kwargs)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error in '{func.__name__}': {e}")
            raise S3Error(f"S3 operation failed in {func.__name__}: {e}") from e
        except UnidentifiedImageError as e:
            logger.error(f"Error in '{func.__name__}': {e}")
            raise ImageProcessingError(
                f"Failed to identify image in {func.__name__}: {e}"
            ) from e
    return wrapper


def _is_retryable(error: S3Error) -> bool:
    cause = error.__cause__
    if isinstance(cause, ClientError):
        error_code = cause.response.get("Error", {}).get("Code")
        return error_code in RETRYABLE_S3_ERROR_CODES
    # Connection level failures from botocore carry no error code
    return isinstance(cause, BotoCoreError)


def retry_s3_operation(max_attempts=1, initial_delay=1, backoff_factor=2):
    """
    Decorator to retry S3 operations with exponential backoff.

    Only S3Error raised from a retryable cause is retried. With the default
    of a single attempt the wrapped call runs exactly once.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(func.__module__ + "." + func.__name__)
            attempts = 0
            delay = initial_delay
            while True:
                try:
                    return func(*args, **kwargs)
                except S3Error as e:
                    attempts += 1
                    if not _is_retryable(e):
                        raise
                    if attempts >= max_attempts:
                        if max_attempts > 1:
                            logger.error(
                                f"S3 operation '{func.__name__}' failed after "
                                f"{max_attempts} attempts. Error: {e}"
                            )
                        raise
                    logger.info(
                        f"S3 operation '{func.__name__}' failed. Attempt {attempts}/{max_attempts}. "
                        f"Retrying in {delay:.2f}s. Error: {e}"
                    )
                    time.sleep(delay)
                    delay *= backoff_factor
        return wrapper
    return decorator


class BatchOperationContextManager:
    """
    Context manager for batch operations to collect and summarize errors.
    """
    def __init__(self, operation_name="Batch Operation"):
        self.operation_name = operation_name
        self.errors = []
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    def __enter__(self):
        self.logger.info(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.errors:
            self.logger.warning(
                f"{self.operation_name} completed with {len(self.errors)} error(s)."
            )
            for i, error_detail in enumerate(self.errors):
                self.logger.error(
                    f"  Error {i+1}/{len(self.errors)} for item "
                    f"'{error_detail['item']}': {error_detail['error']}"
                )
        elif exc_type:
            self.logger.error(
                f"{self.operation_name} failed due to an unhandled exception: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb),
            )
        else:
            self.logger.info(f"{self.operation_name} completed successfully.")

        # Never suppress exceptions raised inside the block
        return False

    def add_error(self, error_message: str, item_identifier: str = "Unknown item"):
        """
        Report an error for a specific item.

        Args:
            error_message (str): The error message or exception string.
            item_identifier (str): A string identifying the item that failed (e.g., key).
        """
        self.errors.append({"item": item_identifier, "error": str(error_message)})
        self.logger.debug(
            f"Error added for item '{item_identifier}' in {self.operation_name}: {error_message}"
        )
