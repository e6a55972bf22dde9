"""Validation and loading of the left and right watermark images."""

import io
import os
from typing import Optional

import requests
from PIL import Image, UnidentifiedImageError

from .exceptions import WatermarkSourceError
from .logging_config import get_logger
from .models import WatermarkAsset

URL_SCHEMES = ("http://", "https://")


def is_url(reference: str) -> bool:
    return reference.lower().startswith(URL_SCHEMES)


def validate_watermark_reference(reference: str) -> None:
    """
    Check a watermark reference before anything is downloaded or decoded.

    URLs only need to end in ``.png``. Local paths must end in ``.png`` and
    exist on disk.

    Raises:
        WatermarkSourceError: Naming the offending reference
    """
    if is_url(reference):
        if not reference.lower().endswith(".png"):
            raise WatermarkSourceError(
                f"watermark URL must end with .png: {reference}", reference
            )
        return

    if not reference.lower().endswith(".png"):
        raise WatermarkSourceError(
            f"watermark must be a PNG file: {reference}", reference
        )
    if not os.path.exists(reference):
        raise WatermarkSourceError(
            f"watermark file not found: {reference}", reference
        )


def _decode(payload: io.BytesIO, reference: str) -> Image.Image:
    try:
        image = Image.open(payload)
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise WatermarkSourceError(
            f"failed to decode watermark {reference}: {e}", reference
        ) from e
    return image


def download_watermark(reference: str, timeout: float = 30.0) -> bytes:
    """Fetch a watermark over HTTP(S), requiring a successful status."""
    try:
        response = requests.get(reference, timeout=timeout)
    except requests.RequestException as e:
        raise WatermarkSourceError(
            f"failed to download watermark from URL {reference}: {e}", reference
        ) from e

    if not response.ok:
        raise WatermarkSourceError(
            f"failed to download watermark from URL {reference}: "
            f"status code {response.status_code}",
            reference,
        )
    return response.content


def load_watermark(
    reference: str, timeout: float = 30.0, validate: bool = True
) -> WatermarkAsset:
    """
    Resolve a watermark reference into a decoded asset.

    Args:
        reference: Local path or http(s) URL of a PNG file
        timeout: Seconds to wait for a URL download
        validate: Run :func:`validate_watermark_reference` first

    Returns:
        The decoded watermark at its natural size
    """
    logger = get_logger("s3-watermark.watermarks")
    if validate:
        validate_watermark_reference(reference)

    if is_url(reference):
        logger.info(f"Downloading watermark from {reference}")
        payload = io.BytesIO(download_watermark(reference, timeout))
        image = _decode(payload, reference)
    else:
        logger.info(f"Loading watermark from {reference}")
        try:
            with open(reference, "rb") as handle:
                image = _decode(io.BytesIO(handle.read()), reference)
        except OSError as e:
            raise WatermarkSourceError(
                f"failed to open watermark {reference}: {e}", reference
            ) from e

    logger.info(f"Loaded watermark {reference} ({image.width}x{image.height})")
    return WatermarkAsset(image=image, source=reference)


def load_watermark_pair(
    left_reference: str, right_reference: str, timeout: Optional[float] = None
):
    """Load the left and right watermarks, left first."""
    kwargs = {} if timeout is None else {"timeout": timeout}
    try:
        left = load_watermark(left_reference, **kwargs)
    except WatermarkSourceError as e:
        raise WatermarkSourceError(f"failed to load left watermark: {e}", e.reference) from e
    try:
        right = load_watermark(right_reference, **kwargs)
    except WatermarkSourceError as e:
        raise WatermarkSourceError(f"failed to load right watermark: {e}", e.reference) from e
    return left, right
