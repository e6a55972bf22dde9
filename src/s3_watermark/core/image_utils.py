"""Image classification and watermark compositing utilities."""

from typing import Optional, Tuple

from PIL import Image

from .models import WatermarkAsset

SUPPORTED_EXTENSIONS = (".jpg", ".jpeg", ".png")

_FORMATS = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
}

_CONTENT_TYPES = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
}


def is_candidate(key: str) -> bool:
    """
    Decide whether an object key names a supported input image.

    The check is a case-insensitive suffix match against ``.jpg``, ``.jpeg``
    and ``.png``. Directory markers (keys ending in ``/``) never match.
    """
    return key.lower().endswith(SUPPORTED_EXTENSIONS) and not key.endswith("/")


def image_format_for_key(key: str) -> str:
    """
    Map a key's suffix to the Pillow format used to encode it.

    Raises:
        ValueError: If the key does not carry a supported suffix
    """
    extension = key.rsplit(".", 1)[-1].lower() if "." in key else ""
    try:
        return _FORMATS[extension]
    except KeyError:
        raise ValueError(f"Unsupported image extension for key: {key}") from None


def content_type_for_key(key: str) -> str:
    """Content type to store alongside an encoded image."""
    try:
        return _CONTENT_TYPES[image_format_for_key(key)]
    except ValueError:
        return "application/octet-stream"


def calculate_target_key(source_key: str, source_prefix: str, target_prefix: str) -> str:
    """
    Calculate the target key by swapping the source prefix for the target prefix.

    The remainder of the key path is preserved, so nested keys keep their
    sub-directories.

    Args:
        source_key: Original object key
        source_prefix: Prefix the key was listed under
        target_prefix: Prefix to write under

    Returns:
        Target object key
    """
    if not source_prefix:
        return f"{target_prefix}{source_key}"
    if source_key.startswith(source_prefix):
        return target_prefix + source_key[len(source_prefix):]
    return source_key.replace(source_prefix, target_prefix, 1)


def fit_to_height(asset: WatermarkAsset, max_height: int) -> WatermarkAsset:
    """
    Return an asset no taller than ``max_height``.

    Taller assets are resized to exactly ``max_height`` with the width
    scaled by the same ratio. The returned asset owns a new image; the
    input asset is returned untouched when it already fits.
    """
    if asset.height <= max_height:
        return asset

    new_width = max(1, round(asset.width * max_height / asset.height))
    # Pillow skips LANCZOS for palette images
    resized = asset.image.convert("RGBA").resize(
        (new_width, max_height), Image.Resampling.LANCZOS
    )
    return WatermarkAsset(image=resized, source=asset.source)


def watermark_positions(
    base_size: Tuple[int, int],
    right_width: int,
    max_height: int,
    padding: int,
) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """
    Anchor points for the left and right watermarks on a base image.

    Both watermarks share a baseline ``max_height + padding`` above the
    bottom edge. Coordinates may be negative for small bases; no clamping
    is applied.
    """
    base_width, base_height = base_size
    y = base_height - max_height - padding
    return (padding, y), (base_width - right_width - padding, y)


def composite_watermarks(
    base: Image.Image,
    left: WatermarkAsset,
    right: WatermarkAsset,
    max_height: int = 250,
    padding: int = 20,
    logger: Optional[object] = None,
) -> Image.Image:
    """
    Overlay the left and right watermarks onto a copy of ``base``.

    Args:
        base: Decoded source image, left unmodified
        left: Watermark for the bottom-left corner
        right: Watermark for the bottom-right corner
        max_height: Watermarks taller than this are scaled down to it
        padding: Distance in pixels from the image edges
        logger: Optional logger receiving resize debug messages

    Returns:
        A new RGBA image with the same dimensions as ``base``
    """
    left_fitted = fit_to_height(left, max_height)
    right_fitted = fit_to_height(right, max_height)
    if logger is not None:
        if left_fitted is not left:
            logger.debug(f"Resized left watermark to height: {max_height}")
        if right_fitted is not right:
            logger.debug(f"Resized right watermark to height: {max_height}")

    left_anchor, right_anchor = watermark_positions(
        base.size, right_fitted.width, max_height, padding
    )

    watermarked = base.convert("RGBA")
    for asset, anchor in ((left_fitted, left_anchor), (right_fitted, right_anchor)):
        # paste() clips anything that falls outside the layer
        layer = Image.new("RGBA", watermarked.size, (0, 0, 0, 0))
        layer.paste(asset.image.convert("RGBA"), anchor)
        watermarked = Image.alpha_composite(watermarked, layer)
    return watermarked


def prepare_for_format(image: Image.Image, format_type: str) -> Image.Image:
    """Convert an image into a mode the target format can store."""
    if format_type == "JPEG" and image.mode != "RGB":
        return image.convert("RGB")
    return image
