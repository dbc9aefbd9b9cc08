"""
Image Utilities
===============

Pillow helpers for reading back PNG pixel dimensions and applying the
corrective crop/resize a thumbnail-style backend needs.
"""

from typing import Tuple
from pathlib import Path

from PIL import Image, UnidentifiedImageError  # type: ignore

from dmg_background.config.logging import get_logger
from dmg_background.core.rendering.errors import ImageReadError

logger = get_logger(__name__)


def read_dimensions(png_path: Path) -> Tuple[int, int]:
    """
    Return ``(width, height)`` of an image file.

    Raises:
        ImageReadError: If the file is missing or not a readable image
    """
    try:
        with Image.open(png_path) as image:
            return image.size
    except (OSError, UnidentifiedImageError) as e:
        raise ImageReadError(f"Cannot read image {png_path}: {e}") from e


def correct_dimensions(png_path: Path, width: int, height: int) -> Tuple[int, int]:
    """
    Force an image to exactly ``width`` x ``height`` in place.

    Thumbnail services fit the drawing into a square matching the larger target
    dimension, padding the shorter side. The image is first scaled so its larger
    side equals the target's larger side, then cropped from the top-left origin
    so the header stays and the bottom padding goes. Anything still off is
    resized.

    Returns:
        Final ``(width, height)``
    """
    try:
        with Image.open(png_path) as opened:
            image = opened.copy()
    except (OSError, UnidentifiedImageError) as e:
        raise ImageReadError(f"Cannot read image {png_path}: {e}") from e
    original_size = image.size

    if image.size == (width, height):
        return image.size

    target_long = max(width, height)
    current_long = max(image.size)
    if current_long != target_long:
        scale = target_long / current_long
        scaled = (max(1, round(image.width * scale)), max(1, round(image.height * scale)))
        image = image.resize(scaled, Image.LANCZOS)

    if image.width >= width and image.height >= height:
        image = image.crop((0, 0, width, height))

    if image.size != (width, height):
        image = image.resize((width, height), Image.LANCZOS)

    image.save(png_path, format="PNG")

    logger.debug(
        "Corrected image dimensions",
        path=str(png_path),
        original=f"{original_size[0]}x{original_size[1]}",
        final=f"{width}x{height}",
    )
    return image.size
