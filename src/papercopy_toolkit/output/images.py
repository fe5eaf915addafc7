"""
Module: output.images

Purpose:
    Raster operations for exports: turn pages upright, scale them and stack
    an attempt's pages (plus an optional footer) into one tall image.

Key Functions:
    - rotate_upright(): Apply a clockwise page rotation
    - merge_images(): Stack images top to bottom
    - attempt_to_image(): One merged image per attempt

Dependencies:
    - PIL.Image: Image manipulation
    - scanning.sources: Page loading

Used By:
    - output.pdf: One PDF page per merged attempt image
    - output.upload: One JPEG per attempt
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from PIL import Image

from papercopy_toolkit.core.models.attempts import Attempt
from papercopy_toolkit.core.models.pages import PageSource
from papercopy_toolkit.scanning.config import DEFAULT_DPI
from papercopy_toolkit.scanning.sources import ScanError, load_page_image

logger = logging.getLogger(__name__)

BACKGROUND = (255, 255, 255)

# Clockwise degrees -> PIL transpose (PIL's ROTATE_* are counter-clockwise)
_CLOCKWISE = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}

PageLoader = Callable[[PageSource, int], Image.Image]


def rotate_upright(image: Image.Image, rotation: int) -> Image.Image:
    """
    Rotate an image clockwise by a multiple of 90 degrees.

    Args:
        image: Page image
        rotation: 0, 90, 180 or 270

    Returns:
        Rotated image (the same object when rotation is 0)
    """
    if rotation == 0:
        return image
    try:
        return image.transpose(_CLOCKWISE[rotation])
    except KeyError:
        raise ValueError(f"Unsupported rotation: {rotation}") from None


def scale_image(image: Image.Image, scale: float) -> Image.Image:
    """Resize by a factor; 0 and 1 leave the image untouched."""
    if scale in (0, 1):
        return image
    width = max(1, int(round(image.width * scale)))
    height = max(1, int(round(image.height * scale)))
    return image.resize((width, height), Image.Resampling.LANCZOS)


def merge_images(images: Sequence[Image.Image]) -> Image.Image:
    """
    Stack images top to bottom, left aligned, on a white background.

    Raises:
        ValueError: If no images are given
    """
    if not images:
        raise ValueError("No images to merge")
    width = max(image.width for image in images)
    height = sum(image.height for image in images)
    merged = Image.new("RGB", (width, height), BACKGROUND)
    top = 0
    for image in images:
        merged.paste(image.convert("RGB"), (0, top))
        top += image.height
    return merged


def attempt_to_image(
    attempt: Attempt,
    *,
    scale: float = 1.0,
    footer: Optional[Path] = None,
    dpi: int = DEFAULT_DPI,
    loader: PageLoader = load_page_image,
) -> Image.Image:
    """
    Merge an attempt's pages into a single upright image.

    Each page is reloaded, rotated by its recorded rotation and scaled;
    the footer image (if any) is appended unscaled.

    Args:
        attempt: Attempt to render
        scale: Size multiplier for pages
        footer: Optional footer image path
        dpi: Resolution for PDF pages
        loader: Page loader, called as loader(source, dpi)

    Returns:
        RGB image

    Raises:
        ScanError: If a page or the footer cannot be read
    """
    parts: List[Image.Image] = []
    for page in attempt.pages:
        image = loader(page.source, dpi)
        parts.append(scale_image(rotate_upright(image, page.rotation), scale))

    if footer is not None:
        try:
            with Image.open(footer) as footer_image:
                parts.append(footer_image.convert("RGB"))
        except OSError as e:
            raise ScanError(f"Cannot read footer {footer}: {e}") from e

    if not parts:
        raise ScanError(f"Attempt {attempt.identifiers} has no pages")

    return merge_images(parts)
