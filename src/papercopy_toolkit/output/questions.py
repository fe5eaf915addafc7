"""
Module: output.questions

Purpose:
    Cut scanned pages into one image per question. Every QR code below the
    topmost one starts a new question; the cut is made a few pixels above
    the code so the code stays with its question.

Key Functions:
    - cut_points(): Y positions to cut at, from decoded barcodes
    - question_regions(): Crop boxes for a page of a given size
    - split_at_codes(): Crop one page image into question images
    - write_question_images(): Files -> "{stem}-{n}.jpg" per question

Dependencies:
    - PIL.Image: Cropping
    - scanning.barcodes: QR decoding
    - scanning.sources: Page discovery and loading

Used By:
    - cli (split-questions command)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from PIL import Image

from papercopy_toolkit.core.models.barcodes import DecodedBarcode, Symbology
from papercopy_toolkit.core.models.pages import PageSource
from papercopy_toolkit.scanning.barcodes import BarcodeEngine
from papercopy_toolkit.scanning.sources import ScanError, expand_sources, load_page_image
from .config import ExportConfig
from .errors import ExportError
from .pdf import TickCallback

logger = logging.getLogger(__name__)

QUESTION_PADDING = 5
QUESTION_THRESHOLD = 0.7
QUESTION_EXTENSION = ".jpg"

Box = Tuple[int, int, int, int]


# ─────────────────────────────────────────────────────────────────────────────
# Geometry
# ─────────────────────────────────────────────────────────────────────────────

def cut_points(barcodes: Iterable[DecodedBarcode], padding: int = QUESTION_PADDING) -> List[int]:
    """
    Y positions at which a page should be cut.

    Only QR codes count. The topmost one is skipped since nothing above it
    needs separating.

    Args:
        barcodes: Codes decoded from the page
        padding: Pixels to cut above each code's upper edge

    Returns:
        Cut positions, top to bottom
    """
    tops = sorted(code.top for code in barcodes if code.symbology is Symbology.QR)
    return [top - padding for top in tops[1:]]


def question_regions(cuts: Sequence[int], width: int, height: int) -> List[Box]:
    """
    Crop boxes (left, upper, right, lower) between consecutive cuts.

    The last box runs to the bottom of the page. Cuts that would produce
    an empty box or fall outside the page are ignored.
    """
    boxes: List[Box] = []
    last_top = 0
    for cut in cuts:
        if cut <= last_top or cut >= height:
            logger.debug(f"Ignoring cut at y={cut} (previous {last_top}, height {height})")
            continue
        boxes.append((0, last_top, width, cut))
        last_top = cut
    boxes.append((0, last_top, width, height))
    return boxes


def split_at_codes(
    image: Image.Image,
    barcodes: Iterable[DecodedBarcode],
    padding: int = QUESTION_PADDING,
) -> List[Image.Image]:
    """
    Crop a page image into one image per question.

    Args:
        image: Upright page image the barcodes were decoded from
        barcodes: Decoded codes
        padding: Pixels kept above each question's QR code

    Returns:
        Question images, top to bottom (the whole page when it has at most
        one QR code)
    """
    boxes = question_regions(cut_points(barcodes, padding), image.width, image.height)
    return [image.crop(box) for box in boxes]


# ─────────────────────────────────────────────────────────────────────────────
# Files
# ─────────────────────────────────────────────────────────────────────────────

def _output_stem(source: PageSource) -> str:
    if source.is_pdf_page:
        return f"{source.path.stem}_{source.page_index + 1}"
    return source.path.stem


def write_question_images(
    paths: Iterable[Path],
    config: Optional[ExportConfig] = None,
    *,
    engine: Optional[BarcodeEngine] = None,
    padding: int = QUESTION_PADDING,
    tick: Optional[TickCallback] = None,
) -> List[Path]:
    """
    Split every page of the given files into question images.

    Each page is written as "{stem}-{n}.jpg" (n from 0) into
    config.output_dir. PDF pages use "{stem}_{page}" as the stem, page
    numbered from 1.

    Args:
        paths: Image files or PDFs
        config: Export settings (output_dir, dpi, jpeg_quality)
        engine: Barcode decoder; defaults to one with a 0.7 threshold
        padding: Pixels kept above each question's QR code
        tick: Called once per page

    Returns:
        Paths written, in page order

    Raises:
        ExportError: If a page cannot be read or an image cannot be written
    """
    config = config or ExportConfig()
    engine = engine or BarcodeEngine(threshold=QUESTION_THRESHOLD)
    written: List[Path] = []

    try:
        sources = expand_sources(paths)
    except ScanError as e:
        raise ExportError(str(e)) from e

    for source in sources:
        try:
            image = load_page_image(source, config.dpi)
            questions = split_at_codes(image, engine.decode(image), padding)
            config.output_dir.mkdir(parents=True, exist_ok=True)
            stem = _output_stem(source)
            for index, question in enumerate(questions):
                path = config.output_dir / f"{stem}-{index}{QUESTION_EXTENSION}"
                question.convert("RGB").save(path, format="JPEG", quality=config.jpeg_quality)
                written.append(path)
        except (OSError, ScanError) as e:
            raise ExportError(f"Failed to split {source}: {e}") from e

        logger.debug(f"{source}: {len(questions)} questions")
        if tick is not None:
            tick()

    logger.info(f"Wrote {len(written)} question images to {config.output_dir}")
    return written
