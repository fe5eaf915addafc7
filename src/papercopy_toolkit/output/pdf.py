"""
Module: output.pdf

Purpose:
    Render attempts to PDF using ReportLab. Each attempt becomes one PDF
    page sized exactly to its merged image (one pixel per point).

Key Functions:
    - pdf_from_attempts(): Main rendering function
    - write_pdfs_by_copy(): One PDF per student copy
    - write_pdfs_by_question(): One PDF per question variant
    - write_pdf_by_question(): All valid attempts, sorted by question
    - write_invalid_attempts_pdf(): Unidentified attempts for manual review

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - output.images: Merged attempt images

Used By:
    - cli: --question, --attempt, --invalids
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from papercopy_toolkit.core.models.assessment import Assessment
from papercopy_toolkit.core.models.attempts import Attempt
from papercopy_toolkit.scanning.sources import ScanError
from .config import ExportConfig
from .errors import ExportError
from .images import attempt_to_image

logger = logging.getLogger(__name__)

# Called once per written document or image
TickCallback = Callable[[], None]


def pdf_from_attempts(
    output_path: Path,
    attempts: Sequence[Attempt],
    config: Optional[ExportConfig] = None,
) -> Path:
    """
    Write an ordered collection of attempts to a single PDF.

    Args:
        output_path: Path to write PDF
        attempts: Attempts in page order
        config: Export settings (scale, footer, dpi, quality)

    Returns:
        output_path

    Raises:
        ExportError: If the PDF or a page image cannot be produced

    Example:
        >>> pdf_from_attempts(Path("out/question_3.pdf"), assessment.by_question["3"])
    """
    config = config or ExportConfig()
    if not attempts:
        logger.warning(f"No attempts for {output_path.name}, creating empty PDF")

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        c = canvas.Canvas(str(output_path))
        for attempt in attempts:
            image = attempt_to_image(
                attempt, scale=config.scale, footer=config.footer, dpi=config.dpi
            )
            _draw_attempt_page(c, image, config.jpeg_quality)
        c.save()
    except (OSError, ScanError) as e:
        raise ExportError(f"Failed to write {output_path}: {e}") from e

    logger.info(f"Rendered {len(attempts)} pages to {output_path}")
    return output_path


def _draw_attempt_page(c: canvas.Canvas, image: Image.Image, quality: int) -> None:
    """Add one page exactly the size of the image and fill it."""
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format="JPEG", quality=quality)
    buffer.seek(0)

    width, height = image.size
    c.setPageSize((width, height))
    c.drawImage(ImageReader(buffer), 0, 0, width=width, height=height)
    c.showPage()


def _write_groups(
    groups: Iterable[Tuple[str, List[Attempt]]],
    prefix: str,
    config: ExportConfig,
    tick: Optional[TickCallback],
) -> List[Path]:
    written: List[Path] = []
    for key, attempts in groups:
        path = config.output_dir / f"{prefix}_{key}.pdf"
        written.append(pdf_from_attempts(path, attempts, config))
        if tick is not None:
            tick()
    return written


def write_pdfs_by_copy(
    assessment: Assessment,
    config: Optional[ExportConfig] = None,
    tick: Optional[TickCallback] = None,
) -> List[Path]:
    """
    Write one PDF per student copy, pages in scan order.

    Files are named "{copy_prefix}_{copy_id}.pdf" in config.output_dir.
    """
    config = config or ExportConfig()
    return _write_groups(assessment.each_copy(), config.copy_prefix, config, tick)


def write_pdfs_by_question(
    assessment: Assessment,
    config: Optional[ExportConfig] = None,
    tick: Optional[TickCallback] = None,
) -> List[Path]:
    """
    Write one PDF per question variant containing every attempt at it.

    Files are named "{question_prefix}_{question_id}.pdf" in config.output_dir.
    """
    config = config or ExportConfig()
    return _write_groups(assessment.each_question(), config.question_prefix, config, tick)


def write_pdf_by_question(
    assessment: Assessment,
    output_path: Path,
    config: Optional[ExportConfig] = None,
) -> Path:
    """Write all valid attempts to one PDF, ordered by question id."""
    attempts = sorted(assessment.valid_attempts(), key=lambda a: a.question_id)
    return pdf_from_attempts(output_path, attempts, config)


def write_invalid_attempts_pdf(
    assessment: Assessment,
    output_path: Path,
    config: Optional[ExportConfig] = None,
) -> Path:
    """Write every attempt missing an identifier to one PDF for manual review."""
    return pdf_from_attempts(output_path, assessment.invalid_attempts(), config)
