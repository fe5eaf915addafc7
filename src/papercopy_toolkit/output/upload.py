"""
Module: output.upload

Purpose:
    Write one upload-ready JPEG per attempt, named with the
    U{copy}_Q{question}_A{attempt}_G{grade}_P{page} convention so a
    gradebook importer (and the duplicate checker) can parse it back.

Key Functions:
    - write_upload_images(): Merged JPEG per attempt

Dependencies:
    - PIL: JPEG encoding
    - output.images: Merged attempt images

Used By:
    - cli: --upload
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Set

from papercopy_toolkit.core.models.assessment import Assessment
from papercopy_toolkit.scanning.sources import ScanError
from .config import ExportConfig
from .errors import ExportError
from .images import attempt_to_image
from .pdf import TickCallback

logger = logging.getLogger(__name__)

UPLOAD_EXTENSION = ".jpg"


def _unique_path(path: Path, taken: Set[Path]) -> Path:
    """
    First of path, "stem-1", "stem-2", ... not already written in this run.

    The numeric suffix keeps the name parseable by the duplicate checker.
    """
    candidate = path
    counter = 1
    while candidate in taken:
        candidate = path.with_name(f"{path.stem}-{counter}{path.suffix}")
        counter += 1
    return candidate


def write_upload_images(
    assessment: Assessment,
    config: Optional[ExportConfig] = None,
    tick: Optional[TickCallback] = None,
) -> List[Path]:
    """
    Write each attempt as a single merged JPEG into config.output_dir.

    Attempts that share a name (two scans of one attempt, or several
    unidentified attempts) are all kept: later ones get a "-1", "-2", ...
    suffix and a warning is logged.

    Args:
        assessment: Scanned assessment
        config: Export settings
        tick: Called once per written image

    Returns:
        Paths written, in attempt order

    Raises:
        ExportError: If an image cannot be produced or written
    """
    config = config or ExportConfig()
    written: List[Path] = []
    taken: Set[Path] = set()

    for attempt in assessment.each_attempt():
        if not attempt.pages:
            continue
        named = attempt.filename_for_upload(0, UPLOAD_EXTENSION, config.output_dir)
        path = _unique_path(named, taken)
        if path != named:
            logger.warning(
                f"{named.name} already written; saving {attempt.first_source} as {path.name}",
                extra={"path": str(path), "source": attempt.first_source},
            )
        try:
            image = attempt_to_image(
                attempt, scale=config.scale, footer=config.footer, dpi=config.dpi
            )
            path.parent.mkdir(parents=True, exist_ok=True)
            image.save(path, format="JPEG", quality=config.jpeg_quality)
        except (OSError, ScanError) as e:
            raise ExportError(f"Failed to write {path}: {e}") from e
        taken.add(path)
        written.append(path)
        if tick is not None:
            tick()

    logger.info(f"Wrote {len(written)} upload images to {config.output_dir}")
    return written
