"""
Module: pages

Purpose:
    Provides PageSource (where a scanned page comes from) and PageRecord
    (one physical scanned page after its barcodes were resolved).

Key Classes:
    - PageSource: Image file, or one page of a PDF
    - PageRecord: Dimensions, rotation, identifiers and grade candidates

Dependencies:
    - dataclasses (std)
    - pathlib (std)
    - .identifiers.IdentifierTriple

Used By:
    - scanning.sources: Creates PageSource for each input page
    - scanning.pipeline: Creates PageRecord from a PageResolution
    - core.models.attempts.Attempt: Owns its PageRecords
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional

from .identifiers import IdentifierTriple

VALID_ROTATIONS = (0, 90, 180, 270)


@dataclass(frozen=True, slots=True)
class PageSource:
    """
    Opaque handle to the raster behind a page.

    Attributes:
        path: Image or PDF file on disk
        page_index: Zero-based page of a PDF, None for image files

    Example:
        >>> str(PageSource(Path("scan.pdf"), 2))
        'scan.pdf[2]'
    """

    path: Path
    page_index: Optional[int] = None

    @property
    def is_pdf_page(self) -> bool:
        return self.page_index is not None

    @property
    def extension(self) -> str:
        """Extension of the underlying file, including the dot."""
        return self.path.suffix

    def __str__(self) -> str:
        if self.page_index is None:
            return str(self.path)
        return f"{self.path}[{self.page_index}]"


@dataclass(frozen=True, slots=True)
class PageRecord:
    """
    One scanned page (immutable).

    Attributes:
        source: Where the page raster lives
        width: Page width in pixels
        height: Page height in pixels
        rotation: Clockwise degrees needed to make the page upright
        identifiers: Identifier components read from this page
        possible_grades: Grades no disqualifier code eliminated

    Invariants:
        - width > 0 and height > 0
        - rotation in {0, 90, 180, 270}
    """

    source: PageSource
    width: int
    height: int
    rotation: int = 0
    identifiers: IdentifierTriple = field(default_factory=IdentifierTriple)
    possible_grades: FrozenSet[int] = frozenset()

    def __post_init__(self) -> None:
        """Validate page on construction."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"page dimensions must be positive: {self.width}x{self.height}")
        if self.rotation not in VALID_ROTATIONS:
            raise ValueError(f"rotation must be one of {VALID_ROTATIONS}: {self.rotation}")

    @property
    def grade(self) -> Optional[int]:
        """The single surviving grade candidate, or None."""
        if len(self.possible_grades) == 1:
            return next(iter(self.possible_grades))
        return None

    def to_dict(self) -> dict:
        return {
            "path": str(self.source),
            "width": self.width,
            "height": self.height,
            "rotation": self.rotation,
            **self.identifiers.to_dict(),
            "grade": self.grade,
        }
