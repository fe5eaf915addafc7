"""
Module: scanning.resolver

Purpose:
    Resolve one page's identity, rotation and grade from the barcodes
    decoded on it. Every ambiguity degrades to "unset" so a bad scan never
    aborts a batch; callers query the result to decide what to repair.

Key Functions:
    - resolve_page(): Fold a page's barcodes into a PageResolution

Key Classes:
    - PageResolution: identifiers, rotation and surviving grade candidates

Dependencies:
    - scanning.payload: Payload classification
    - scanning.rotation: Rotation heuristics
    - core.models: DecodedBarcode, IdentifierTriple

Used By:
    - scanning.pipeline: One call per scanned page

Grade Resolution:
    Every grade bubble carries a "GRADE<n>" code that a filled bubble hides.
    Each visible code eliminates its grade; a single survivor is the grade.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

from papercopy_toolkit.core.models.barcodes import DecodedBarcode
from papercopy_toolkit.core.models.identifiers import IdentifierTriple
from .config import DEFAULT_MAX_GRADE
from .payload import BareCopyTag, DisqualifierMatch, IdentifierMatch, parse_payload
from .rotation import rotation_from_corner_quadrant, rotation_from_edge_proximity

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PageResolution:
    """
    Outcome of scanning one page's barcodes.

    Attributes:
        identifiers: Identifier components found (possibly partial)
        rotation: Clockwise degrees to make the page upright
        possible_grades: Grades not eliminated by a disqualifier
    """
    identifiers: IdentifierTriple
    rotation: int
    possible_grades: FrozenSet[int]

    @property
    def grade(self) -> Optional[int]:
        """The grade if exactly one candidate survived, else None."""
        if len(self.possible_grades) == 1:
            return next(iter(self.possible_grades))
        return None


def resolve_page(
    width: int,
    height: int,
    barcodes: Iterable[DecodedBarcode],
    *,
    max_grade: int = DEFAULT_MAX_GRADE,
    autorotate: bool = True,
    page_label: str = "",
) -> PageResolution:
    """
    Resolve a page from its decoded barcodes.

    Barcodes are processed in engine order:
    1. Identifier codes fill unset identifier fields; the first one found
       also fixes the rotation (corner quadrant) if none is known yet.
    2. Disqualifier codes remove their grade from the candidates.
    3. Linear copy tags fill copy_id if unset and fix the rotation (edge
       proximity) if none is known yet.
    With no rotation-bearing code, portrait pages get 0 and landscape
    pages 90. autorotate=False forces 0.

    Args:
        width: Page width in pixels
        height: Page height in pixels
        barcodes: Codes decoded on the page
        max_grade: Highest grade; candidates start as 0..max_grade
        autorotate: Whether to keep the estimated rotation
        page_label: Page description used in log messages

    Returns:
        PageResolution (never raises for ambiguous input)

    Example:
        >>> code = DecodedBarcode.create(Symbology.QR, "12|3|1", [(100, 900)])
        >>> result = resolve_page(800, 1000, [code])
        >>> result.identifiers, result.rotation, result.grade
        (IdentifierTriple('12', '3', '1'), 0, None)
    """
    possible_grades = set(range(0, max_grade + 1))
    identifiers = IdentifierTriple.empty()
    rotation: Optional[int] = None

    for code in barcodes:
        match = parse_payload(code.payload, code.symbology)

        if isinstance(match, IdentifierMatch):
            _log_disagreement(identifiers, match.identifiers, code, page_label)
            identifiers = identifiers.with_missing_from(match.identifiers)
            if rotation is None:
                rotation = rotation_from_corner_quadrant(width, height, code.location)

        elif isinstance(match, DisqualifierMatch):
            possible_grades.discard(match.grade)

        elif isinstance(match, BareCopyTag):
            tag = IdentifierTriple(copy_id=match.copy_id)
            _log_disagreement(identifiers, tag, code, page_label)
            identifiers = identifiers.with_missing_from(tag)
            if rotation is None:
                rotation = rotation_from_edge_proximity(width, height, code.location)

        else:
            logger.debug(f"Ignoring unrecognized barcode {code!r} on {page_label or 'page'}")

    if rotation is None:
        rotation = 0 if height > width else 90

    if not autorotate:
        rotation = 0

    return PageResolution(
        identifiers=identifiers,
        rotation=rotation,
        possible_grades=frozenset(possible_grades),
    )


def _log_disagreement(
    current: IdentifierTriple,
    incoming: IdentifierTriple,
    code: DecodedBarcode,
    page_label: str,
) -> None:
    """Warn when a later code contradicts an identifier already accepted."""
    conflicts = current.conflicts_with(incoming)
    if not conflicts:
        return
    logger.warning(
        f"Conflicting {', '.join(conflicts)} on {page_label or 'page'}: "
        f"keeping {current}, ignoring {code.symbology} code {code.payload!r}",
        extra={
            "page": page_label,
            "conflicts": conflicts,
            "kept": current.to_dict(),
            "ignored_payload": code.payload,
        },
    )
