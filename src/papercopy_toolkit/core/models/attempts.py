"""
Module: attempts

Purpose:
    Provides the Attempt class - the paper version of one graded question
    attempt, spanning one or more scanned pages that share an identifier
    triple and a grade.

Key Functions:
    - build_attempt(pages, identifiers, grade): Aggregate resolved pages
    - Attempt.from_pages(pages): Merge identifiers/grades across pages
    - Attempt.missing_identifiers() / Attempt.ungraded()
    - Attempt.filename_for_upload(page, extension, directory)

Dependencies:
    - dataclasses (std)
    - pathlib (std)
    - .pages.PageRecord
    - .identifiers.IdentifierTriple

Used By:
    - scanning.pipeline: One attempt per image file or PDF page
    - core.models.assessment.Assessment
    - output.*: Writers consume attempts

Note:
    Unlike pages, attempts are mutable: identifiers and grade may be
    corrected after the scan (interactive repair).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .identifiers import IdentifierTriple
from .pages import PageRecord

logger = logging.getLogger(__name__)

UPLOAD_FILENAME_FORMAT = "U{copy}_Q{question}_A{attempt}_G{grade}_P{page}{extension}"


@dataclass(eq=False)
class Attempt:
    """
    One student's response to one question variant.

    Attributes:
        pages: Scanned pages in reading order
        copy_id: Student copy identifier, or None if unknown
        question_id: Question variant identifier, or None if unknown
        attempt_id: Attempt identifier, or None if unknown
        grade: Resolved grade, or None if ungraded

    Example:
        >>> attempt = build_attempt([page], IdentifierTriple("12", "3", "1"), grade=7)
        >>> attempt.missing_identifiers()
        False
    """

    pages: List[PageRecord] = field(default_factory=list)
    copy_id: Optional[str] = None
    question_id: Optional[str] = None
    attempt_id: Optional[str] = None
    grade: Optional[int] = None

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_pages(cls, pages: Sequence[PageRecord]) -> Attempt:
        """
        Create an attempt from pages scanned together.

        Identifiers are taken from the first page that supplies each
        component. Grade candidates are intersected across pages, so a
        disqualifier on any page eliminates that grade.

        Args:
            pages: Resolved pages of the attempt, in order

        Returns:
            New Attempt
        """
        identifiers = IdentifierTriple.empty()
        candidates = None
        for page in pages:
            conflicts = identifiers.conflicts_with(page.identifiers)
            if conflicts:
                logger.warning(
                    f"Page {page.source} disagrees on {', '.join(conflicts)}: "
                    f"keeping {identifiers}, ignoring {page.identifiers}",
                    extra={"page": str(page.source), "conflicts": conflicts},
                )
            identifiers = identifiers.with_missing_from(page.identifiers)
            if candidates is None:
                candidates = set(page.possible_grades)
            else:
                candidates &= page.possible_grades

        grade = next(iter(candidates)) if candidates and len(candidates) == 1 else None
        return build_attempt(pages, identifiers, grade)

    # ─────────────────────────────────────────────────────────────────────────
    # Predicates
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def identifiers(self) -> IdentifierTriple:
        return IdentifierTriple(self.copy_id, self.question_id, self.attempt_id)

    @identifiers.setter
    def identifiers(self, value: IdentifierTriple) -> None:
        self.copy_id, self.question_id, self.attempt_id = value.as_tuple()

    def missing_identifiers(self) -> bool:
        """True iff at least one identifier component is unset."""
        return not self.identifiers.is_complete

    def ungraded(self) -> bool:
        """True iff no grade has been resolved or entered."""
        return self.grade is None

    # ─────────────────────────────────────────────────────────────────────────
    # Geometry
    # ─────────────────────────────────────────────────────────────────────────

    def maximum_dimensions(self) -> Tuple[int, int]:
        """Largest page width and largest page height in this attempt."""
        if not self.pages:
            return 0, 0
        return max(p.width for p in self.pages), max(p.height for p in self.pages)

    # ─────────────────────────────────────────────────────────────────────────
    # Naming
    # ─────────────────────────────────────────────────────────────────────────

    def filename_for_upload(
        self,
        page: int = 0,
        extension: Optional[str] = None,
        directory: Optional[Path] = None,
    ) -> Path:
        """
        Upload filename for one page of this attempt.

        Unset identifiers and an unset grade render as empty fields.

        Args:
            page: Page index appended as the P field
            extension: Extension including the dot; defaults to the page's own
            directory: Target directory; defaults to the page's own

        Returns:
            Path like "dir/U12_Q3_A1_G7_P0.jpg"
        """
        source = self.pages[page].source
        if extension is None:
            extension = ".jpg" if source.is_pdf_page else source.extension
        if directory is None:
            directory = source.path.parent
        name = UPLOAD_FILENAME_FORMAT.format(
            copy=self.copy_id or "",
            question=self.question_id or "",
            attempt=self.attempt_id or "",
            grade="" if self.grade is None else self.grade,
            page=page,
            extension=extension,
        )
        return Path(directory) / name

    @property
    def first_source(self) -> str:
        """Printable source of the first page, for prompts and logs."""
        return str(self.pages[0].source) if self.pages else "<no pages>"

    def to_dict(self) -> dict:
        return {
            **self.identifiers.to_dict(),
            "grade": self.grade,
            "pages": [p.to_dict() for p in self.pages],
        }

    def __repr__(self) -> str:
        return f"<Attempt({self.identifiers}, grade={self.grade}, pages={len(self.pages)})>"


def build_attempt(
    pages: Sequence[PageRecord],
    identifiers: IdentifierTriple,
    grade: Optional[int],
) -> Attempt:
    """
    Aggregate pages that the caller already knows belong together.

    Cross-page identifier mismatches are not checked here.

    Args:
        pages: Pages of the attempt, in order
        identifiers: Resolved identifier triple
        grade: Resolved grade, or None

    Returns:
        New Attempt owning the pages
    """
    return Attempt(
        pages=list(pages),
        copy_id=identifiers.copy_id,
        question_id=identifiers.question_id,
        attempt_id=identifiers.attempt_id,
        grade=grade,
    )
