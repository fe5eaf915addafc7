"""
Module: output.duplicates

Purpose:
    Detect the same attempt exported more than once (for example, a page
    scanned twice) by parsing upload filenames. When one copy is graded and
    the other is not, the ungraded one is redundant. Two graded copies of
    the same attempt page are a conflict for a person to settle.

Key Functions:
    - parse_upload_filename(): Filename -> UploadName or None
    - find_duplicates(): Filenames -> DuplicateReport
    - remove_duplicates(): Delete the redundant files of a report

Dependencies:
    - re (std)
    - pathlib (std)

Used By:
    - cli: dedupe command
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

FILENAME_FORMAT = re.compile(
    r"U(?P<copy>[0-9]+)_Q(?P<question>[0-9]+)_A(?P<attempt>[0-9]+)"
    r"_G(?P<grade>[0-9]+)?_P(?P<page>[0-9]+)(?:-[0-9]+)?\.(?:jpe?g|png)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class UploadName:
    """Fields parsed from an upload filename."""
    path: Path
    copy_id: str
    question_id: str
    attempt_id: str
    grade: Optional[int]
    page: int

    @property
    def key(self) -> Tuple[str, str, str, int]:
        """Identity of the attempt page, ignoring the grade."""
        return (self.copy_id, self.question_id, self.attempt_id, self.page)


@dataclass
class DuplicateReport:
    """
    Outcome of a duplicate scan.

    Attributes:
        removable: Redundant ungraded files, safe to delete
        conflicts: (earlier, later) pairs of graded files for the same page
        skipped: Files whose names do not follow the upload convention
    """
    removable: List[Path] = field(default_factory=list)
    conflicts: List[Tuple[Path, Path]] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)


def parse_upload_filename(path: Path) -> Optional[UploadName]:
    """Parse "U12_Q3_A1_G7_P0.jpg"-style names; None when the name does not match."""
    path = Path(path)
    match = FILENAME_FORMAT.search(path.name)
    if not match:
        return None
    grade = match.group("grade")
    return UploadName(
        path=path,
        copy_id=match.group("copy"),
        question_id=match.group("question"),
        attempt_id=match.group("attempt"),
        grade=int(grade) if grade is not None else None,
        page=int(match.group("page")),
    )


def find_duplicates(paths: Iterable[Path]) -> DuplicateReport:
    """
    Find redundant and conflicting upload files, in the order given.

    Rules for a file whose attempt page was already seen:
    - ungraded file: it is removable
    - graded file, earlier one ungraded: the earlier one is removable
    - graded file, earlier one graded: conflict (both kept)

    Args:
        paths: Upload files to compare

    Returns:
        DuplicateReport
    """
    report = DuplicateReport()
    seen: Dict[Tuple[str, str, str, int], UploadName] = {}

    for path in paths:
        name = parse_upload_filename(path)
        if name is None:
            report.skipped.append(Path(path))
            continue

        previous = seen.get(name.key)
        if previous is not None:
            if name.grade is None:
                report.removable.append(name.path)
                continue
            if previous.grade is None:
                report.removable.append(previous.path)
            else:
                logger.warning(f"Apparent conflict between {previous.path} and {name.path}")
                report.conflicts.append((previous.path, name.path))

        seen[name.key] = name

    return report


def remove_duplicates(report: DuplicateReport) -> List[Path]:
    """
    Delete the removable files of a report.

    Files already gone are skipped with a warning.

    Returns:
        Files actually deleted
    """
    removed: List[Path] = []
    for path in report.removable:
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning(f"Already removed: {path}")
            continue
        logger.info(f"Removed duplicate {path}")
        removed.append(path)
    return removed
