"""
Module: output.csv_export

Purpose:
    Grade tables as CSV. One row per group: the grouping key followed by
    one grade per attempt in the group. Ungraded attempts leave an empty
    cell.

Key Functions:
    - grade_rows(): (key, attempts) groups -> CSV rows
    - write_csv_by_copy(): Rows per copy, attempts ordered by question id
    - write_csv_by_question(): Rows per question, attempts in scan order

Dependencies:
    - csv (std)

Used By:
    - cli: --csv
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from papercopy_toolkit.core.models.assessment import Assessment
from papercopy_toolkit.core.models.attempts import Attempt
from .errors import ExportError

logger = logging.getLogger(__name__)

AttemptOrder = Callable[[List[Attempt]], List[Attempt]]


def by_question_id(attempts: List[Attempt]) -> List[Attempt]:
    """Order attempts by question id, compared as strings."""
    return sorted(attempts, key=lambda a: a.question_id or "")


def grade_rows(
    groups: Iterable[Tuple[str, List[Attempt]]],
    order: Optional[AttemptOrder] = None,
) -> List[List[str]]:
    """
    Build CSV rows from grouped attempts.

    Args:
        groups: (key, attempts) pairs, e.g. Assessment.each_copy()
        order: Optional reordering applied to each group's attempts

    Returns:
        Rows of [key, grade, grade, ...]
    """
    rows = []
    for key, attempts in groups:
        if order is not None:
            attempts = order(attempts)
        rows.append([key] + ["" if a.grade is None else str(a.grade) for a in attempts])
    return rows


def _write_rows(path: Path, rows: List[List[str]]) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", newline="") as handle:
            csv.writer(handle).writerows(rows)
    except OSError as e:
        raise ExportError(f"Failed to write {path}: {e}") from e
    logger.info(f"Wrote {len(rows)} rows to {path}")
    return path


def write_csv_by_copy(assessment: Assessment, path: Path) -> Path:
    """One row per copy: copy_id, then grades ordered by question id."""
    return _write_rows(Path(path), grade_rows(assessment.each_copy(), by_question_id))


def write_csv_by_question(assessment: Assessment, path: Path) -> Path:
    """One row per question: question_id, then grades in scan order."""
    return _write_rows(Path(path), grade_rows(assessment.each_question()))
