"""
Module: assessment

Purpose:
    Provides the Assessment class - a full scanning run. Holds every Attempt
    in discovery order plus two indices, by copy and by question, which are
    only ever appended to.

Key Functions:
    - Assessment.add(attempt): Append and index
    - Assessment.valid_attempts() / invalid_attempts()
    - Assessment.graded_attempts() / ungraded_attempts()
    - Assessment.each_copy() / each_question(): (key, attempts) in first-seen order
    - Assessment.copy_count() / question_count()

Dependencies:
    - typing (std)
    - .attempts.Attempt

Used By:
    - scanning.pipeline.scan_files: Builds the assessment
    - output.pdf / output.csv_export / output.upload: Consume the indices
    - cli
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .attempts import Attempt


class Assessment:
    """
    Paper-copy assessment assembled from scanned attempts.

    Index keys iterate in first-insertion order and each key's attempts in
    append order, so grouped exports are deterministic for a given input
    ordering. Attempts with an unset copy_id (question_id) are never indexed
    under a None key.

    Example:
        >>> assessment = Assessment()
        >>> assessment.add(attempt)
        >>> assessment.copy_count()
        1
    """

    def __init__(self, attempts: Optional[Iterable[Attempt]] = None):
        self._attempts: List[Attempt] = []
        self._by_copy: Dict[str, List[Attempt]] = {}
        self._by_question: Dict[str, List[Attempt]] = {}
        for attempt in attempts or ():
            self.add(attempt)

    # ─────────────────────────────────────────────────────────────────────────
    # Building
    # ─────────────────────────────────────────────────────────────────────────

    def add(self, attempt: Attempt) -> None:
        """Append an attempt and index it under each of its set keys."""
        self._attempts.append(attempt)
        if attempt.copy_id is not None:
            self._by_copy.setdefault(attempt.copy_id, []).append(attempt)
        if attempt.question_id is not None:
            self._by_question.setdefault(attempt.question_id, []).append(attempt)

    def reindex(self) -> None:
        """
        Rebuild both indices from the attempt list.

        Needed after identifiers were corrected in place; the attempt order
        is unchanged.
        """
        attempts = self._attempts
        self._attempts = []
        self._by_copy = {}
        self._by_question = {}
        for attempt in attempts:
            self.add(attempt)

    # ─────────────────────────────────────────────────────────────────────────
    # Views
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def attempts(self) -> List[Attempt]:
        return list(self._attempts)

    @property
    def by_copy(self) -> Dict[str, List[Attempt]]:
        return {key: list(value) for key, value in self._by_copy.items()}

    @property
    def by_question(self) -> Dict[str, List[Attempt]]:
        return {key: list(value) for key, value in self._by_question.items()}

    def __len__(self) -> int:
        return len(self._attempts)

    def each_attempt(self) -> Iterator[Attempt]:
        return iter(list(self._attempts))

    def each_copy(self) -> Iterator[Tuple[str, List[Attempt]]]:
        """Yield (copy_id, attempts) in first-seen order."""
        for key, attempts in list(self._by_copy.items()):
            yield key, list(attempts)

    def each_question(self) -> Iterator[Tuple[str, List[Attempt]]]:
        """Yield (question_id, attempts) in first-seen order."""
        for key, attempts in list(self._by_question.items()):
            yield key, list(attempts)

    def valid_attempts(self) -> List[Attempt]:
        """Attempts with all three identifier components set."""
        return [a for a in self._attempts if not a.missing_identifiers()]

    def invalid_attempts(self) -> List[Attempt]:
        """Attempts missing at least one identifier component."""
        return [a for a in self._attempts if a.missing_identifiers()]

    def graded_attempts(self) -> List[Attempt]:
        return [a for a in self._attempts if not a.ungraded()]

    def ungraded_attempts(self) -> List[Attempt]:
        return [a for a in self._attempts if a.ungraded()]

    def copy_count(self) -> int:
        """Number of distinct copy ids (not attempts)."""
        return len(self._by_copy)

    def question_count(self) -> int:
        """Number of distinct question ids (not attempts)."""
        return len(self._by_question)

    def maximum_dimensions(self) -> Tuple[int, int]:
        """Largest page width and height across every attempt."""
        if not self._attempts:
            return 0, 0
        dims = [a.maximum_dimensions() for a in self._attempts]
        return max(d[0] for d in dims), max(d[1] for d in dims)

    def to_dict(self) -> dict:
        return {
            "attempt_count": len(self._attempts),
            "copy_count": self.copy_count(),
            "question_count": self.question_count(),
            "invalid_count": len(self.invalid_attempts()),
            "ungraded_count": len(self.ungraded_attempts()),
            "attempts": [a.to_dict() for a in self._attempts],
        }

    def __repr__(self) -> str:
        return (
            f"<Assessment(attempts={len(self._attempts)}, "
            f"copies={self.copy_count()}, questions={self.question_count()})>"
        )
