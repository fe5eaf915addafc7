"""
Module: identifiers

Purpose:
    Provides the IdentifierTriple dataclass - the (copy, question, attempt)
    identity of a scanned page or attempt. Each component is an opaque digit
    string or None when no barcode supplied it.

Key Functions:
    - IdentifierTriple.with_missing_from(other): Once-only merge, first value wins
    - IdentifierTriple.is_complete / missing_fields
    - IdentifierTriple.parse(text): Parse a typed "copy-question-attempt" entry

Dependencies:
    - dataclasses (std)
    - re (std)

Used By:
    - scanning.resolver.resolve_page
    - core.models.pages.PageRecord
    - core.models.attempts.Attempt
    - cli (interactive repair)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional, Tuple

# Format used when an operator types an identifier by hand
TYPED_IDENTIFIER = re.compile(r"^([0-9]+)-([0-9]+)-([0-9]+)$")

_FIELDS = ("copy_id", "question_id", "attempt_id")


@dataclass(frozen=True, slots=True)
class IdentifierTriple:
    """
    Identity of a page: copy N of question Q, attempt A.

    Components are never guessed. Once set from a barcode, a component is
    only ever replaced by building a new triple explicitly.

    Attributes:
        copy_id: Student copy identifier, or None
        question_id: Question variant identifier, or None
        attempt_id: Attempt identifier, or None

    Example:
        >>> ids = IdentifierTriple(copy_id="12")
        >>> ids.with_missing_from(IdentifierTriple("99", "3", "1"))
        IdentifierTriple('12', '3', '1')
    """

    copy_id: Optional[str] = None
    question_id: Optional[str] = None
    attempt_id: Optional[str] = None

    @classmethod
    def empty(cls) -> IdentifierTriple:
        """Triple with every component unset."""
        return cls()

    @classmethod
    def parse(cls, text: str) -> Optional[IdentifierTriple]:
        """
        Parse a typed identifier such as "12-3-1".

        Returns:
            The triple, or None if the text is not in copy-question-attempt form
        """
        match = TYPED_IDENTIFIER.match(text.strip())
        if not match:
            return None
        return cls(*match.groups())

    @property
    def is_complete(self) -> bool:
        """True when all three components are set."""
        return None not in self.as_tuple()

    @property
    def missing_fields(self) -> Tuple[str, ...]:
        """Names of the unset components, in field order."""
        return tuple(name for name in _FIELDS if getattr(self, name) is None)

    def as_tuple(self) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        return (self.copy_id, self.question_id, self.attempt_id)

    def with_missing_from(self, other: IdentifierTriple) -> IdentifierTriple:
        """
        Fill unset components from another triple.

        Components already set on self are kept even when other disagrees.

        Args:
            other: Source of values for the unset components

        Returns:
            New triple (self if nothing changed)
        """
        updates = {
            name: getattr(other, name)
            for name in _FIELDS
            if getattr(self, name) is None and getattr(other, name) is not None
        }
        if not updates:
            return self
        return replace(self, **updates)

    def conflicts_with(self, other: IdentifierTriple) -> Tuple[str, ...]:
        """Names of components set on both triples with different values."""
        return tuple(
            name for name in _FIELDS
            if getattr(self, name) is not None
            and getattr(other, name) is not None
            and getattr(self, name) != getattr(other, name)
        )

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in _FIELDS}

    def __str__(self) -> str:
        return "|".join(value or "?" for value in self.as_tuple())

    def __repr__(self) -> str:
        return f"IdentifierTriple({self.copy_id!r}, {self.question_id!r}, {self.attempt_id!r})"
