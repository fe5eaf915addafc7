"""
Module: scanning.payload

Purpose:
    Classify a decoded barcode payload. Three printed code kinds carry
    meaning: the question identifier ("12|3|1"), the grade disqualifier
    ("GRADE4", printed beside every unfilled grade bubble) and the linear
    copy tag at the top of a page (any Code-128 text).

Key Functions:
    - parse_payload(): Return the structured match, or None

Key Classes:
    - IdentifierMatch, DisqualifierMatch, BareCopyTag

Dependencies:
    - re (std)
    - core.models.barcodes.Symbology

Used By:
    - scanning.resolver.resolve_page
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from papercopy_toolkit.core.models.barcodes import Symbology
from papercopy_toolkit.core.models.identifiers import IdentifierTriple

# copy|question|attempt
QUESTION_ID = re.compile(r"([0-9]+)\|([0-9]+)\|([0-9]+)")

# Grade bubble left unfilled
GRADE_DISQUALIFIER = re.compile(r"GRADE([0-9]+)")


@dataclass(frozen=True, slots=True)
class IdentifierMatch:
    """Full identifier triple from a question identifier code."""
    identifiers: IdentifierTriple


@dataclass(frozen=True, slots=True)
class DisqualifierMatch:
    """A grade that the page rules out."""
    grade: int


@dataclass(frozen=True, slots=True)
class BareCopyTag:
    """Copy id from a linear top-of-page code."""
    copy_id: str


PayloadMatch = Union[IdentifierMatch, DisqualifierMatch, BareCopyTag]


def parse_payload(payload: str, symbology: Symbology = Symbology.QR) -> Optional[PayloadMatch]:
    """
    Classify one barcode payload.

    Patterns are tried in order and must match the whole payload:
    identifier, then disqualifier, then (linear codes only) bare copy tag.

    Args:
        payload: Raw decoded text
        symbology: Encoding family of the code that carried it

    Returns:
        The match, or None for unrecognized payloads

    Example:
        >>> parse_payload("12|3|1")
        IdentifierMatch(identifiers=IdentifierTriple('12', '3', '1'))
        >>> parse_payload("GRADE7")
        DisqualifierMatch(grade=7)
        >>> parse_payload("1045", Symbology.LINEAR_ID)
        BareCopyTag(copy_id='1045')
    """
    identifier = QUESTION_ID.fullmatch(payload)
    if identifier:
        return IdentifierMatch(IdentifierTriple(*identifier.groups()))

    disqualifier = GRADE_DISQUALIFIER.fullmatch(payload)
    if disqualifier:
        return DisqualifierMatch(int(disqualifier.group(1)))

    if symbology is Symbology.LINEAR_ID and payload:
        return BareCopyTag(payload)

    return None
