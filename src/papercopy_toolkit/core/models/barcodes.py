"""
Module: barcodes

Purpose:
    Provides the DecodedBarcode dataclass and the closed Symbology enum.
    A DecodedBarcode is what the barcode engine reports for one code on one
    page: its encoding family, raw text and bounding polygon.

Key Functions:
    - centroid(): Mean point of a barcode polygon

Key Classes:
    - Symbology: QR, LINEAR_ID or OTHER
    - DecodedBarcode: (symbology, payload, location)

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - scanning.barcodes: Produces DecodedBarcode from OpenCV detections
    - scanning.payload: Dispatches on Symbology
    - scanning.resolver: Consumes DecodedBarcode per page
    - scanning.rotation: centroid()
    - output.questions: Cuts pages at code positions
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence, Tuple

Point = Tuple[int, int]


def centroid(location: Sequence[Sequence[float]]) -> Tuple[float, float]:
    """Arithmetic mean of polygon points as (left, top)."""
    count = len(location)
    left = sum(float(p[0]) for p in location) / count
    top = sum(float(p[1]) for p in location) / count
    return left, top


class Symbology(str, Enum):
    """Barcode encoding family as reported by the barcode engine."""
    QR = "qr"                # Corner identifier codes
    LINEAR_ID = "linear_id"  # Top-of-page Code-128 copy tags
    OTHER = "other"          # Decoded, but carries no meaning here

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_engine_name(cls, name: str) -> Symbology:
        """
        Map an engine type name ("QRCODE", "CODE_128", "CODE-128", ...) to a
        Symbology. Unknown names map to OTHER.
        """
        normalized = name.strip().upper().replace("-", "_")
        if normalized in ("QR", "QRCODE", "QR_CODE"):
            return cls.QR
        if normalized in ("CODE_128", "CODE128"):
            return cls.LINEAR_ID
        return cls.OTHER


@dataclass(frozen=True, slots=True)
class DecodedBarcode:
    """
    One barcode decoded from a page image.

    Attributes:
        symbology: Encoding family of the code
        payload: Raw decoded text
        location: Bounding polygon points (x, y) in page pixel coordinates

    Invariants:
        - location has at least one point

    Example:
        >>> code = DecodedBarcode.create(Symbology.QR, "12|3|1", [(690, 40), (710, 60)])
        >>> centroid(code.location)
        (700.0, 50.0)
    """

    symbology: Symbology
    payload: str
    location: Tuple[Point, ...]

    def __post_init__(self) -> None:
        """Validate location on construction."""
        if not self.location:
            raise ValueError("location must contain at least one point")

    @classmethod
    def create(
        cls,
        symbology: Symbology,
        payload: str,
        location: Iterable[Iterable[float]],
    ) -> DecodedBarcode:
        """Build a DecodedBarcode, rounding engine float points to integers."""
        points = tuple((int(round(x)), int(round(y))) for x, y in location)
        return cls(symbology=symbology, payload=payload, location=points)

    @property
    def top(self) -> int:
        """Smallest y of the location points (upper edge of the code)."""
        return min(point[1] for point in self.location)

    def __repr__(self) -> str:
        return f"DecodedBarcode({self.symbology.value}, {self.payload!r})"
