"""
Core Models Package

Data models shared by scanning and output.

Pages, identifier triples and decoded barcodes are frozen dataclasses:
they are produced once by the scanner and never change. Attempts are
mutable so an operator can correct identifiers or enter a grade, and the
Assessment only ever appends to its indices.

| Model | Mutable | Owned By |
|-------|---------|----------|
| `DecodedBarcode` | no | consumed once per page |
| `IdentifierTriple` | no | `PageRecord` / `Attempt` |
| `PageRecord` | no | `Attempt` |
| `Attempt` | yes (correction only) | `Assessment` |
| `Assessment` | append-only | caller |
"""

from .barcodes import DecodedBarcode, Symbology
from .identifiers import IdentifierTriple
from .pages import PageRecord, PageSource
from .attempts import Attempt, build_attempt
from .assessment import Assessment

__all__ = [
    "DecodedBarcode",
    "Symbology",
    "IdentifierTriple",
    "PageRecord",
    "PageSource",
    "Attempt",
    "build_attempt",
    "Assessment",
]
