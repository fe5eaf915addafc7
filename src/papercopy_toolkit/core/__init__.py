"""
PaperCopy Toolkit Core Package

Shared data models for scanning and export. These models are the single
source of truth for page identity, rotation and grades.

**DESIGN NOTES:**

1. **Unset, Never Guessed**
   - Identifier components and grades are None until a barcode supplies them
   - Ambiguity is a queryable state, never an exception

2. **First Value Wins**
   - Identifier components use explicit once-only merges
   - Later disagreeing barcodes are logged and ignored

3. **Append-Only Aggregation**
   - The Assessment indices are only appended to, in discovery order
"""

from .models import (
    Assessment,
    Attempt,
    DecodedBarcode,
    IdentifierTriple,
    PageRecord,
    PageSource,
    Symbology,
    build_attempt,
)

__all__ = [
    "Assessment",
    "Attempt",
    "DecodedBarcode",
    "IdentifierTriple",
    "PageRecord",
    "PageSource",
    "Symbology",
    "build_attempt",
]
