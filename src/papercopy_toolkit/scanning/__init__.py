"""
Module: scanning

Purpose:
    Turns scanned page images into resolved page records and an
    Assessment. Decodes barcodes with OpenCV, classifies their payloads,
    estimates page rotation and resolves grades by elimination.

Key Functions:
    - parse_payload(): Classify a barcode payload
    - rotation_from_corner_quadrant() / rotation_from_edge_proximity()
    - resolve_page(): One page's barcodes -> PageResolution
    - scan_files(): Files -> ScanResult (main entry point)
    - split_pdf(): Multi-page PDF -> single-page PDFs

Key Classes:
    - ScanConfig: Configuration for scanning
    - BarcodeEngine: OpenCV barcode decoding
    - ScanError: Unreadable input

Dependencies:
    - cv2, numpy, PIL, fitz
    - papercopy_toolkit.core.models
"""

from .config import ScanConfig
from .payload import BareCopyTag, DisqualifierMatch, IdentifierMatch, parse_payload
from .rotation import rotation_from_corner_quadrant, rotation_from_edge_proximity
from .resolver import PageResolution, resolve_page
from .barcodes import BarcodeEngine
from .sources import ScanError, split_pdf, split_pdfs
from .pipeline import ScanResult, scan_files, scan_page

__all__ = [
    # Config
    "ScanConfig",
    # Payloads
    "parse_payload",
    "IdentifierMatch",
    "DisqualifierMatch",
    "BareCopyTag",
    # Rotation
    "rotation_from_corner_quadrant",
    "rotation_from_edge_proximity",
    # Resolution
    "resolve_page",
    "PageResolution",
    # Engine and sources
    "BarcodeEngine",
    "ScanError",
    "split_pdf",
    "split_pdfs",
    # Pipeline
    "scan_page",
    "scan_files",
    "ScanResult",
]
