"""
Module: scanning.config

Purpose:
    Configuration dataclass for the scanning pipeline. Immutable settings
    for grade range, rotation, thresholding, PDF rendering and workers.

Key Classes:
    - ScanConfig: Main configuration for scanning

Dependencies:
    - dataclasses: For frozen dataclass support

Used By:
    - scanning.pipeline: Uses ScanConfig for pipeline settings
    - scanning.barcodes: Uses threshold
    - scanning.sources: Uses dpi and quiet_pdf
    - cli: Builds ScanConfig from options
"""

from dataclasses import dataclass

DEFAULT_MAX_GRADE = 10
DEFAULT_THRESHOLD = 0.65  # Darkness a pixel must reach to count as black
DEFAULT_DPI = 300


@dataclass(frozen=True)
class ScanConfig:
    """
    Configuration for scanning pages.

    Attributes:
        max_grade: Highest grade bubble on the page; grades run 0..max_grade
        autorotate: Apply detected rotations (False forces rotation 0)
        threshold: Fraction of full intensity below which a pixel is black
        dpi: Resolution for rendering PDF pages (default 300)
        workers: Pages resolved concurrently (1 = sequential)
        quiet_pdf: Silence MuPDF error/warning output while rendering
    """
    max_grade: int = DEFAULT_MAX_GRADE
    autorotate: bool = True
    threshold: float = DEFAULT_THRESHOLD
    dpi: int = DEFAULT_DPI
    workers: int = 1
    quiet_pdf: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_grade < 0:
            raise ValueError(f"max_grade must be non-negative: {self.max_grade}")
        if not 0.0 < self.threshold < 1.0:
            raise ValueError(f"threshold must be between 0 and 1: {self.threshold}")
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive: {self.dpi}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1: {self.workers}")
