"""
Module: output.config

Purpose:
    Configuration dataclass for exports. Immutable settings for output
    location, image scaling, footer and file prefixes.

Key Classes:
    - ExportConfig: Main configuration for exports

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - output.pdf, output.upload: Writers
    - cli: Builds ExportConfig from options
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from papercopy_toolkit.scanning.config import DEFAULT_DPI


@dataclass(frozen=True)
class ExportConfig:
    """
    Configuration for writing documents (immutable).

    Attributes:
        output_dir: Directory for multi-file exports
        scale: Size multiplier for page images (1 = same size, 0.25 = quarter)
        footer: Optional image appended below every attempt
        dpi: Resolution used to re-render PDF pages
        jpeg_quality: JPEG quality for embedded and uploaded images
        question_prefix: Filename prefix for per-question PDFs
        copy_prefix: Filename prefix for per-copy PDFs

    Example:
        >>> config = ExportConfig(output_dir=Path("out"), scale=0.5)
    """
    output_dir: Path = field(default_factory=Path.cwd)
    scale: float = 1.0
    footer: Optional[Path] = None
    dpi: int = DEFAULT_DPI
    jpeg_quality: int = 85
    question_prefix: str = "question"
    copy_prefix: str = "attempt"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.scale < 0:
            raise ValueError(f"scale must be non-negative: {self.scale}")
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive: {self.dpi}")
        if not 1 <= self.jpeg_quality <= 95:
            raise ValueError(f"jpeg_quality must be 1-95: {self.jpeg_quality}")
