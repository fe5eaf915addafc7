"""
Module: scanning.sources

Purpose:
    Page discovery and rasterization. Expands input files into page
    sources (one per image file, one per PDF page), renders them to PIL
    images, and splits multi-page PDFs into single-page files.

Key Functions:
    - expand_sources(): Input files -> PageSource list
    - pdf_page_count(): Number of pages in a PDF
    - load_page_image(): Render a PageSource to an image
    - split_pdf() / split_pdfs(): Single-page PDF files
    - quiet_mupdf(): Context that silences MuPDF's error/warning output

Key Classes:
    - ScanError: An input cannot be opened or rendered

Dependencies:
    - fitz (PyMuPDF): PDF access and rendering
    - PIL.Image: Image files

Used By:
    - scanning.pipeline: Page discovery and loading
    - output.images: Reloads pages when merging attempts
    - output.questions: Pages to split into questions
    - cli: --split
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

import fitz
from PIL import Image

from papercopy_toolkit.core.models.pages import PageSource
from .config import DEFAULT_DPI

logger = logging.getLogger(__name__)

PDF_SUFFIX = ".pdf"


class ScanError(Exception):
    """An input file could not be opened or rendered."""
    pass


@contextmanager
def quiet_mupdf(quiet: bool = True) -> Iterator[None]:
    """
    Silence MuPDF's own error and warning output while the block runs.

    Uses the library switches rather than touching process streams; the
    previous settings are restored on exit.

    Example:
        >>> with quiet_mupdf():
        ...     image = load_page_image(PageSource(Path("scan.pdf"), 0))
    """
    show_errors = fitz.TOOLS.mupdf_display_errors()
    show_warnings = fitz.TOOLS.mupdf_display_warnings()
    if quiet:
        fitz.TOOLS.mupdf_display_errors(False)
        fitz.TOOLS.mupdf_display_warnings(False)
    try:
        yield
    finally:
        fitz.TOOLS.mupdf_display_errors(show_errors)
        fitz.TOOLS.mupdf_display_warnings(show_warnings)


def is_pdf(path: Path) -> bool:
    return path.suffix.lower() == PDF_SUFFIX


def pdf_page_count(path: Path) -> int:
    """
    Count the pages of a PDF.

    Raises:
        ScanError: If the PDF cannot be opened
    """
    try:
        with fitz.open(path) as doc:
            return doc.page_count
    except (RuntimeError, ValueError, OSError) as e:
        raise ScanError(f"Cannot open PDF {path}: {e}") from e


def expand_sources(paths: Iterable[Path]) -> List[PageSource]:
    """
    Expand input files into page sources, preserving input order.

    Each PDF contributes one source per page; any other file is treated
    as a single image.

    Raises:
        ScanError: If a PDF cannot be opened
    """
    sources: List[PageSource] = []
    for path in paths:
        path = Path(path)
        if is_pdf(path):
            count = pdf_page_count(path)
            sources.extend(PageSource(path, index) for index in range(count))
            logger.debug(f"{path.name}: {count} pages")
        else:
            sources.append(PageSource(path))
    return sources


def load_page_image(
    source: PageSource,
    dpi: int = DEFAULT_DPI,
    *,
    grayscale: bool = False,
) -> Image.Image:
    """
    Rasterize a page source.

    Image files are read with Pillow; PDF pages are rendered with PyMuPDF
    at the given DPI.

    Args:
        source: Page to load
        dpi: Resolution for PDF rendering
        grayscale: Render/convert to mode "L" instead of "RGB"

    Returns:
        Fully loaded PIL Image

    Raises:
        ScanError: If the file is missing, unreadable or not an image
    """
    if source.is_pdf_page:
        return _render_pdf_page(source, dpi, grayscale=grayscale)

    try:
        with Image.open(source.path) as image:
            image.load()
            return image.convert("L" if grayscale else "RGB")
    except OSError as e:
        raise ScanError(f"Cannot read image {source}: {e}") from e


def _render_pdf_page(source: PageSource, dpi: int, *, grayscale: bool) -> Image.Image:
    matrix = fitz.Matrix(dpi / 72.0, dpi / 72.0)
    colorspace = fitz.csGRAY if grayscale else fitz.csRGB
    try:
        with fitz.open(source.path) as doc:
            page = doc[source.page_index]
            pix = page.get_pixmap(matrix=matrix, alpha=False, colorspace=colorspace)
    except (RuntimeError, ValueError, IndexError, OSError) as e:
        raise ScanError(f"Cannot render {source}: {e}") from e
    mode = "L" if grayscale else "RGB"
    return Image.frombytes(mode, (pix.width, pix.height), pix.samples)


def split_pdf(path: Path, output_dir: Optional[Path] = None) -> List[Path]:
    """
    Split a multi-page PDF into single-page PDFs.

    Pages are written as "{stem}_{n}.pdf" with n starting at 1. Non-PDF
    files and single-page PDFs are returned unchanged.

    Args:
        path: Input file
        output_dir: Where to write pages (default: the input's directory)

    Returns:
        Paths to use in place of the input

    Raises:
        ScanError: If the PDF cannot be opened or a page cannot be written
    """
    path = Path(path)
    if not is_pdf(path):
        return [path]

    output_dir = Path(output_dir) if output_dir is not None else path.parent
    try:
        with fitz.open(path) as doc:
            if doc.page_count <= 1:
                return [path]
            output_dir.mkdir(parents=True, exist_ok=True)
            pages: List[Path] = []
            for index in range(doc.page_count):
                target = output_dir / f"{path.stem}_{index + 1}{PDF_SUFFIX}"
                with fitz.open() as single:
                    single.insert_pdf(doc, from_page=index, to_page=index)
                    single.save(target)
                pages.append(target)
    except (RuntimeError, ValueError, OSError) as e:
        raise ScanError(f"Cannot split PDF {path}: {e}") from e

    logger.info(f"Split {path.name} into {len(pages)} pages")
    return pages


def split_pdfs(paths: Iterable[Path], output_dir: Optional[Path] = None) -> List[Path]:
    """Split every PDF in a list, flattening the result in input order."""
    result: List[Path] = []
    for path in paths:
        result.extend(split_pdf(path, output_dir))
    return result
