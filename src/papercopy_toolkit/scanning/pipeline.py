"""
Module: scanning.pipeline

Purpose:
    Main pipeline orchestrator for scanning. Expands inputs into pages,
    decodes and resolves each page, and folds the results into an
    Assessment in input order.

Key Functions:
    - scan_page(): One page source -> PageRecord
    - scan_files(): Input files -> ScanResult (main entry point)

Key Classes:
    - ScanResult: Assessment plus warnings for pages that could not be read

Dependencies:
    - concurrent.futures: Optional per-page worker threads
    - scanning.barcodes: Barcode engine
    - scanning.resolver: Page resolution
    - scanning.sources: Page discovery and rendering

Used By:
    - cli: scan command

Ordering:
    Pages may be resolved on worker threads, but results are always added
    to the Assessment from the calling thread in input order. A run that
    stops early leaves an Assessment that is a prefix of the full run.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from papercopy_toolkit.core.models.assessment import Assessment
from papercopy_toolkit.core.models.attempts import Attempt
from papercopy_toolkit.core.models.pages import PageRecord, PageSource
from .barcodes import BarcodeEngine
from .config import ScanConfig
from .resolver import resolve_page
from .sources import ScanError, expand_sources, load_page_image, quiet_mupdf

logger = logging.getLogger(__name__)

# progress(done, total)
ProgressCallback = Callable[[int, int], None]
EngineFactory = Callable[[ScanConfig], BarcodeEngine]


def _default_engine(config: ScanConfig) -> BarcodeEngine:
    return BarcodeEngine(threshold=config.threshold)


@dataclass
class ScanResult:
    """
    Result of scanning a batch of files.

    Attributes:
        assessment: Attempts in input order, indexed by copy and question
        warnings: One message per page or file that could not be read
        page_count: Number of pages successfully scanned
    """
    assessment: Assessment
    warnings: List[str] = field(default_factory=list)
    page_count: int = 0


def scan_page(
    source: PageSource,
    config: Optional[ScanConfig] = None,
    engine: Optional[BarcodeEngine] = None,
) -> PageRecord:
    """
    Decode and resolve a single page.

    Args:
        source: Page to scan
        config: Scan configuration (default ScanConfig())
        engine: Barcode engine to use (default: new engine for config)

    Returns:
        Immutable PageRecord

    Raises:
        ScanError: If the page cannot be loaded
    """
    config = config or ScanConfig()
    engine = engine or _default_engine(config)

    image = load_page_image(source, config.dpi)
    try:
        width, height = image.size
        barcodes = engine.decode(image)
    finally:
        image.close()

    resolution = resolve_page(
        width,
        height,
        barcodes,
        max_grade=config.max_grade,
        autorotate=config.autorotate,
        page_label=str(source),
    )

    logger.debug(
        f"{source}: ids={resolution.identifiers} rotation={resolution.rotation} "
        f"grade={resolution.grade}",
        extra={"page": str(source), "barcode_count": len(barcodes)},
    )

    return PageRecord(
        source=source,
        width=width,
        height=height,
        rotation=resolution.rotation,
        identifiers=resolution.identifiers,
        possible_grades=resolution.possible_grades,
    )


def scan_files(
    paths: Iterable[Path],
    config: Optional[ScanConfig] = None,
    *,
    progress: Optional[ProgressCallback] = None,
    engine_factory: EngineFactory = _default_engine,
) -> ScanResult:
    """
    Scan image and PDF files into an Assessment.

    Pipeline:
    1. Expand inputs into page sources (PDFs page by page)
    2. Decode and resolve each page (optionally on worker threads)
    3. Add one Attempt per page to the Assessment, in input order

    Unreadable files and pages are skipped with a warning; nothing here
    aborts the batch.

    Args:
        paths: Image and PDF files, in discovery order
        config: Scan configuration (default ScanConfig())
        progress: Called as progress(done, total) after each page
        engine_factory: Builds a barcode engine (one per worker thread)

    Returns:
        ScanResult with the assessment and any warnings

    Example:
        >>> result = scan_files([Path("scans/batch1.pdf")], ScanConfig(max_grade=5))
        >>> print(f"{len(result.assessment)} attempts, {result.assessment.copy_count()} copies")
    """
    config = config or ScanConfig()
    warnings: List[str] = []
    assessment = Assessment()

    with quiet_mupdf(config.quiet_pdf):
        sources: List[PageSource] = []
        for path in paths:
            try:
                sources.extend(expand_sources([path]))
            except ScanError as e:
                logger.warning(str(e), extra={"path": str(path)})
                warnings.append(str(e))

        total = len(sources)
        logger.info(f"Scanning {total} pages with {config.workers} worker(s)")

        page_count = 0
        for done, (source, outcome) in enumerate(_resolve_all(sources, config, engine_factory), 1):
            if isinstance(outcome, PageRecord):
                assessment.add(Attempt.from_pages([outcome]))
                page_count += 1
            else:
                msg = f"Skipped {source}: {outcome}"
                logger.warning(msg, extra={"page": str(source), "error": str(outcome)})
                warnings.append(msg)
            if progress is not None:
                progress(done, total)

    logger.info(
        f"Scanned {page_count} pages: {len(assessment.invalid_attempts())} unidentified, "
        f"{len(assessment.ungraded_attempts())} ungraded",
        extra={
            "page_count": page_count,
            "copy_count": assessment.copy_count(),
            "question_count": assessment.question_count(),
        },
    )

    return ScanResult(assessment=assessment, warnings=warnings, page_count=page_count)


def _resolve_all(
    sources: List[PageSource],
    config: ScanConfig,
    engine_factory: EngineFactory,
) -> Iterator[Tuple[PageSource, object]]:
    """Yield (source, PageRecord or ScanError) in input order."""
    local = threading.local()

    def work(source: PageSource):
        engine = getattr(local, "engine", None)
        if engine is None:
            engine = local.engine = engine_factory(config)
        try:
            return scan_page(source, config, engine)
        except ScanError as e:
            return e

    if config.workers == 1:
        for source in sources:
            yield source, work(source)
        return

    with ThreadPoolExecutor(max_workers=config.workers) as executor:
        # map() yields in submission order regardless of completion order
        yield from zip(sources, executor.map(work, sources))
