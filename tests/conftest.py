import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import papercopy_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from papercopy_toolkit.core.models import (  # noqa: E402
    DecodedBarcode,
    IdentifierTriple,
    PageRecord,
    PageSource,
    Symbology,
    build_attempt,
)


# Common test fixtures
@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple portrait test image."""
    img = Image.new("RGB", (80, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def make_image(tmp_path: Path):
    """Factory writing a solid image file and returning its path."""
    def _make(name: str, size=(80, 100), color="white") -> Path:
        path = tmp_path / name
        Image.new("RGB", size, color=color).save(path)
        return path
    return _make


@pytest.fixture
def sample_pdf(tmp_path: Path):
    """Create a three-page PDF with PyMuPDF."""
    import fitz

    path = tmp_path / "batch.pdf"
    with fitz.open() as doc:
        for index in range(3):
            page = doc.new_page(width=200, height=300)
            page.insert_text((20, 40), f"page {index + 1}")
        doc.save(path)
    return path


@pytest.fixture
def make_page():
    """Factory for PageRecord with sensible defaults."""
    def _make(
        copy_id=None,
        question_id=None,
        attempt_id=None,
        grades=frozenset(),
        path="scan.png",
        page_index=None,
        width=80,
        height=100,
        rotation=0,
    ) -> PageRecord:
        return PageRecord(
            source=PageSource(Path(path), page_index),
            width=width,
            height=height,
            rotation=rotation,
            identifiers=IdentifierTriple(copy_id, question_id, attempt_id),
            possible_grades=frozenset(grades),
        )
    return _make


@pytest.fixture
def make_attempt(make_page):
    """Factory for a single-page Attempt."""
    def _make(copy_id="1", question_id="1", attempt_id="1", grade=None, **page_kwargs):
        page = make_page(copy_id, question_id, attempt_id, **page_kwargs)
        return build_attempt([page], IdentifierTriple(copy_id, question_id, attempt_id), grade)
    return _make


@pytest.fixture
def qr():
    """Factory for QR codes at the given points (default near the page origin)."""
    def _make(payload: str, *points) -> DecodedBarcode:
        return DecodedBarcode.create(Symbology.QR, payload, points or [(10, 10)])
    return _make


@pytest.fixture
def linear():
    """Factory for linear copy-tag codes at the given points."""
    def _make(payload: str, *points) -> DecodedBarcode:
        return DecodedBarcode.create(Symbology.LINEAR_ID, payload, points or [(10, 10)])
    return _make
