"""
Tests for page discovery, rendering and PDF splitting.

Uses small PDFs generated with PyMuPDF in tmp_path.
"""

import fitz
import pytest
from pathlib import Path

from papercopy_toolkit.core.models import PageSource
from papercopy_toolkit.scanning.sources import (
    ScanError,
    expand_sources,
    is_pdf,
    load_page_image,
    pdf_page_count,
    quiet_mupdf,
    split_pdf,
    split_pdfs,
)


class TestExpandSources:

    def test_expand_sources_when_pdf_then_one_source_per_page(self, sample_pdf, sample_image):
        sources = expand_sources([sample_image, sample_pdf])

        assert sources == [
            PageSource(sample_image),
            PageSource(sample_pdf, 0),
            PageSource(sample_pdf, 1),
            PageSource(sample_pdf, 2),
        ]

    def test_expand_sources_when_pdf_unreadable_then_scan_error(self, tmp_path):
        broken = tmp_path / "broken.pdf"
        broken.write_bytes(b"not a pdf")

        with pytest.raises(ScanError):
            expand_sources([broken])

    def test_pdf_page_count(self, sample_pdf):
        assert pdf_page_count(sample_pdf) == 3

    def test_is_pdf_ignores_case(self):
        assert is_pdf(Path("SCAN.PDF"))
        assert not is_pdf(Path("scan.png"))


class TestLoadPageImage:

    def test_load_page_image_when_image_file_then_rgb(self, sample_image):
        image = load_page_image(PageSource(sample_image))

        assert image.mode == "RGB"
        assert image.size == (80, 100)

    def test_load_page_image_when_grayscale(self, sample_image):
        assert load_page_image(PageSource(sample_image), grayscale=True).mode == "L"

    def test_load_page_image_when_pdf_page_then_rendered_at_dpi(self, sample_pdf):
        # 200x300 pt page at 144 dpi is 400x600 px
        image = load_page_image(PageSource(sample_pdf, 1), dpi=144)

        assert image.size == (400, 600)
        assert image.mode == "RGB"

    def test_load_page_image_when_missing_then_scan_error(self, tmp_path):
        with pytest.raises(ScanError):
            load_page_image(PageSource(tmp_path / "missing.png"))

    def test_load_page_image_when_not_an_image_then_scan_error(self, tmp_path):
        junk = tmp_path / "junk.png"
        junk.write_text("hello")

        with pytest.raises(ScanError):
            load_page_image(PageSource(junk))

    def test_load_page_image_when_pdf_page_out_of_range_then_scan_error(self, sample_pdf):
        with pytest.raises(ScanError):
            load_page_image(PageSource(sample_pdf, 10))


class TestSplitPdf:

    def test_split_pdf_writes_numbered_single_pages(self, sample_pdf, tmp_path):
        out_dir = tmp_path / "pages"

        pages = split_pdf(sample_pdf, out_dir)

        assert pages == [out_dir / "batch_1.pdf", out_dir / "batch_2.pdf", out_dir / "batch_3.pdf"]
        for page in pages:
            with fitz.open(page) as doc:
                assert doc.page_count == 1

    def test_split_pdf_when_single_page_then_unchanged(self, tmp_path):
        path = tmp_path / "one.pdf"
        with fitz.open() as doc:
            doc.new_page()
            doc.save(path)

        assert split_pdf(path, tmp_path / "out") == [path]

    def test_split_pdf_when_image_then_unchanged(self, sample_image):
        assert split_pdf(sample_image) == [sample_image]

    def test_split_pdfs_flattens_in_order(self, sample_pdf, sample_image):
        result = split_pdfs([sample_image, sample_pdf])

        assert result[0] == sample_image
        assert [p.name for p in result[1:]] == ["batch_1.pdf", "batch_2.pdf", "batch_3.pdf"]


@pytest.fixture
def mupdf_messages():
    """Current MuPDF message settings, put back after the test."""
    before = (fitz.TOOLS.mupdf_display_errors(), fitz.TOOLS.mupdf_display_warnings())
    yield before
    fitz.TOOLS.mupdf_display_errors(before[0])
    fitz.TOOLS.mupdf_display_warnings(before[1])


class TestQuietMupdf:

    def test_quiet_mupdf_silences_inside_block(self, mupdf_messages):
        with quiet_mupdf():
            assert not fitz.TOOLS.mupdf_display_errors()
            assert not fitz.TOOLS.mupdf_display_warnings()

    def test_quiet_mupdf_when_block_exits_then_settings_restored(self, mupdf_messages):
        # Arrange
        fitz.TOOLS.mupdf_display_errors(True)
        fitz.TOOLS.mupdf_display_warnings(True)

        # Act
        with quiet_mupdf():
            pass

        # Assert
        assert fitz.TOOLS.mupdf_display_errors()
        assert fitz.TOOLS.mupdf_display_warnings()

    def test_quiet_mupdf_when_block_raises_then_settings_restored(self, mupdf_messages):
        fitz.TOOLS.mupdf_display_errors(True)

        with pytest.raises(ScanError):
            with quiet_mupdf():
                raise ScanError("boom")

        assert fitz.TOOLS.mupdf_display_errors()

    def test_quiet_mupdf_when_disabled_then_unchanged(self, mupdf_messages):
        fitz.TOOLS.mupdf_display_errors(True)

        with quiet_mupdf(False):
            assert fitz.TOOLS.mupdf_display_errors()
