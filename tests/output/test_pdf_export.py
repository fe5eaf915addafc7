"""
Tests for PDF exports.

Attempts point at real image files; the written PDFs are read back with
PyMuPDF to check page counts and sizes.
"""

import fitz
import pytest
from pathlib import Path

from papercopy_toolkit.core.models import (
    Assessment,
    IdentifierTriple,
    PageRecord,
    PageSource,
    build_attempt,
)
from papercopy_toolkit.output import (
    ExportConfig,
    ExportError,
    pdf_from_attempts,
    write_invalid_attempts_pdf,
    write_pdf_by_question,
    write_pdfs_by_copy,
    write_pdfs_by_question,
)


@pytest.fixture
def attempt_on_disk(make_image):
    """Factory for attempts whose single page is a real PNG."""
    counter = iter(range(1000))

    def _make(copy_id, question_id, attempt_id="1", grade=None, size=(80, 100)):
        path = make_image(f"page{next(counter)}.png", size=size)
        page = PageRecord(PageSource(path), size[0], size[1])
        return build_attempt([page], IdentifierTriple(copy_id, question_id, attempt_id), grade)

    return _make


def _page_sizes(path: Path):
    with fitz.open(path) as doc:
        return [(round(p.rect.width), round(p.rect.height)) for p in doc]


class TestPdfFromAttempts:

    def test_pdf_from_attempts_one_page_per_attempt_sized_to_image(self, attempt_on_disk, tmp_path):
        attempts = [attempt_on_disk("1", "1", size=(80, 100)), attempt_on_disk("1", "2", size=(120, 60))]

        path = pdf_from_attempts(tmp_path / "out" / "doc.pdf", attempts, ExportConfig(output_dir=tmp_path))

        assert path.exists()
        assert _page_sizes(path) == [(80, 100), (120, 60)]

    def test_pdf_from_attempts_applies_scale(self, attempt_on_disk, tmp_path):
        config = ExportConfig(output_dir=tmp_path, scale=0.5)

        path = pdf_from_attempts(tmp_path / "half.pdf", [attempt_on_disk("1", "1")], config)

        assert _page_sizes(path) == [(40, 50)]

    def test_pdf_from_attempts_when_page_missing_then_export_error(self, tmp_path):
        page = PageRecord(PageSource(tmp_path / "gone.png"), 80, 100)
        attempt = build_attempt([page], IdentifierTriple("1", "1", "1"), None)

        with pytest.raises(ExportError):
            pdf_from_attempts(tmp_path / "doc.pdf", [attempt])


class TestGroupedPdfs:

    def test_write_pdfs_by_copy_names_files_by_prefix(self, attempt_on_disk, tmp_path):
        # Arrange
        assessment = Assessment([
            attempt_on_disk("5", "1"),
            attempt_on_disk("5", "2"),
            attempt_on_disk("6", "1"),
            attempt_on_disk(None, "1"),
        ])
        config = ExportConfig(output_dir=tmp_path / "out", copy_prefix="copy")
        ticks = []

        # Act
        written = write_pdfs_by_copy(assessment, config, lambda: ticks.append(1))

        # Assert
        assert [p.name for p in written] == ["copy_5.pdf", "copy_6.pdf"]
        assert len(_page_sizes(written[0])) == 2
        assert len(ticks) == 2

    def test_write_pdfs_by_question(self, attempt_on_disk, tmp_path):
        assessment = Assessment([attempt_on_disk("5", "2"), attempt_on_disk("6", "2"), attempt_on_disk("6", "1")])

        written = write_pdfs_by_question(assessment, ExportConfig(output_dir=tmp_path))

        assert [p.name for p in written] == ["question_2.pdf", "question_1.pdf"]
        assert len(_page_sizes(written[0])) == 2

    def test_write_pdf_by_question_sorts_valid_attempts(self, attempt_on_disk, tmp_path):
        assessment = Assessment([
            attempt_on_disk("1", "3", size=(30, 30)),
            attempt_on_disk("1", None, size=(50, 50)),
            attempt_on_disk("1", "1", size=(10, 10)),
        ])

        path = write_pdf_by_question(assessment, tmp_path / "all.pdf", ExportConfig(output_dir=tmp_path))

        assert _page_sizes(path) == [(10, 10), (30, 30)]

    def test_write_invalid_attempts_pdf(self, attempt_on_disk, tmp_path):
        assessment = Assessment([attempt_on_disk("1", "1", size=(10, 10)), attempt_on_disk(None, "1", size=(20, 20))])

        path = write_invalid_attempts_pdf(assessment, tmp_path / "invalid.pdf")

        assert _page_sizes(path) == [(20, 20)]
