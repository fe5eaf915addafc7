"""
Module: output

Purpose:
    Documents produced from a scanned Assessment: merged attempt images,
    per-copy and per-question PDFs, upload JPEGs, CSV grade tables and the
    duplicate checker for upload files.

Key Functions:
    - attempt_to_image(): Merge an attempt's pages
    - pdf_from_attempts(): Attempts -> PDF (one page per attempt)
    - write_pdfs_by_copy() / write_pdfs_by_question()
    - write_csv_by_copy() / write_csv_by_question()
    - write_upload_images()
    - split_at_codes() / write_question_images(): Question images from pages
    - find_duplicates() / remove_duplicates()

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
"""

from .config import ExportConfig
from .errors import ExportError
from .images import attempt_to_image, merge_images, rotate_upright
from .pdf import (
    pdf_from_attempts,
    write_invalid_attempts_pdf,
    write_pdf_by_question,
    write_pdfs_by_copy,
    write_pdfs_by_question,
)
from .csv_export import write_csv_by_copy, write_csv_by_question
from .upload import write_upload_images
from .duplicates import find_duplicates, remove_duplicates
from .questions import split_at_codes, write_question_images

__all__ = [
    "ExportConfig",
    "ExportError",
    "attempt_to_image",
    "merge_images",
    "rotate_upright",
    "pdf_from_attempts",
    "write_pdfs_by_copy",
    "write_pdfs_by_question",
    "write_pdf_by_question",
    "write_invalid_attempts_pdf",
    "write_csv_by_copy",
    "write_csv_by_question",
    "write_upload_images",
    "find_duplicates",
    "remove_duplicates",
    "split_at_codes",
    "write_question_images",
]
