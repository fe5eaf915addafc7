"""
Module: cli

Purpose:
    Command-line entry point. Scans paper-copy quiz pages, optionally lets
    an operator repair unidentified or ungraded attempts, and writes the
    requested exports.

Commands:
    papercopy scan FILES... [--question] [--attempt] [--invalids FILE]
                            [--upload] [--csv FILE] [--manifest FILE] ...
    papercopy dedupe FILES... [--apply]
    papercopy split-questions FILES... [--outpath DIR] [--padding N]

Dependencies:
    - argparse (std)
    - tqdm: Progress bars
    - papercopy_toolkit.scanning / papercopy_toolkit.output
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from tqdm import tqdm

from papercopy_toolkit import __version__
from papercopy_toolkit.core.models.assessment import Assessment
from papercopy_toolkit.core.models.attempts import Attempt
from papercopy_toolkit.core.models.identifiers import IdentifierTriple
from papercopy_toolkit.output import (
    ExportConfig,
    ExportError,
    find_duplicates,
    remove_duplicates,
    write_csv_by_copy,
    write_invalid_attempts_pdf,
    write_pdfs_by_copy,
    write_pdfs_by_question,
    write_question_images,
    write_upload_images,
)
from papercopy_toolkit.scanning import ScanConfig, ScanError, scan_files, split_pdfs

logger = logging.getLogger("papercopy")

Ask = Callable[[str], str]


# ─────────────────────────────────────────────────────────────────────────────
# Interactive Repair
# ─────────────────────────────────────────────────────────────────────────────

def _prompt(ask: Ask, question: str) -> Optional[str]:
    """Ask once; None when input has run out."""
    try:
        return ask(question)
    except EOFError:
        logger.warning("Input closed; leaving remaining attempts unrepaired")
        return None


def populate_identifiers(attempt: Attempt, ask: Ask = input) -> bool:
    """
    Prompt until a valid copy-question-attempt identifier is entered.

    Returns:
        False if input ran out before a valid answer (attempt unchanged)
    """
    missing = ", ".join(attempt.identifiers.missing_fields)
    while True:
        answer = _prompt(
            ask,
            f"\nCouldn't figure out the attempt ID ({missing}) for '{attempt.first_source}'. "
            "Enter the ID printed below the question barcode (copy-question-attempt)> ",
        )
        if answer is None:
            return False
        identifiers = IdentifierTriple.parse(answer)
        if identifiers is not None:
            attempt.identifiers = identifiers
            return True
        print("Please enter three numbers separated by dashes, e.g. 12-3-1.")


def populate_grade(attempt: Attempt, max_grade: int, ask: Ask = input) -> bool:
    """
    Prompt until an integer grade in 0..max_grade is entered.

    Returns:
        False if input ran out before a valid answer (attempt unchanged)
    """
    while True:
        answer = _prompt(
            ask,
            f"\nCouldn't find a grade in '{attempt.first_source}'. "
            f"Enter an integer grade between 0 and {max_grade}> ",
        )
        if answer is None:
            return False
        try:
            grade = int(answer.strip())
        except ValueError:
            grade = -1
        if 0 <= grade <= max_grade:
            attempt.grade = grade
            return True
        print(f"Please enter a whole number from 0 to {max_grade}.")


def repair_interactively(assessment: Assessment, max_grade: int, ask: Ask = input) -> None:
    """Ask for missing identifiers, then missing grades, and reindex."""
    try:
        for attempt in assessment.invalid_attempts():
            if not populate_identifiers(attempt, ask):
                return
        for attempt in assessment.ungraded_attempts():
            if not populate_grade(attempt, max_grade, ask):
                return
    finally:
        assessment.reindex()


# ─────────────────────────────────────────────────────────────────────────────
# Argument Parsing
# ─────────────────────────────────────────────────────────────────────────────

def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="papercopy",
        description="Paper-copy quiz assessment helper: identify, rotate and grade scanned pages.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    scan = commands.add_parser("scan", parents=[common], help="Scan pages and write exports")
    scan.add_argument("files", nargs="+", type=Path, help="Scanned images or PDFs")
    scan.add_argument("--split", action="store_true",
                      help="Split multi-page PDFs into single-page PDFs first")
    scan.add_argument("--outpath", type=Path, default=Path.cwd(),
                      help="Output folder for multiple-file operations")
    scan.add_argument("--interactive", action="store_true",
                      help="Prompt for fixes when identifiers or grades are missing")
    scan.add_argument("--upload", action="store_true",
                      help="Write one upload-named JPEG per attempt")
    scan.add_argument("--csv", type=Path, help="Write grades by copy to this CSV file")
    scan.add_argument("--manifest", type=Path, help="Write a JSON summary of the scan")
    scan.add_argument("--question", action="store_true", help="Write one PDF per question")
    scan.add_argument("--qprefix", default="question", help="Prefix for per-question PDFs")
    scan.add_argument("--attempt", action="store_true", help="Write one PDF per student copy")
    scan.add_argument("--aprefix", default="attempt", help="Prefix for per-copy PDFs")
    scan.add_argument("--invalids", type=Path,
                      help="Write unidentified attempts to this PDF")
    scan.add_argument("--dpi", type=int, default=300, help="DPI for rendering PDF input")
    scan.add_argument("--scale", type=float, default=1.0,
                      help="Size multiplier for output images (0.25 = quarter size)")
    scan.add_argument("--norotate", action="store_true", help="Do not rotate pages")
    scan.add_argument("--footer", type=Path, help="Image appended below each attempt")
    scan.add_argument("--max-grade", type=int, default=10, help="Highest grade bubble")
    scan.add_argument("--workers", type=int, default=1, help="Pages scanned in parallel")

    dedupe = commands.add_parser("dedupe", parents=[common], help="Find duplicate upload images")
    dedupe.add_argument("files", nargs="+", type=Path, help="Upload images")
    dedupe.add_argument("--apply", action="store_true", help="Delete redundant files")

    split = commands.add_parser("split-questions", parents=[common],
                                help="Cut pages into one image per question at each QR code")
    split.add_argument("files", nargs="+", type=Path, help="Scanned images or PDFs")
    split.add_argument("--outpath", type=Path, default=Path.cwd(), help="Output folder")
    split.add_argument("--padding", type=int, default=5,
                       help="Pixels kept above each question's QR code")
    split.add_argument("--dpi", type=int, default=300, help="DPI for rendering PDF input")

    return parser


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────

def _has_export(args: argparse.Namespace) -> bool:
    return bool(
        args.question or args.attempt or args.invalids or args.upload
        or args.csv or args.manifest
    )


def run_scan(args: argparse.Namespace, ask: Ask = input) -> int:
    files: List[Path] = list(args.files)
    if args.split:
        files = split_pdfs(files, args.outpath)

    if not _has_export(args):
        logger.info("No output requested; nothing to do")
        return 0

    scan_config = ScanConfig(
        max_grade=args.max_grade,
        autorotate=not args.norotate,
        dpi=args.dpi,
        workers=args.workers,
    )
    export_config = ExportConfig(
        output_dir=args.outpath,
        scale=args.scale,
        footer=args.footer,
        dpi=args.dpi,
        question_prefix=args.qprefix,
        copy_prefix=args.aprefix,
    )

    with tqdm(desc="Analyzing", unit="page") as bar:
        def progress(done: int, total: int) -> None:
            bar.total = total
            bar.n = done
            bar.refresh()

        result = scan_files(files, scan_config, progress=progress)

    assessment = result.assessment
    for warning in result.warnings:
        logger.warning(warning)

    if args.interactive:
        repair_interactively(assessment, scan_config.max_grade, ask)

    to_generate = (
        (assessment.question_count() if args.question else 0)
        + (assessment.copy_count() if args.attempt else 0)
        + (len(assessment.invalid_attempts()) if args.invalids else 0)
        + (len(assessment) if args.upload else 0)
    )

    try:
        if args.csv:
            write_csv_by_copy(assessment, args.csv)
        if args.manifest:
            args.manifest.parent.mkdir(parents=True, exist_ok=True)
            args.manifest.write_text(json.dumps(assessment.to_dict(), indent=2))

        with tqdm(total=to_generate, desc="Generating", unit="file") as bar:
            if args.question:
                write_pdfs_by_question(assessment, export_config, bar.update)
            if args.attempt:
                write_pdfs_by_copy(assessment, export_config, bar.update)
            if args.invalids:
                write_invalid_attempts_pdf(assessment, args.invalids, export_config)
                bar.update(len(assessment.invalid_attempts()))
            if args.upload:
                write_upload_images(assessment, export_config, bar.update)
    except (ExportError, OSError) as e:
        logger.error(f"Export failed: {e}")
        return 1

    return 0


def run_dedupe(args: argparse.Namespace) -> int:
    report = find_duplicates(args.files)
    for path in report.removable:
        print(f"duplicate: {path}")
    for earlier, later in report.conflicts:
        print(f"--> !!! Apparent conflict between {earlier} and {later}.")
    if args.apply:
        remove_duplicates(report)
    return 1 if report.conflicts else 0


def run_split_questions(args: argparse.Namespace) -> int:
    config = ExportConfig(output_dir=args.outpath, dpi=args.dpi)
    try:
        with tqdm(desc="Splitting", unit="page") as bar:
            write_question_images(args.files, config, padding=args.padding, tick=bar.update)
    except ExportError as e:
        logger.error(f"Split failed: {e}")
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = create_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "dedupe":
            return run_dedupe(args)
        if args.command == "split-questions":
            return run_split_questions(args)
        return run_scan(args)
    except ScanError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
