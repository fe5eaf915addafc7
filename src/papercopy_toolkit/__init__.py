"""Top-level package for the PaperCopy Toolkit.

Provides subpackages:
- papercopy_toolkit.core – page, attempt and assessment models
- papercopy_toolkit.scanning – barcode decoding, rotation and page resolution
- papercopy_toolkit.output – merged images, PDFs, CSV grade tables
- papercopy_toolkit.cli – command-line entry point
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"

    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    from importlib.metadata import version as pkg_version, PackageNotFoundError
    try:
        return pkg_version("papercopy_toolkit")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
