"""Exceptions raised by the export writers."""


class ExportError(Exception):
    """Error while writing an export."""
    pass
