"""
Exception types for PDF document operations.

Every failure that can leave a document in a different state than the
caller expects is raised as one of these, never swallowed.
"""

from pathlib import Path
from typing import Optional


class PdfDocumentError(Exception):
    """Base class for document operation failures."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.message = message
        self.path = path
        super().__init__(f"{message}: {path}" if path is not None else message)


class PdfOpenError(PdfDocumentError):
    """Raised when a source cannot be read or parsed as a PDF."""

    pass


class PdfSerializationError(PdfDocumentError):
    """Raised when rendering or encoding a document to bytes fails."""

    pass


class PdfReplaceError(PdfDocumentError):
    """Raised when the temporary file cannot be created or moved into place."""

    pass


class PdfRestoreError(PdfDocumentError):
    """
    Raised when a destination cannot be put back after a failed merge.

    The merge failure that triggered the rollback is kept in `primary`;
    the rollback failure itself is the exception's __cause__.
    """

    def __init__(self, message: str, path: Optional[Path] = None, primary: Optional[Exception] = None):
        self.primary = primary
        super().__init__(message, path)


class FieldRetargetError(PdfDocumentError):
    """Raised when a form field cannot be recreated on the merged page."""

    def __init__(self, message: str, path: Optional[Path] = None, field_name: Optional[str] = None):
        self.field_name = field_name
        super().__init__(message, path)
