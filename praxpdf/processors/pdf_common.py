# praxpdf/processors/pdf_common.py
"""
Shared PyMuPDF helpers: lazy import, opening documents, coordinate conversion.

Documents are always parsed from bytes so the file on disk can be replaced
while a handle is still open (merge or save onto the source path).
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from praxpdf.models.types import PageRect
from praxpdf.services.exceptions import PdfOpenError

# Module logger
logger = logging.getLogger(__name__)

PDF_EXTENSIONS = ('.pdf',)

_pymupdf = None


def _get_pymupdf():
    """Lazy import PyMuPDF"""
    global _pymupdf
    if _pymupdf is None:
        import pymupdf
        _pymupdf = pymupdf
    return _pymupdf


def is_pdf(path: Union[str, Path]) -> bool:
    """Check if a path names a PDF file (by extension)"""
    return Path(path).suffix.lower() in PDF_EXTENSIONS


def open_pdf_bytes(data: bytes, path: Optional[Path] = None):
    """
    Parse a PDF from bytes.

    Args:
        data: Raw file content
        path: Origin of the bytes, used in error messages only

    Returns:
        PyMuPDF Document

    Raises:
        PdfOpenError: Content is not a readable, unencrypted PDF
    """
    pymupdf = _get_pymupdf()
    try:
        doc = pymupdf.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        # RuntimeError covers pymupdf.FileDataError / EmptyFileError
        raise PdfOpenError(f"Unable to open PDF ({e})", path) from e

    if doc.needs_pass:
        doc.close()
        raise PdfOpenError("Password-protected PDFs are not supported", path)
    if not doc.is_pdf:
        doc.close()
        raise PdfOpenError("Not a PDF document", path)
    return doc


def open_pdf(path: Union[str, Path]):
    """Read a file and parse it as a PDF (see open_pdf_bytes)."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise PdfOpenError(f"Unable to read file ({e})", path) from e
    return open_pdf_bytes(data, path)


@contextmanager
def _open_pymupdf_document(file_path: Union[str, Path]):
    """
    Context manager for safely opening and closing PyMuPDF documents.

    Args:
        file_path: Path to PDF file (str or Path)

    Yields:
        PyMuPDF Document object
    """
    doc = open_pdf(file_path)
    try:
        yield doc
    finally:
        doc.close()


def page_media_rect(page) -> PageRect:
    """Media box of a PyMuPDF page in PDF space"""
    mb = page.mediabox
    return PageRect.from_corners(mb.x0, mb.y0, mb.x1, mb.y1)


def pdf_rect_to_page(rect: PageRect, page):
    """Convert a PDF-space rectangle to a MuPDF Rect on `page` (origin top-left)."""
    pymupdf = _get_pymupdf()
    r = pymupdf.Rect(rect.min_x, rect.min_y, rect.max_x, rect.max_y) * page.transformation_matrix
    return r.normalize()


def page_rect_to_pdf(rect, page) -> PageRect:
    """Convert a MuPDF Rect on `page` back to PDF space."""
    pymupdf = _get_pymupdf()
    r = pymupdf.Rect(rect) * ~page.transformation_matrix
    return PageRect.from_corners(r.x0, r.y0, r.x1, r.y1)
