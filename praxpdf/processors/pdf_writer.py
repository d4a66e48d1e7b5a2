# praxpdf/processors/pdf_writer.py
"""
Atomic document writer.

The document is serialized completely in memory, written to a temporary file
next to the destination and moved into place with os.replace(). The
destination therefore holds either its previous content or the complete new
content, never a partial write.
"""

import io
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from praxpdf.services.exceptions import PdfReplaceError, PdfSerializationError

# Module logger
logger = logging.getLogger(__name__)

# PyMuPDF save options (compact output, same as the translation pipeline)
SAVE_OPTIONS = {
    'garbage': 3,
    'deflate': True,
    'use_objstms': 1,
}

TEMP_PREFIX = ".praxpdf-"
TEMP_SUFFIX = ".pdf.tmp"

_pypdf = None


def _get_pypdf():
    """Lazy import pypdf (only needed for empty documents)."""
    global _pypdf
    if _pypdf is None:
        import pypdf
        _pypdf = pypdf
    return _pypdf


def serialize_empty_document() -> bytes:
    """
    Serialize a valid PDF with zero pages.

    PyMuPDF refuses to save documents without pages, so pypdf writes this one.
    """
    pypdf = _get_pypdf()
    writer = pypdf.PdfWriter()
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def serialize_document(doc, path: Optional[Path] = None) -> bytes:
    """
    Serialize a PyMuPDF document to PDF bytes.

    Raises:
        PdfSerializationError: MuPDF failed to write the document
    """
    try:
        if doc.page_count == 0:
            return serialize_empty_document()
        return doc.tobytes(**SAVE_OPTIONS)
    except (RuntimeError, ValueError) as e:
        raise PdfSerializationError(f"Failed to write PDF data ({e})", path) from e


def _discard_temp(temp_path: Path) -> None:
    """Best-effort removal of a temporary file. Failures are only logged."""
    try:
        temp_path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Failed to remove temporary file %s: %s", temp_path, e)


def write_bytes_atomically(
    data: bytes,
    destination: Union[str, Path],
    scratch_dir: Optional[Path] = None,
) -> Path:
    """
    Write bytes to `destination` through a temporary file.

    Args:
        data: Complete file content
        destination: Target path (replaced if it exists)
        scratch_dir: Directory for the temporary file. Defaults to the
            destination's directory so the final move stays on one filesystem.

    Returns:
        The destination path

    Raises:
        PdfReplaceError: Temporary file creation, write or move failed
    """
    destination = Path(destination)
    scratch = Path(scratch_dir) if scratch_dir is not None else destination.parent

    try:
        fd, temp_name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX, dir=scratch)
    except OSError as e:
        raise PdfReplaceError(f"Failed to create temporary file ({e})", destination) from e

    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, destination)
    except OSError as e:
        raise PdfReplaceError(f"Failed to replace file ({e})", destination) from e
    finally:
        if temp_path.exists():
            _discard_temp(temp_path)

    logger.debug("Wrote %d bytes to %s", len(data), destination)
    return destination


def write_document_atomically(
    doc,
    destination: Union[str, Path],
    scratch_dir: Optional[Path] = None,
) -> Path:
    """
    Serialize a document and replace `destination` with it.

    Serialization happens before any file is touched, so a serialization
    failure leaves the destination as it was.

    Raises:
        PdfSerializationError: Document could not be serialized
        PdfReplaceError: File could not be written or moved into place
    """
    destination = Path(destination)
    data = serialize_document(doc, destination)
    return write_bytes_atomically(data, destination, scratch_dir)
