# tests/test_pdf_writer.py
"""Tests for praxpdf.processors.pdf_writer"""

from unittest.mock import MagicMock, patch

import pytest

from praxpdf.processors.pdf_writer import (
    TEMP_SUFFIX,
    serialize_document,
    serialize_empty_document,
    write_bytes_atomically,
    write_document_atomically,
)
from praxpdf.services.exceptions import PdfReplaceError, PdfSerializationError


def _failing_document():
    doc = MagicMock()
    doc.page_count = 1
    doc.tobytes.side_effect = RuntimeError("cannot save")
    return doc


class TestWriteBytesAtomically:
    """Tests for write_bytes_atomically()"""

    def test_creates_file(self, tmp_path):
        dest = tmp_path / "out.pdf"
        assert write_bytes_atomically(b"%PDF-1.7 data", dest) == dest
        assert dest.read_bytes() == b"%PDF-1.7 data"

    def test_replaces_existing_file(self, tmp_path):
        dest = tmp_path / "out.pdf"
        dest.write_bytes(b"old")
        write_bytes_atomically(b"new", dest)
        assert dest.read_bytes() == b"new"
        assert list(tmp_path.glob(f"*{TEMP_SUFFIX}")) == []

    def test_replace_failure_keeps_original(self, tmp_path):
        dest = tmp_path / "out.pdf"
        dest.write_bytes(b"original")

        with patch("praxpdf.processors.pdf_writer.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PdfReplaceError) as exc_info:
                write_bytes_atomically(b"new", dest)

        assert exc_info.value.path == dest
        assert dest.read_bytes() == b"original"
        assert list(tmp_path.glob(f"*{TEMP_SUFFIX}")) == []

    def test_missing_scratch_dir(self, tmp_path):
        dest = tmp_path / "out.pdf"
        with pytest.raises(PdfReplaceError):
            write_bytes_atomically(b"data", dest, scratch_dir=tmp_path / "missing")
        assert not dest.exists()

    def test_missing_destination_dir(self, tmp_path):
        with pytest.raises(PdfReplaceError):
            write_bytes_atomically(b"data", tmp_path / "missing" / "out.pdf")


class TestSerialization:
    """Tests for serialize_document() and write_document_atomically()"""

    def test_serialization_failure(self):
        with pytest.raises(PdfSerializationError):
            serialize_document(_failing_document())

    def test_serialization_failure_leaves_destination(self, tmp_path):
        dest = tmp_path / "out.pdf"
        dest.write_bytes(b"original")

        with pytest.raises(PdfSerializationError) as exc_info:
            write_document_atomically(_failing_document(), dest)

        assert exc_info.value.path == dest
        assert dest.read_bytes() == b"original"
        assert list(tmp_path.iterdir()) == [dest]

    def test_zero_page_document(self):
        doc = MagicMock()
        doc.page_count = 0
        data = serialize_document(doc)
        assert data.startswith(b"%PDF")
        doc.tobytes.assert_not_called()

    def test_empty_document_is_readable(self, tmp_path):
        from pypdf import PdfReader

        dest = tmp_path / "empty.pdf"
        write_bytes_atomically(serialize_empty_document(), dest)
        assert len(PdfReader(str(dest)).pages) == 0

    def test_pymupdf_document(self, tmp_path):
        pymupdf = pytest.importorskip("pymupdf")
        doc = pymupdf.open()
        doc.new_page(width=100, height=50)
        dest = tmp_path / "out.pdf"
        try:
            write_document_atomically(doc, dest)
        finally:
            doc.close()

        written = pymupdf.open(str(dest))
        try:
            assert written.page_count == 1
            assert written[0].rect.height == pytest.approx(50)
        finally:
            written.close()
