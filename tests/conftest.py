from __future__ import annotations

import sys
from pathlib import Path

import pytest


# Ensure the project root is importable when running `pytest` via its entrypoint,
# where `sys.path[0]` may not be the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


def make_pdf(path: Path, pages, fields=(), texts=None) -> Path:
    """
    Write a PDF with PyMuPDF.

    Args:
        path: Output file
        pages: [(width, height), ...] in points
        fields: [(page_index, name, value, (x0, y0, x1, y1)), ...]
                rect in MuPDF page space (origin top-left)
        texts: Optional {page_index: text} drawn near the page's top-left
    """
    import pymupdf

    doc = pymupdf.open()
    for index, (width, height) in enumerate(pages):
        page = doc.new_page(width=width, height=height)
        text = (texts or {}).get(index, f"Page {index + 1}")
        if height > 20:
            page.insert_text((5, 15), text, fontsize=9)
    for page_index, name, value, rect in fields:
        widget = pymupdf.Widget()
        widget.field_name = name
        widget.field_type = pymupdf.PDF_WIDGET_TYPE_TEXT
        widget.rect = pymupdf.Rect(*rect)
        widget.field_value = value
        doc[page_index].add_widget(widget)
    doc.save(str(path))
    doc.close()
    return path


def make_empty_pdf(path: Path) -> Path:
    """Write a valid PDF with zero pages (PyMuPDF cannot save those)."""
    from pypdf import PdfWriter

    writer = PdfWriter()
    with open(path, "wb") as f:
        writer.write(f)
    return path


@pytest.fixture
def pdf_factory(tmp_path):
    """Build PDFs under tmp_path: pdf_factory(name, pages, fields=(), texts=None)"""
    def _factory(name, pages, fields=(), texts=None):
        return make_pdf(tmp_path / name, pages, fields, texts)
    return _factory


@pytest.fixture
def two_page_form(pdf_factory):
    """200x300 page with PcardHolderName above a 200x100 page with Amount"""
    return pdf_factory(
        "form.pdf",
        [(200, 300), (200, 100)],
        fields=[
            (0, "PcardHolderName", "Jane Doe", (10, 10, 110, 30)),
            (1, "Amount", "42.00", (20, 50, 120, 70)),
        ],
        texts={0: "Header page", 1: "Footer page"},
    )


@pytest.fixture
def empty_pdf(tmp_path):
    """A valid PDF with zero pages"""
    return make_empty_pdf(tmp_path / "empty.pdf")
