# praxpdf/processors/pdf_fields.py
"""
Form field extraction and editing on PyMuPDF documents.

- extract_fields: first non-empty value wins when a name appears twice
- apply_fields: only rewrites widgets whose trimmed value actually changes
- snapshot_fields: immutable widget copies used by the merge compositor
"""

import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

from praxpdf.models.types import DocumentMetrics, FieldEntry, FieldSnapshot
from .field_registry import KNOWN_FIELDS
from .pdf_common import (
    _get_pymupdf, _open_pymupdf_document, page_media_rect, page_rect_to_pdf,
)
from .pdf_geometry import stacked_extent
from .pdf_writer import write_document_atomically

# Module logger
logger = logging.getLogger(__name__)


def _editable_widget_types() -> tuple[int, ...]:
    pymupdf = _get_pymupdf()
    return (
        pymupdf.PDF_WIDGET_TYPE_TEXT,
        pymupdf.PDF_WIDGET_TYPE_COMBOBOX,
        pymupdf.PDF_WIDGET_TYPE_LISTBOX,
    )


def _iter_named_widgets(doc):
    """Yield (page_index, page, widget) for every widget with a field name."""
    for page_index, page in enumerate(doc):
        for widget in page.widgets():
            if widget.field_name:
                yield page_index, page, widget


def widget_value(doc, widget) -> Optional[str]:
    """
    Current value of a widget.

    Falls back to the annotation's /Contents when the field value is empty.
    """
    value = widget.field_value
    if value is not None and value is not False and str(value) != "":
        return str(value)
    kind, contents = doc.xref_get_key(widget.xref, "Contents")
    if kind == "string" and contents:
        return contents
    return None


def extract_fields(doc, known: Iterable[str] = KNOWN_FIELDS) -> dict[str, str]:
    """
    Collect values of recognized fields across the whole document.

    Args:
        doc: PyMuPDF Document
        known: Field names to collect

    Returns:
        Mapping field name -> first non-empty value found
    """
    known = set(known)
    found: dict[str, str] = {}
    for page_index, _page, widget in _iter_named_widgets(doc):
        name = widget.field_name
        value = widget_value(doc, widget)
        logger.debug(
            "Page %d: field=%s type=%s value=%r",
            page_index + 1, name, widget.field_type_string, value,
        )
        if name not in known or value is None or not value.strip():
            continue
        if name not in found:
            found[name] = value
    return found


def apply_fields(doc, updates: Mapping[str, str]) -> int:
    """
    Write field values by name.

    Every widget carrying an updated name is set to the trimmed value, but
    only when it differs from the widget's trimmed current value. An empty
    value clears the field.

    Returns:
        Number of widgets changed
    """
    pymupdf = _get_pymupdf()
    editable = _editable_widget_types()
    changed = 0
    for page_index, _page, widget in _iter_named_widgets(doc):
        name = widget.field_name
        if name not in updates:
            continue
        if widget.field_type not in editable:
            logger.warning(
                "Page %d: field %s is a %s field, value not changed",
                page_index + 1, name, widget.field_type_string,
            )
            continue

        new_value = updates[name].strip()
        current = (widget_value(doc, widget) or "").strip()
        if current == new_value:
            continue

        widget.field_value = new_value
        if not new_value:
            # Widget.update() does not write an empty /V
            doc.xref_set_key(widget.xref, "V", pymupdf.get_pdf_str(""))
        widget.update()
        # Keep /Contents in step with the value (read back as a fallback)
        doc.xref_set_key(
            widget.xref, "Contents",
            pymupdf.get_pdf_str(new_value) if new_value else "null",
        )
        changed += 1
        logger.debug("Page %d: %s = %r", page_index + 1, name, new_value)
    return changed


def collect_unknown_field_names(doc, known: Iterable[str] = KNOWN_FIELDS) -> list[str]:
    """Sorted names of fields present in the document but not in `known`."""
    known = set(known)
    return sorted({
        widget.field_name for _i, _page, widget in _iter_named_widgets(doc)
        if widget.field_name not in known
    })


def list_field_entries(doc) -> list[FieldEntry]:
    """Every named widget with its page and PDF-space bounds, in page order."""
    return [
        FieldEntry(
            field_name=widget.field_name,
            current_value=widget_value(doc, widget),
            page_index=page_index,
            bounds=page_rect_to_pdf(widget.rect, page),
        )
        for page_index, page, widget in _iter_named_widgets(doc)
    ]


def _as_tuple(value) -> Optional[tuple]:
    if value is None:
        return None
    return tuple(tuple(v) if isinstance(v, list) else v for v in value)


def snapshot_fields(doc) -> list[FieldSnapshot]:
    """
    Capture immutable copies of every named widget.

    The document is only read.
    """
    snapshots = []
    for page_index, page, widget in _iter_named_widgets(doc):
        snapshots.append(FieldSnapshot(
            page_index=page_index,
            field_name=widget.field_name,
            field_type=widget.field_type,
            value=widget_value(doc, widget),
            bounds=page_rect_to_pdf(widget.rect, page),
            field_flags=widget.field_flags or 0,
            field_label=widget.field_label,
            text_font=widget.text_font or "Helv",
            text_fontsize=widget.text_fontsize or 0,
            text_color=_as_tuple(widget.text_color),
            border_color=_as_tuple(widget.border_color),
            fill_color=_as_tuple(widget.fill_color),
            border_width=widget.border_width or 0,
            choice_values=_as_tuple(widget.choice_values),
            button_caption=widget.button_caption,
        ))
    logger.debug("Captured %d field snapshots", len(snapshots))
    return snapshots


def collect_metrics(doc, known: Iterable[str] = KNOWN_FIELDS) -> DocumentMetrics:
    """Page count, stacked height, max width and unknown field names."""
    total_height, max_width = stacked_extent([page_media_rect(page) for page in doc])
    return DocumentMetrics(
        page_count=doc.page_count,
        total_height=total_height,
        max_width=max_width,
        unknown_field_names=collect_unknown_field_names(doc, known),
    )


def save_fields(
    source: Union[str, Path],
    destination: Union[str, Path],
    updates: Mapping[str, str],
) -> int:
    """
    Apply field updates to `source` and write the result to `destination`.

    When nothing changes and the destination is the source itself, the file
    is left untouched.

    Returns:
        Number of widgets changed

    Raises:
        PdfOpenError, PdfSerializationError, PdfReplaceError
    """
    source = Path(source)
    destination = Path(destination)
    with _open_pymupdf_document(source) as doc:
        changed = apply_fields(doc, updates)
        if changed == 0 and destination.resolve() == source.resolve():
            logger.info("No field changes for %s, file left as is", source.name)
            return 0
        write_document_atomically(doc, destination)

    logger.info("Saved %d field change(s) to %s", changed, destination)
    return changed
