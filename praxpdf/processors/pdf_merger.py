# praxpdf/processors/pdf_merger.py
"""
Merge compositor: collapse a multi-page PDF into one tall page.

Flow:
1. Open the source (read-only, parsed from bytes)
2. Plan the layout once (pdf_geometry.plan_layout)
3. Snapshot every named widget of the source
4. Draw each visible slice onto a single new page with show_pdf_page
   (page content only, annotations are not drawn)
5. Write the content-only page atomically
6. Re-open the written file, recreate the widgets at their translated
   positions using the same plan, write atomically again

If step 6 fails, the destination's previous content is put back. When that
is not possible, PdfRestoreError is raised instead of the field error.
The source document is never modified.
"""

import logging
from pathlib import Path
from typing import Optional

from praxpdf.models.types import (
    CanvasSize, FieldSnapshot, LayoutPlan, MergeRequest, MergeResult,
)
from praxpdf.services.exceptions import (
    FieldRetargetError, PdfDocumentError, PdfRestoreError, PdfSerializationError,
)
from .pdf_common import (
    _get_pymupdf, open_pdf, page_media_rect, page_rect_to_pdf, pdf_rect_to_page,
)
from .pdf_fields import snapshot_fields
from .pdf_geometry import plan_layout, surface_size
from .pdf_writer import (
    serialize_empty_document, write_bytes_atomically, write_document_atomically,
)

# Module logger
logger = logging.getLogger(__name__)


def _cloneable_widget_types() -> tuple[int, ...]:
    pymupdf = _get_pymupdf()
    return (
        pymupdf.PDF_WIDGET_TYPE_TEXT,
        pymupdf.PDF_WIDGET_TYPE_CHECKBOX,
        pymupdf.PDF_WIDGET_TYPE_RADIOBUTTON,
        pymupdf.PDF_WIDGET_TYPE_COMBOBOX,
        pymupdf.PDF_WIDGET_TYPE_LISTBOX,
    )


def build_widget(snapshot: FieldSnapshot, rect):
    """
    Create a PyMuPDF Widget from a snapshot.

    Args:
        snapshot: Captured field
        rect: Target rectangle in the destination page's MuPDF space

    Returns:
        pymupdf.Widget ready for Page.add_widget()
    """
    pymupdf = _get_pymupdf()
    widget = pymupdf.Widget()
    widget.field_name = snapshot.field_name
    widget.field_type = snapshot.field_type
    widget.rect = rect
    widget.field_flags = snapshot.field_flags
    widget.field_label = snapshot.field_label
    widget.text_font = snapshot.text_font
    widget.text_fontsize = snapshot.text_fontsize
    widget.border_width = snapshot.border_width
    widget.button_caption = snapshot.button_caption
    if snapshot.text_color:
        widget.text_color = list(snapshot.text_color)
    if snapshot.border_color:
        widget.border_color = list(snapshot.border_color)
    if snapshot.fill_color:
        widget.fill_color = list(snapshot.fill_color)
    if snapshot.choice_values:
        widget.choice_values = [list(v) if isinstance(v, tuple) else v for v in snapshot.choice_values]

    if snapshot.field_type in (pymupdf.PDF_WIDGET_TYPE_CHECKBOX, pymupdf.PDF_WIDGET_TYPE_RADIOBUTTON):
        widget.field_value = snapshot.value not in (None, "", "Off")
    else:
        widget.field_value = snapshot.value or ""
    return widget


class PdfMerger:
    """
    Stacks the pages of one PDF into a single page, keeping form fields.

    Not reentrant for the same destination; run one merge at a time.
    """

    def __init__(self, scratch_dir: Optional[Path] = None):
        # None = temporary files next to the destination
        self.scratch_dir = scratch_dir

    def merge(self, request: MergeRequest) -> MergeResult:
        """
        Merge all pages of `request.source` into `request.destination`.

        Returns:
            MergeResult with canvas size and field counts

        Raises:
            PdfOpenError: Source cannot be read
            PdfSerializationError: Rendering or encoding failed
            PdfReplaceError: Destination could not be written
            FieldRetargetError: A field could not be recreated on the merged page
            PdfRestoreError: The field pass failed and the destination could not
                be put back (the field pass error is in `primary`)
        """
        source = Path(request.source)
        destination = Path(request.destination)
        settings = request.settings
        logger.info(
            "Merging %s -> %s (trim_top=%.1f, trim_bottom=%.1f, gap=%.1f, page trims=%d)",
            source.name, destination.name, settings.trim_top, settings.trim_bottom,
            settings.inter_page_gap, len(request.page_trims),
        )

        existed = destination.exists()
        previous = self._read_previous(destination) if existed else None
        src = open_pdf(source)
        try:
            page_count = src.page_count
            if page_count == 0:
                logger.info("Source has no pages, writing empty document")
                write_bytes_atomically(serialize_empty_document(), destination, self.scratch_dir)
                empty = CanvasSize(0.0, 0.0)
                return MergeResult(destination=destination, page_count=0, canvas=empty, surface=empty)

            page_rects = [page_media_rect(page) for page in src]
            plan = plan_layout(page_rects, request.page_trims, settings)
            surface = surface_size(plan.canvas)
            snapshots = snapshot_fields(src)
            logger.info(
                "Canvas %.1f x %.1f pt from %d page(s), %d field(s)",
                plan.canvas.width, plan.canvas.height, page_count, len(snapshots),
            )

            rendered = self._render(src, plan, surface, source)
            try:
                write_document_atomically(rendered, destination, self.scratch_dir)
            finally:
                rendered.close()
        finally:
            src.close()

        try:
            placed, dropped = self._retarget_fields(destination, plan, snapshots)
        except PdfDocumentError as e:
            self._restore_previous(destination, existed, previous, e)
            raise

        logger.info(
            "Merged %d page(s) into %s: %d field(s) placed, %d dropped",
            page_count, destination.name, placed, len(dropped),
        )
        return MergeResult(
            destination=destination,
            page_count=page_count,
            canvas=plan.canvas,
            surface=surface,
            placed_fields=placed,
            dropped_fields=sorted(dropped),
        )

    def _render(self, src, plan: LayoutPlan, surface: CanvasSize, source: Path):
        """Draw every visible slice onto a new single-page document."""
        pymupdf = _get_pymupdf()
        out = pymupdf.open()
        try:
            canvas_page = out.new_page(width=surface.width, height=surface.height)
            for placement in plan.placements:
                if not placement.is_rendered:
                    continue
                src_page = src[placement.page_index]
                # Visible part of the slice, limited to what MuPDF can show
                clip = pdf_rect_to_page(placement.visible, src_page) & src_page.rect
                if clip.is_empty:
                    logger.warning("Page %d: slice lies outside the crop box, skipped", placement.page_index + 1)
                    continue
                dx, dy = placement.offset
                target = pdf_rect_to_page(page_rect_to_pdf(clip, src_page).offset(dx, dy), canvas_page)
                canvas_page.show_pdf_page(target, src, placement.page_index, clip=clip)
                logger.debug(
                    "Page %d: slice %.1f x %.1f at y=%.1f",
                    placement.page_index + 1, placement.visible.width,
                    placement.visible.height, placement.dest_y,
                )
        except (RuntimeError, ValueError) as e:
            out.close()
            raise PdfSerializationError(f"Failed to render merged page ({e})", source) from e
        return out

    def _retarget_fields(
        self,
        destination: Path,
        plan: LayoutPlan,
        snapshots: list[FieldSnapshot],
    ) -> tuple[int, list[str]]:
        """Recreate snapshot widgets on the written merged page."""
        cloneable = _cloneable_widget_types()
        placed = 0
        dropped: list[str] = []

        doc = open_pdf(destination)
        try:
            page = doc[0]
            for snapshot in snapshots:
                placement = plan.placement_for(snapshot.page_index)
                if not placement.is_rendered:
                    dropped.append(snapshot.field_name)
                    continue
                if snapshot.field_type not in cloneable or snapshot.bounds.is_degenerate:
                    logger.warning(
                        "Page %d: field %s (type %d) cannot be recreated on the merged page",
                        snapshot.page_index + 1, snapshot.field_name, snapshot.field_type,
                    )
                    dropped.append(snapshot.field_name)
                    continue

                dx, dy = placement.offset
                rect = pdf_rect_to_page(snapshot.bounds.offset(dx, dy), page)
                try:
                    page.add_widget(build_widget(snapshot, rect))
                except (RuntimeError, ValueError) as e:
                    raise FieldRetargetError(
                        f"Failed to recreate field {snapshot.field_name!r} ({e})",
                        destination, snapshot.field_name,
                    ) from e
                placed += 1

            if dropped:
                logger.warning("Fields dropped from merged page: %s", ", ".join(sorted(dropped)))
            write_document_atomically(doc, destination, self.scratch_dir)
        finally:
            doc.close()
        return placed, dropped

    @staticmethod
    def _read_previous(destination: Path) -> Optional[bytes]:
        """Content of the destination before the merge, for rollback."""
        try:
            return destination.read_bytes()
        except OSError as e:
            logger.warning("Cannot keep previous content of %s for rollback: %s", destination, e)
            return None

    def _restore_previous(
        self,
        destination: Path,
        existed: bool,
        previous: Optional[bytes],
        primary: PdfDocumentError,
    ) -> None:
        """
        Undo the intermediate write after a failed field pass.

        Raises:
            PdfRestoreError: The destination still holds the field-less
                merged page. `primary` is attached to the error.
        """
        if existed and previous is None:
            logger.error("Previous content of %s is unavailable, merged page left without fields", destination)
            raise PdfRestoreError(
                "Previous content unavailable, merged page left without fields",
                destination, primary,
            )
        try:
            if previous is None:
                destination.unlink(missing_ok=True)
            else:
                write_bytes_atomically(previous, destination, self.scratch_dir)
        except (OSError, PdfDocumentError) as e:
            logger.error("Failed to restore %s after merge failure: %s", destination, e)
            raise PdfRestoreError(
                f"Failed to restore previous content ({e})", destination, primary,
            ) from e
        logger.info("Restored previous content of %s", destination)


def merge_pdf(request: MergeRequest) -> MergeResult:
    """Convenience wrapper around PdfMerger().merge()."""
    return PdfMerger().merge(request)
