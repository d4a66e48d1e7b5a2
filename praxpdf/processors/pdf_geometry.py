# praxpdf/processors/pdf_geometry.py
"""
Geometry engine for page merging.

Pure functions on PDF-space rectangles (origin bottom-left, y up). No I/O
and no PyMuPDF objects: the merge compositor converts to MuPDF space only
when it draws.

Seam rules:
- trim_top is not applied to the first page
- trim_bottom is not applied to the last page
- inter_page_gap is added once per internal seam, even next to a
  degenerate slice
"""

import logging
from typing import Mapping, Optional, Sequence

from praxpdf.models.types import (
    CanvasSize, EdgeTrims, LayoutPlan, MergeSettings, PageRect, SlicePlacement,
)

# Module logger
logger = logging.getLogger(__name__)

# Smallest extent of the output page. MuPDF cannot write an empty media box.
MIN_SURFACE_EXTENT = 1.0

_ZERO_TRIMS = EdgeTrims()


def visible_rect(
    media: PageRect,
    trims: EdgeTrims,
    seam_top: float,
    seam_bottom: float,
) -> PageRect:
    """
    Compute the part of a page that survives trimming.

    Negative trims are used as given; callers clamp UI values.

    Args:
        media: Page media box
        trims: Per-page edge trims
        seam_top: Seam trim at the top edge (0 for the first page)
        seam_bottom: Seam trim at the bottom edge (0 for the last page)

    Returns:
        Visible rectangle with width and height floored at 0
    """
    min_x = media.min_x + trims.left
    max_x = media.max_x - trims.right
    min_y = media.min_y + trims.bottom + seam_bottom
    max_y = media.max_y - trims.top - seam_top
    return PageRect(min_x, min_y, max(0.0, max_x - min_x), max(0.0, max_y - min_y))


def seam_trims(index: int, count: int, trim_top: float, trim_bottom: float) -> tuple[float, float]:
    """Return (seam_top, seam_bottom) for the page at `index` of `count` pages."""
    seam_top = 0.0 if index == 0 else trim_top
    seam_bottom = 0.0 if index == count - 1 else trim_bottom
    return seam_top, seam_bottom


def _visible_rects(
    page_rects: Sequence[PageRect],
    per_page_trims: Mapping[int, EdgeTrims],
    trim_top: float,
    trim_bottom: float,
) -> list[PageRect]:
    count = len(page_rects)
    rects = []
    for i, media in enumerate(page_rects):
        seam_top, seam_bottom = seam_trims(i, count, trim_top, trim_bottom)
        rects.append(visible_rect(media, per_page_trims.get(i, _ZERO_TRIMS), seam_top, seam_bottom))
    return rects


def canvas_size(
    page_rects: Sequence[PageRect],
    per_page_trims: Mapping[int, EdgeTrims],
    trim_top: float,
    trim_bottom: float,
    inter_page_gap: float,
) -> CanvasSize:
    """
    Size of the merged page.

    width = widest visible slice, height = sum of visible heights plus one
    gap per internal seam. The height is not clamped, so a large negative
    gap can make it negative.
    """
    max_width = 0.0
    total_height = 0.0
    for vis in _visible_rects(page_rects, per_page_trims, trim_top, trim_bottom):
        max_width = max(max_width, vis.width)
        total_height += vis.height
    internal_seams = max(0, len(page_rects) - 1)
    return CanvasSize(width=max_width, height=total_height + inter_page_gap * internal_seams)


def plan_layout(
    page_rects: Sequence[PageRect],
    per_page_trims: Mapping[int, EdgeTrims],
    settings: MergeSettings,
) -> LayoutPlan:
    """
    Compute the full placement plan once for rendering and field retargeting.

    Slices are stacked top to bottom in page order, left-aligned at x=0.
    A degenerate slice still consumes its height (0) and its gap but gets
    no placement.
    """
    canvas = canvas_size(
        page_rects, per_page_trims,
        settings.trim_top, settings.trim_bottom, settings.inter_page_gap,
    )
    visible = _visible_rects(page_rects, per_page_trims, settings.trim_top, settings.trim_bottom)

    placements = []
    running_top = canvas.height
    for i, (media, vis) in enumerate(zip(page_rects, visible)):
        dest_y: Optional[float] = None
        if vis.is_degenerate:
            logger.debug("Page %d: degenerate slice (%.1f x %.1f), not rendered", i + 1, vis.width, vis.height)
        else:
            dest_y = running_top - vis.height
        placements.append(SlicePlacement(page_index=i, media=media, visible=vis, dest_y=dest_y))
        running_top -= max(0.0, vis.height) + settings.inter_page_gap

    return LayoutPlan(canvas=canvas, placements=tuple(placements))


def surface_size(canvas: CanvasSize) -> CanvasSize:
    """Size of the page actually written, never below MIN_SURFACE_EXTENT."""
    return CanvasSize(
        width=max(MIN_SURFACE_EXTENT, canvas.width),
        height=max(MIN_SURFACE_EXTENT, canvas.height),
    )


def stacked_extent(page_rects: Sequence[PageRect]) -> tuple[float, float]:
    """Return (total height, max width) of the untrimmed pages."""
    total_height = sum(r.height for r in page_rects)
    max_width = max((r.width for r in page_rects), default=0.0)
    return total_height, max_width
