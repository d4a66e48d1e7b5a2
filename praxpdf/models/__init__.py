"""
Data models for PraxPDF.
"""

from .types import (
    POINTS_PER_INCH,
    PageRect,
    EdgeTrims,
    CanvasSize,
    SlicePlacement,
    LayoutPlan,
    MergeSettings,
    MergeRequest,
    MergeResult,
    FieldEntry,
    FieldSnapshot,
    DocumentMetrics,
    PdfEntry,
)

__all__ = [
    'POINTS_PER_INCH',
    'PageRect',
    'EdgeTrims',
    'CanvasSize',
    'SlicePlacement',
    'LayoutPlan',
    'MergeSettings',
    'MergeRequest',
    'MergeResult',
    'FieldEntry',
    'FieldSnapshot',
    'DocumentMetrics',
    'PdfEntry',
]
