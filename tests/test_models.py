# tests/test_models.py
"""Tests for praxpdf.models.types"""

from pathlib import Path

import pytest

from praxpdf.models.types import (
    CanvasSize,
    DocumentMetrics,
    EdgeTrims,
    LayoutPlan,
    MergeRequest,
    MergeSettings,
    PageRect,
    PdfEntry,
    SlicePlacement,
)


class TestPageRect:
    """Tests for PageRect"""

    def test_bounds(self):
        rect = PageRect(10, 20, 100, 50)
        assert (rect.min_x, rect.min_y, rect.max_x, rect.max_y) == (10, 20, 110, 70)

    def test_from_corners_normalizes(self):
        assert PageRect.from_corners(110, 70, 10, 20) == PageRect(10, 20, 100, 50)

    def test_offset_returns_copy(self):
        rect = PageRect(0, 0, 10, 10)
        moved = rect.offset(5, -3)
        assert moved == PageRect(5, -3, 10, 10)
        assert rect == PageRect(0, 0, 10, 10)

    @pytest.mark.parametrize("width,height,expected", [
        (10, 10, False),
        (0, 10, True),
        (10, 0, True),
    ])
    def test_is_degenerate(self, width, height, expected):
        assert PageRect(0, 0, width, height).is_degenerate is expected

    def test_frozen(self):
        with pytest.raises(AttributeError):
            PageRect(0, 0, 1, 1).width = 2


class TestPlacement:
    """Tests for SlicePlacement and LayoutPlan"""

    def test_offset(self):
        placement = SlicePlacement(0, PageRect(0, 0, 100, 100), PageRect(20, 10, 80, 70), dest_y=30)
        assert placement.is_rendered
        assert placement.offset == (-20, 20)

    def test_unrendered_offset_raises(self):
        placement = SlicePlacement(1, PageRect(0, 0, 100, 100), PageRect(0, 40, 100, 0), dest_y=None)
        assert not placement.is_rendered
        with pytest.raises(ValueError):
            placement.offset

    def test_plan_lookup(self):
        placements = (
            SlicePlacement(0, PageRect(0, 0, 1, 1), PageRect(0, 0, 1, 1), 1),
            SlicePlacement(1, PageRect(0, 0, 1, 1), PageRect(0, 0, 1, 1), 0),
        )
        plan = LayoutPlan(CanvasSize(1, 2), placements)
        assert plan.page_count == 2
        assert plan.placement_for(1) is placements[1]


class TestMergeRequest:
    """Tests for MergeRequest"""

    def test_defaults(self):
        request = MergeRequest(Path("a.pdf"), Path("b.pdf"))
        assert request.settings == MergeSettings()
        assert request.page_trims == {}

    def test_trims_for_missing_page(self):
        request = MergeRequest(Path("a.pdf"), Path("b.pdf"), page_trims={2: EdgeTrims(top=5)})
        assert request.trims_for(0) == EdgeTrims.zero()
        assert request.trims_for(2).top == 5


class TestDocumentMetrics:
    """Tests for DocumentMetrics"""

    def test_inches(self):
        metrics = DocumentMetrics(page_count=2, total_height=1584, max_width=612)
        assert metrics.total_height_inches == pytest.approx(22)
        assert metrics.max_width_inches == pytest.approx(8.5)


class TestPdfEntry:
    """Tests for PdfEntry"""

    def test_file_name_and_get(self):
        entry = PdfEntry(Path("/docs/receipt.pdf"), {"Amount": "5"})
        assert entry.file_name == "receipt.pdf"
        assert entry.get("Amount") == "5"
        assert entry.get("Vendor") is None

    def test_with_fields(self):
        entry = PdfEntry(Path("r.pdf"), {"Amount": "5", "Vendor": "ACME"})
        updated = entry.with_fields({"Amount": " 6 ", "Vendor": "  ", "Date": "2024-02-01"})
        assert updated.fields == {"Amount": "6", "Date": "2024-02-01"}
        # Original untouched
        assert entry.fields == {"Amount": "5", "Vendor": "ACME"}
