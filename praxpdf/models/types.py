"""
Core data types for PraxPDF.

All geometry is expressed in PDF space: points (1/72 inch), origin at the
bottom-left of the page, y growing upwards.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

POINTS_PER_INCH = 72.0


@dataclass(frozen=True)
class PageRect:
    """
    Axis-aligned rectangle in PDF space.

    Used both for a page's media box and for the visible region left after
    trimming. Width and height may be zero (degenerate slice).
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def is_degenerate(self) -> bool:
        """True when the rectangle has no area"""
        return self.width <= 0 or self.height <= 0

    def offset(self, dx: float, dy: float) -> "PageRect":
        """Return a copy moved by (dx, dy)"""
        return PageRect(self.x + dx, self.y + dy, self.width, self.height)

    @classmethod
    def from_corners(cls, x0: float, y0: float, x1: float, y1: float) -> "PageRect":
        """Build from min/max corners (PDF /Rect order)"""
        return cls(min(x0, x1), min(y0, y1), abs(x1 - x0), abs(y1 - y0))


@dataclass(frozen=True)
class EdgeTrims:
    """Distances (points) removed from each edge of one page before compositing"""
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    @classmethod
    def zero(cls) -> "EdgeTrims":
        return cls()


@dataclass(frozen=True)
class CanvasSize:
    """Size of the single merged page. Height is not clamped (negative gaps)."""
    width: float
    height: float


@dataclass(frozen=True)
class SlicePlacement:
    """
    Where one source page lands on the merged canvas.

    dest_y is the bottom edge of the slice in canvas coordinates, or None
    when the slice is degenerate and nothing is drawn.
    """
    page_index: int
    media: PageRect
    visible: PageRect
    dest_y: Optional[float]

    @property
    def is_rendered(self) -> bool:
        return self.dest_y is not None

    @property
    def offset(self) -> tuple[float, float]:
        """Translation from page space to canvas space (rendered slices only)"""
        if self.dest_y is None:
            raise ValueError(f"Page {self.page_index} has no placement (degenerate slice)")
        return (0.0 - self.visible.min_x, self.dest_y - self.visible.min_y)


@dataclass(frozen=True)
class LayoutPlan:
    """Canvas size plus the ordered placement of every source page"""
    canvas: CanvasSize
    placements: tuple[SlicePlacement, ...] = ()

    @property
    def page_count(self) -> int:
        return len(self.placements)

    def placement_for(self, page_index: int) -> SlicePlacement:
        return self.placements[page_index]


@dataclass(frozen=True)
class MergeSettings:
    """
    Global seam trims and gap applied to every merge.

    trim_top is not applied to the first page and trim_bottom is not applied
    to the last page. inter_page_gap may be negative.
    """
    trim_top: float = 0.0
    trim_bottom: float = 0.0
    inter_page_gap: float = 0.0


@dataclass
class MergeRequest:
    """Input to the merge compositor. Constructed per user action, consumed once."""
    source: Path
    destination: Path
    settings: MergeSettings = field(default_factory=MergeSettings)
    page_trims: dict[int, EdgeTrims] = field(default_factory=dict)

    def trims_for(self, page_index: int) -> EdgeTrims:
        return self.page_trims.get(page_index, EdgeTrims.zero())


@dataclass
class MergeResult:
    """Outcome of a successful merge"""
    destination: Path
    page_count: int
    canvas: CanvasSize
    surface: CanvasSize
    placed_fields: int = 0
    dropped_fields: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FieldEntry:
    """One named form field on a page"""
    field_name: str
    current_value: Optional[str]
    page_index: int
    bounds: PageRect


@dataclass(frozen=True)
class FieldSnapshot:
    """
    Immutable copy of a widget taken from the source before rendering.

    Holds everything needed to rebuild the widget on another page.
    Bounds are in the source page's PDF space.
    """
    page_index: int
    field_name: str
    field_type: int
    value: Optional[str]
    bounds: PageRect
    field_flags: int = 0
    field_label: Optional[str] = None
    text_font: str = "Helv"
    text_fontsize: float = 0
    text_color: Optional[tuple] = None
    border_color: Optional[tuple] = None
    fill_color: Optional[tuple] = None
    border_width: float = 0
    choice_values: Optional[tuple] = None
    button_caption: Optional[str] = None


@dataclass
class DocumentMetrics:
    """Page metrics surfaced to the caller"""
    page_count: int = 0
    total_height: float = 0.0       # sum of media box heights (points)
    max_width: float = 0.0          # widest media box (points)
    unknown_field_names: list[str] = field(default_factory=list)

    @property
    def total_height_inches(self) -> float:
        return self.total_height / POINTS_PER_INCH

    @property
    def max_width_inches(self) -> float:
        return self.max_width / POINTS_PER_INCH


@dataclass
class PdfEntry:
    """
    A PDF selected by the user with its recognized field values.
    Fields without a value are absent from `fields`.
    """
    path: Path
    fields: dict[str, str] = field(default_factory=dict)

    @property
    def file_name(self) -> str:
        return self.path.name

    def get(self, field_name: str) -> Optional[str]:
        return self.fields.get(field_name)

    def with_fields(self, updates: dict[str, str]) -> "PdfEntry":
        """Return a copy reflecting saved edits (empty values are removed)"""
        merged = dict(self.fields)
        for name, value in updates.items():
            value = value.strip()
            if value:
                merged[name] = value
            else:
                merged.pop(name, None)
        return PdfEntry(path=self.path, fields=merged)
