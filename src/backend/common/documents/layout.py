from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Sequence

from reportlab.lib.pagesizes import LETTER
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth

FONT_NORMAL = "Times-Roman"
FONT_BOLD = "Times-Bold"
FONT_SIZE_NORMAL = 11
FONT_SIZE_HEADER = 12
FONT_SIZE_TABLE = 10
FONT_SIZE_SMALL = 9
FONT_SIZE_TITLE = 20


@dataclass(frozen=True)
class PageGeometry:
    """US Letter, 0.5in top/bottom and 0.75in left/right margins (points)."""

    width: float = LETTER[0]
    height: float = LETTER[1]
    margin_top: float = 36
    margin_bottom: float = 36
    margin_left: float = 54
    margin_right: float = 54
    # Nothing is drawn below this y; a step that would cross it starts a new page.
    bottom_threshold: float = 92

    @property
    def left(self) -> float:
        return self.margin_left

    @property
    def right(self) -> float:
        return self.width - self.margin_right

    @property
    def top(self) -> float:
        return self.height - self.margin_top

    @property
    def content_width(self) -> float:
        return self.right - self.left

    @property
    def center(self) -> float:
        return self.left + self.content_width / 2

    def y_from_top(self, offset: float) -> float:
        return self.height - offset


@dataclass(frozen=True)
class LayoutCursor:
    """Top of the next thing to draw (reportlab y, origin bottom-left) and the 1-based page."""

    y: float
    page: int = 1

    def down(self, amount: float) -> "LayoutCursor":
        return replace(self, y=self.y - amount)

    def at(self, y: float) -> "LayoutCursor":
        return replace(self, y=y)


def start_cursor(geometry: PageGeometry) -> LayoutCursor:
    return LayoutCursor(y=geometry.top, page=1)


def new_page(canvas: Any, cursor: LayoutCursor, geometry: PageGeometry) -> LayoutCursor:
    canvas.showPage()
    return LayoutCursor(y=geometry.top, page=cursor.page + 1)


def ensure_space(canvas: Any, cursor: LayoutCursor, height: float, geometry: PageGeometry) -> LayoutCursor:
    if cursor.y - height < geometry.bottom_threshold:
        return new_page(canvas, cursor, geometry)
    return cursor


def text_width(text: str, font: str, size: float) -> float:
    return stringWidth(text, font, size)


def wrap_text(text: str, font: str, size: float, width: float) -> list[str]:
    if not text:
        return [""]
    return simpleSplit(text, font, size, width) or [""]


def line_height(size: float) -> float:
    return size * 1.2


def column_positions(x: float, widths: Sequence[float]) -> list[float]:
    positions = []
    for w in widths:
        positions.append(x)
        x += w
    return positions
