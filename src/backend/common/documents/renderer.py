from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Any, Sequence

from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas

from .company import DEFAULT_COMPANY, CompanyProfile
from .formatting import format_currency
from .layout import (
    FONT_BOLD,
    FONT_NORMAL,
    FONT_SIZE_HEADER,
    FONT_SIZE_NORMAL,
    FONT_SIZE_SMALL,
    FONT_SIZE_TABLE,
    FONT_SIZE_TITLE,
    LayoutCursor,
    PageGeometry,
    column_positions,
    ensure_space,
    line_height,
    new_page,
    start_cursor,
    text_width,
    wrap_text,
)
from .models import AddressBlock, DocumentLineItem, DocumentModel, HeaderField, TotalsLine

logger = logging.getLogger(__name__)

LOGO_WIDTH = 140

HEADER_LABEL_RIGHT = 450
HEADER_VALUE_X = 455
HEADER_LINE_STEP = 15

ADDRESS_TOP_OFFSET = 155
ADDRESS_LINE_STEP = 13
ADDRESS_BAND_GAP = 20
ADDRESS_MIN_CONTENT_OFFSET = 60

# (header, share of content width, alignment)
TABLE_COLUMNS: tuple[tuple[str, float, str], ...] = (
    ("Item Description", 0.40, "left"),
    ("Part Number", 0.15, "left"),
    ("Qty", 0.10, "right"),
    ("UOM", 0.10, "left"),
    ("Price", 0.125, "right"),
    ("Amount", 0.125, "right"),
)
CELL_PADDING = 4

TOTALS_VALUE_WIDTH = 80
TOTALS_LABEL_GAP = 10
TOTALS_GRAND_SIZE = 14
TOTALS_BLOCK_HEIGHT = 150

CLOSING_TERMS_GAP = 40
CLOSING_TERMS_SIZE = 10
REMITTANCE_LINE_STEP = 10


class DocumentRenderer:
    """
    Render a DocumentModel into PDF bytes.

    All drawing happens in module-level steps that take the canvas and a
    LayoutCursor and return the advanced cursor. The canvas runs in
    reportlab's invariant mode, so equal models give byte-identical output.
    """

    def __init__(
        self,
        *,
        logo_path: str | Path | None = "logo.png",
        company: CompanyProfile = DEFAULT_COMPANY,
        geometry: PageGeometry | None = None,
    ) -> None:
        self.logo_path = logo_path
        self.company = company
        self.geometry = geometry or PageGeometry()

    def render(self, model: DocumentModel) -> bytes:
        buffer = BytesIO()
        canvas = Canvas(
            buffer,
            pagesize=(self.geometry.width, self.geometry.height),
            invariant=1,
        )
        canvas.setTitle(model.number)
        canvas.setAuthor(self.company.name)
        self.draw(canvas, model)
        canvas.save()
        return buffer.getvalue()

    def draw(self, canvas: Any, model: DocumentModel) -> LayoutCursor:
        g = self.geometry
        cursor = start_cursor(g)

        draw_logo(canvas, g, self.logo_path, self.company.name)
        draw_header_fields(canvas, cursor.down(5), model.header_fields)

        cursor = cursor.at(g.y_from_top(ADDRESS_TOP_OFFSET))
        for band in model.address_rows:
            cursor = draw_address_band(canvas, cursor, band, g)
        if model.project is not None:
            cursor = draw_project_line(canvas, cursor, model.project, g)

        cursor = draw_line_items(canvas, cursor.down(10), model.table_title, model.line_items, g)
        cursor = draw_totals(canvas, cursor.down(FONT_SIZE_NORMAL), model.totals, g)

        if model.template.is_purchase_order:
            return draw_closing_terms(canvas, cursor, self.company.closing_terms, g)
        return draw_remittance_footer(canvas, cursor, self.company, g)


def draw_logo(canvas: Any, geometry: PageGeometry, logo_path: str | Path | None, title: str) -> bool:
    """Draw the logo at the top-left corner; a bold title replaces it when the image cannot be loaded."""
    if logo_path:
        try:
            image = ImageReader(str(logo_path))
            img_w, img_h = image.getSize()
            height = LOGO_WIDTH * img_h / img_w
            canvas.drawImage(
                image,
                geometry.left,
                geometry.top - height,
                width=LOGO_WIDTH,
                height=height,
                mask="auto",
            )
            return True
        except (OSError, ValueError) as exc:
            logger.warning("Logo %s could not be loaded (%s); drawing title text instead.", logo_path, exc)

    canvas.setFont(FONT_BOLD, FONT_SIZE_TITLE)
    canvas.drawString(geometry.left, geometry.top - FONT_SIZE_TITLE, title)
    return False


def draw_label_value(
    canvas: Any,
    baseline: float,
    label: str,
    value: str,
    *,
    label_right: float,
    value_x: float,
    label_font: str = FONT_BOLD,
    value_font: str = FONT_NORMAL,
    size: float = FONT_SIZE_NORMAL,
) -> None:
    canvas.setFont(label_font, size)
    canvas.drawRightString(label_right, baseline, label)
    canvas.setFont(value_font, size)
    canvas.drawString(value_x, baseline, value)


def draw_header_fields(canvas: Any, cursor: LayoutCursor, fields: Sequence[HeaderField]) -> LayoutCursor:
    for field in fields:
        draw_label_value(
            canvas,
            cursor.y - FONT_SIZE_NORMAL,
            field.label,
            field.value or "N/A",
            label_right=HEADER_LABEL_RIGHT,
            value_x=HEADER_VALUE_X,
            value_font=FONT_BOLD if field.emphasized else FONT_NORMAL,
        )
        cursor = cursor.down(HEADER_LINE_STEP)
    return cursor


def draw_address_band(
    canvas: Any,
    cursor: LayoutCursor,
    blocks: Sequence[AddressBlock],
    geometry: PageGeometry,
) -> LayoutCursor:
    if not blocks:
        return cursor

    column_width = geometry.content_width / len(blocks)
    laid_out: list[tuple[AddressBlock, float, list[str]]] = []
    for block in blocks:
        offset = max(ADDRESS_MIN_CONTENT_OFFSET, text_width(block.label, FONT_BOLD, FONT_SIZE_NORMAL) + 12)
        available = column_width - 10 - offset
        lines: list[str] = []
        for line in block.lines:
            if line.strip():
                lines.extend(wrap_text(line.strip(), FONT_NORMAL, FONT_SIZE_NORMAL, available))
        laid_out.append((block, offset, lines))

    tallest = max(max(len(lines), 1) for _, _, lines in laid_out)
    band_height = tallest * ADDRESS_LINE_STEP + ADDRESS_BAND_GAP
    cursor = ensure_space(canvas, cursor, band_height, geometry)

    baseline = cursor.y - FONT_SIZE_NORMAL
    for idx, (block, offset, lines) in enumerate(laid_out):
        x = geometry.left + idx * column_width + 10
        canvas.setFont(FONT_BOLD, FONT_SIZE_NORMAL)
        canvas.drawString(x, baseline, block.label)
        canvas.setFont(FONT_NORMAL, FONT_SIZE_NORMAL)
        for line_no, line in enumerate(lines):
            canvas.drawString(x + offset, baseline - line_no * ADDRESS_LINE_STEP, line)

    return cursor.down(band_height)


def draw_project_line(canvas: Any, cursor: LayoutCursor, project: str, geometry: PageGeometry) -> LayoutCursor:
    cursor = ensure_space(canvas, cursor, line_height(FONT_SIZE_NORMAL), geometry)
    baseline = cursor.y - FONT_SIZE_NORMAL
    canvas.setFont(FONT_BOLD, FONT_SIZE_NORMAL)
    canvas.drawString(geometry.left, baseline, "Project:")
    canvas.setFont(FONT_NORMAL, FONT_SIZE_NORMAL)
    canvas.drawString(geometry.left + 50, baseline, project or "N/A")
    return cursor.down(line_height(FONT_SIZE_NORMAL))


def line_item_cells(item: DocumentLineItem) -> list[str]:
    return [
        item.description,
        item.part_number,
        item.quantity or "0",
        item.uom,
        format_currency(item.price),
        format_currency(item.amount),
    ]


def table_column_widths(geometry: PageGeometry) -> list[float]:
    return [geometry.content_width * share for _, share, _ in TABLE_COLUMNS]


def draw_line_items(
    canvas: Any,
    cursor: LayoutCursor,
    title: str,
    items: Sequence[DocumentLineItem],
    geometry: PageGeometry,
) -> LayoutCursor:
    """
    Title, header row, then one row per item.

    When the next row would cross the bottom threshold a new page is started
    and the header row is drawn again before the row.
    """
    widths = table_column_widths(geometry)
    xs = column_positions(geometry.left, widths)
    aligns = [align for _, _, align in TABLE_COLUMNS]

    header_cells = _wrap_cells([name for name, _, _ in TABLE_COLUMNS], widths, FONT_BOLD)
    body = [_wrap_cells(line_item_cells(item), widths, FONT_NORMAL) for item in items]

    title_height = line_height(FONT_SIZE_HEADER) + 4
    first_row = _row_height(body[0]) if body else 0
    cursor = ensure_space(canvas, cursor, title_height + _row_height(header_cells) + first_row, geometry)

    canvas.setFont(FONT_BOLD, FONT_SIZE_HEADER)
    canvas.drawString(geometry.left, cursor.y - FONT_SIZE_HEADER, title)
    cursor = cursor.down(title_height)
    cursor = _draw_row(canvas, cursor, header_cells, xs, widths, aligns, FONT_BOLD, rule_width=1)

    for cells in body:
        if cursor.y - _row_height(cells) < geometry.bottom_threshold:
            cursor = new_page(canvas, cursor, geometry)
            cursor = _draw_row(canvas, cursor, header_cells, xs, widths, aligns, FONT_BOLD, rule_width=1)
        cursor = _draw_row(canvas, cursor, cells, xs, widths, aligns, FONT_NORMAL, rule_width=0.25)
    return cursor


def _wrap_cells(cells: Sequence[str], widths: Sequence[float], font: str) -> list[list[str]]:
    return [
        wrap_text(text, font, FONT_SIZE_TABLE, width - 2 * CELL_PADDING)
        for text, width in zip(cells, widths)
    ]


def _row_height(cells: Sequence[Sequence[str]]) -> float:
    tallest = max((len(lines) for lines in cells), default=1)
    return tallest * line_height(FONT_SIZE_TABLE) + 2 * CELL_PADDING


def _draw_row(
    canvas: Any,
    cursor: LayoutCursor,
    cells: Sequence[Sequence[str]],
    xs: Sequence[float],
    widths: Sequence[float],
    aligns: Sequence[str],
    font: str,
    *,
    rule_width: float,
) -> LayoutCursor:
    height = _row_height(cells)
    step = line_height(FONT_SIZE_TABLE)
    canvas.setFont(font, FONT_SIZE_TABLE)
    for lines, x, width, align in zip(cells, xs, widths, aligns):
        baseline = cursor.y - CELL_PADDING - FONT_SIZE_TABLE
        for line in lines:
            if align == "right":
                canvas.drawRightString(x + width - CELL_PADDING, baseline, line)
            else:
                canvas.drawString(x + CELL_PADDING, baseline, line)
            baseline -= step

    bottom = cursor.y - height
    canvas.setLineWidth(rule_width)
    canvas.line(xs[0], bottom, xs[-1] + widths[-1], bottom)
    return cursor.down(height)


def draw_totals(
    canvas: Any,
    cursor: LayoutCursor,
    totals: Sequence[TotalsLine],
    geometry: PageGeometry,
) -> LayoutCursor:
    if not totals:
        return cursor
    cursor = ensure_space(canvas, cursor, TOTALS_BLOCK_HEIGHT, geometry)

    value_x = geometry.right - TOTALS_VALUE_WIDTH
    label_right = value_x - TOTALS_LABEL_GAP
    for line in totals:
        if line.emphasized:
            font, size = FONT_BOLD, TOTALS_GRAND_SIZE
            cursor = cursor.down(line_height(FONT_SIZE_NORMAL) / 2)
        else:
            font, size = FONT_NORMAL, FONT_SIZE_NORMAL
        draw_label_value(
            canvas,
            cursor.y - size,
            line.label,
            format_currency(line.amount, is_discount=line.is_discount),
            label_right=label_right,
            value_x=value_x,
            label_font=font,
            value_font=font,
            size=size,
        )
        cursor = cursor.down(line_height(size))
    return cursor


def draw_centered_lines(
    canvas: Any,
    cursor: LayoutCursor,
    lines: Sequence[str],
    font: str,
    size: float,
    geometry: PageGeometry,
    *,
    color: Any = None,
) -> LayoutCursor:
    wrapped: list[str] = []
    for line in lines:
        wrapped.extend(wrap_text(line, font, size, geometry.content_width))
    step = line_height(size)
    cursor = ensure_space(canvas, cursor, step * len(wrapped), geometry)

    if color is not None:
        canvas.setFillColor(color)
    canvas.setFont(font, size)
    for line in wrapped:
        if line:
            canvas.drawCentredString(geometry.center, cursor.y - size, line)
        cursor = cursor.down(step)
    if color is not None:
        canvas.setFillColor(colors.black)
    return cursor


def draw_closing_terms(
    canvas: Any,
    cursor: LayoutCursor,
    terms: Sequence[str],
    geometry: PageGeometry,
) -> LayoutCursor:
    cursor = cursor.down(CLOSING_TERMS_GAP)
    wrapped: list[str] = []
    for term in terms:
        wrapped.extend(wrap_text(term, FONT_NORMAL, CLOSING_TERMS_SIZE, geometry.content_width))
    cursor = ensure_space(canvas, cursor, 20 + len(wrapped) * line_height(CLOSING_TERMS_SIZE), geometry)

    canvas.setLineWidth(1)
    canvas.line(geometry.left, cursor.y, geometry.right, cursor.y)
    return draw_centered_lines(canvas, cursor.down(20), wrapped, FONT_NORMAL, CLOSING_TERMS_SIZE, geometry)


def draw_remittance_footer(
    canvas: Any,
    cursor: LayoutCursor,
    company: CompanyProfile,
    geometry: PageGeometry,
) -> LayoutCursor:
    size = FONT_SIZE_SMALL
    step = line_height(size)

    cursor = draw_centered_lines(canvas, cursor.down(step * 1.5), company.thank_you_lines, FONT_NORMAL, size, geometry)
    cursor = draw_centered_lines(
        canvas,
        cursor.down(step / 2),
        [f"Preferred method of payment: {company.preferred_payment_method}"],
        FONT_NORMAL,
        size,
        geometry,
        color=colors.red,
    )
    cursor = draw_centered_lines(
        canvas,
        cursor.down(step / 2),
        ["BANK INFORMATION FOR ACH OR WIRE TRANSFER PAYMENTS"],
        FONT_BOLD,
        size,
        geometry,
        color=colors.red,
    )

    label_right = geometry.center - 10
    value_x = geometry.center + 10
    cursor = cursor.down(3)
    for label, value in company.bank_details:
        cursor = ensure_space(canvas, cursor, step, geometry)
        draw_label_value(
            canvas,
            cursor.y - size,
            label,
            value,
            label_right=label_right,
            value_x=value_x,
            label_font=FONT_NORMAL,
            value_font=FONT_BOLD,
            size=size,
        )
        cursor = cursor.down(step + 1)

    cursor = cursor.down(step / 2)
    cursor = ensure_space(canvas, cursor, len(company.remittance_address) * REMITTANCE_LINE_STEP + step, geometry)
    canvas.setFillColor(colors.blue)
    canvas.setFont(FONT_BOLD, size)
    canvas.drawRightString(label_right, cursor.y - size, "HQ REMITTANCE ADDRESS FOR CHECK PAYMENTS")
    canvas.setFillColor(colors.black)
    for idx, line in enumerate(company.remittance_address):
        canvas.setFont(FONT_BOLD if idx == 0 else FONT_NORMAL, size)
        canvas.drawString(value_x, cursor.y - size, line)
        cursor = cursor.down(REMITTANCE_LINE_STEP)
    return cursor.down(25)
