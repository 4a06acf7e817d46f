from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any, Optional

from .amounts import ZERO, fits_cents, format_amount, is_blank, parse_amount
from .mapping import FieldMapping
from .models import LineItemRow, ReconciliationResult, RowUpdate

logger = logging.getLogger(__name__)

ROW_ID_KEYS = ("name", "rowId", "id")


def parse_table_rows(table_raw: Any) -> Optional[list[LineItemRow]]:
    """
    Decode a serialized line-item table.

    Accepts the JSON text stored on the record or an already-decoded list.
    Returns None when the value is not a JSON list; rows that are not objects
    are skipped, and a row without a "values" object gets empty values.
    """
    if isinstance(table_raw, (str, bytes, bytearray)):
        try:
            decoded = json.loads(table_raw)
        except ValueError:
            logger.warning("Line-item table is not valid JSON; treating channel as absent.")
            return None
    else:
        decoded = table_raw

    if not isinstance(decoded, list):
        return None

    rows: list[LineItemRow] = []
    for raw in decoded:
        if not isinstance(raw, dict):
            continue
        values = raw.get("values")
        rows.append(
            LineItemRow(
                row_id=_row_id(raw),
                values=dict(values) if isinstance(values, dict) else {},
            )
        )
    return rows


def reconcile(table_raw: Any, mapping: FieldMapping) -> ReconciliationResult:
    """
    Recompute row amounts and the channel subtotal for one line-item table.

    - amount = quantity * price, rounded half-up to cents
    - subtotal = the unrounded amounts summed, rounded once at the end
    - a row is emitted for sync only when its recomputed amount differs
      from the stored one at cent precision
    """
    rows = parse_table_rows(table_raw)
    if not rows:
        return ReconciliationResult()

    subtotal = ZERO
    displayed_total = ZERO
    recomputed: list[LineItemRow] = []
    rows_to_sync: list[RowUpdate] = []

    for row in rows:
        values = row.values
        raw_amount = parse_amount(values.get(mapping.quantity)) * parse_amount(values.get(mapping.price))
        if not fits_cents(raw_amount):
            raw_amount = ZERO
        subtotal += raw_amount

        amount = format_amount(raw_amount)
        displayed_total += Decimal(amount)
        stored = format_amount(parse_amount(values.get(mapping.amount)))
        recomputed.append(
            LineItemRow(row_id=row.row_id, values={**values, mapping.amount: amount})
        )

        if amount == stored:
            continue
        if not row.row_id:
            logger.warning("Row without an id needs amount %s (stored %s); cannot sync it.", amount, stored)
            continue
        rows_to_sync.append(RowUpdate(row_id=row.row_id, values=_row_update_values(values, mapping, amount)))

    subtotal_text = format_amount(subtotal)
    if subtotal_text != format_amount(displayed_total):
        logger.info(
            "Subtotal %s differs from the sum of displayed row amounts %s.",
            subtotal_text,
            format_amount(displayed_total),
        )

    return ReconciliationResult(
        subtotal=subtotal_text,
        rows_to_sync=rows_to_sync,
        rows=recomputed,
    )


def _row_update_values(values: dict[str, Any], mapping: FieldMapping, amount: str) -> dict[str, Any]:
    # The table endpoint rejects rows missing required columns, and rejects an
    # explicitly empty part number.
    update: dict[str, Any] = {
        mapping.amount: amount,
        mapping.quantity: _required(values, mapping.quantity),
        mapping.price: _required(values, mapping.price),
        mapping.description: _required(values, mapping.description),
        mapping.uom: _required(values, mapping.uom),
    }
    part_number = values.get(mapping.part_number)
    if not is_blank(part_number):
        update[mapping.part_number] = part_number
    return update


def _required(values: dict[str, Any], key: str) -> Any:
    value = values.get(key)
    return "" if value is None else value


def _row_id(raw: dict[str, Any]) -> str:
    for key in ROW_ID_KEYS:
        value = raw.get(key)
        if value not in (None, ""):
            return str(value)
    return ""

