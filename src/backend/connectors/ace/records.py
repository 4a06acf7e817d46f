from __future__ import annotations

import logging
from typing import Any, Sequence
from urllib.parse import quote

from common.reconciliation.models import Record, RowUpdate

from .client import AceHttpError, ace_request
from .config import AceConfig

logger = logging.getLogger(__name__)


class RecordNotFoundError(AceHttpError):
    def __init__(self, record_id: str):
        super().__init__(404, f"No data found for record {record_id}")
        self.record_id = record_id


def fetch_record(config: AceConfig, record_id: str) -> Record:
    logger.info("Fetching record %s", record_id)
    payload = ace_request(config, "GET", f"/records/{_segment(record_id)}/meta")
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict) or not isinstance(data.get("attributes"), dict):
        raise RecordNotFoundError(record_id)
    return Record(id=str(data.get("id") or record_id), attributes=data["attributes"])


def update_record(config: AceConfig, record_id: str, attributes: dict[str, Any]) -> None:
    logger.info("Updating record %s attributes %s", record_id, sorted(attributes))
    ace_request(
        config,
        "PATCH",
        f"/records/{_segment(record_id)}",
        body={"data": {"type": "records", "attributes": attributes}},
    )


def update_table_rows(
    config: AceConfig,
    record_id: str,
    table_field_id: str,
    rows: Sequence[RowUpdate],
) -> None:
    logger.info("Updating %d row(s) of table %s on record %s", len(rows), table_field_id, record_id)
    ace_request(
        config,
        "PATCH",
        f"/records/{_segment(record_id)}/table/{_segment(table_field_id)}",
        body={"data": table_rows_payload(rows)},
    )


def table_rows_payload(rows: Sequence[RowUpdate]) -> list[dict[str, Any]]:
    return [
        {"type": "record-table-row", "attributes": {"name": row.row_id, **row.values}}
        for row in rows
    ]


class AceRecordStore:
    """Record store gateway bound to one connection config."""

    def __init__(self, config: AceConfig) -> None:
        self._config = config

    def fetch_record(self, record_id: str) -> Record:
        return fetch_record(self._config, record_id)

    def update_record(self, record_id: str, attributes: dict[str, Any]) -> None:
        update_record(self._config, record_id, attributes)

    def update_table_rows(self, record_id: str, table_field_id: str, rows: Sequence[RowUpdate]) -> None:
        update_table_rows(self._config, record_id, table_field_id, rows)


def _segment(value: str) -> str:
    return quote(str(value), safe="")
