from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Record(BaseModel):
    id: str
    attributes: Dict[str, Any] = Field(default_factory=dict)


class LineItemRow(BaseModel):
    row_id: str
    values: Dict[str, Any] = Field(default_factory=dict)


class RowUpdate(BaseModel):
    row_id: str
    values: Dict[str, Any] = Field(default_factory=dict)


class ReconciliationResult(BaseModel):
    # None means the channel is absent or malformed: nothing to push.
    subtotal: Optional[str] = None
    rows_to_sync: List[RowUpdate] = Field(default_factory=list)
    rows: List[LineItemRow] = Field(default_factory=list)

    @property
    def needs_subtotal_update(self) -> bool:
        return self.subtotal is not None


class ChannelOutcome(BaseModel):
    channel: str
    table_field_id: str = ""
    subtotal_attribute: str
    result: ReconciliationResult
