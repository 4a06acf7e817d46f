"""Line-item reconciliation for purchase-order records.

Pure domain logic: inputs are serialized tables + channel field mappings.
No HTTP calls live here.
"""

from .mapping import EXTERNAL_CHANNEL, INTERNAL_CHANNEL, ChannelConfig, FieldMapping, default_channels
from .models import ChannelOutcome, LineItemRow, ReconciliationResult, Record, RowUpdate
from .reconciler import parse_table_rows, reconcile

__all__ = [
    "EXTERNAL_CHANNEL",
    "INTERNAL_CHANNEL",
    "ChannelConfig",
    "ChannelOutcome",
    "FieldMapping",
    "LineItemRow",
    "ReconciliationResult",
    "Record",
    "RowUpdate",
    "default_channels",
    "parse_table_rows",
    "reconcile",
]
