"""Record store + directory connector (HTTP lives here; reconciliation lives in common/reconciliation)."""

from .client import AceHttpError
from .config import AceConfig, get_ace_config, get_object_type_ids, get_table_field_ids
from .directory import AceDirectory
from .records import AceRecordStore, RecordNotFoundError

__all__ = [
    "AceConfig",
    "AceDirectory",
    "AceHttpError",
    "AceRecordStore",
    "RecordNotFoundError",
    "get_ace_config",
    "get_object_type_ids",
    "get_table_field_ids",
]
