from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class AceConfig:
    base_url: str
    token: str
    timeout_seconds: int = 30
    max_retries: int = 3


@dataclass(frozen=True)
class TableFieldIds:
    internal: str
    external: str


@dataclass(frozen=True)
class ObjectTypeIds:
    department: str = "37"
    project: str = "54"
    supplier: str = "50"
    receiving: str = "51"
    bill_to: str = "52"


def get_ace_config() -> AceConfig:
    """
    Load the record store connection settings from environment variables.

    Reads:
      ACE_API_BASE_URL, ACE_API_TOKEN (required)
      ACE_API_TIMEOUT_SECONDS, ACE_API_MAX_RETRIES (optional)
    """
    return AceConfig(
        base_url=_require_env("ACE_API_BASE_URL").rstrip("/"),
        token=_require_env("ACE_API_TOKEN"),
        timeout_seconds=_int_env("ACE_API_TIMEOUT_SECONDS", 30),
        max_retries=_int_env("ACE_API_MAX_RETRIES", 3),
    )


def get_table_field_ids() -> TableFieldIds:
    return TableFieldIds(
        internal=_require_env("TABLE_FIELD_ID_INTERNAL"),
        external=_require_env("TABLE_FIELD_ID_EXTERNAL"),
    )


def get_object_type_ids() -> ObjectTypeIds:
    defaults = ObjectTypeIds()
    return ObjectTypeIds(
        department=os.getenv("OBJECT_ID_DEPARTMENT", "").strip() or defaults.department,
        project=os.getenv("OBJECT_ID_PROJECT", "").strip() or defaults.project,
        supplier=os.getenv("OBJECT_ID_SUPPLIER", "").strip() or defaults.supplier,
        receiving=os.getenv("OBJECT_ID_RECEIVING", "").strip() or defaults.receiving,
        bill_to=os.getenv("OBJECT_ID_BILL_TO", "").strip() or defaults.bill_to,
    )


def _require_env(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ValueError(f"Missing required environment variable: {name}")
    return value


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc
