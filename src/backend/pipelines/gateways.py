from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol, Sequence

from common.reconciliation.models import Record, RowUpdate
from connectors.smtp.mailer import DispatchResult


class RecordStore(Protocol):
    def fetch_record(self, record_id: str) -> Record:
        """Return the record snapshot; raise RecordNotFoundError when it has no attributes."""
        ...

    def update_record(self, record_id: str, attributes: dict[str, Any]) -> None:
        """Partial update of header attributes."""
        ...

    def update_table_rows(self, record_id: str, table_field_id: str, rows: Sequence[RowUpdate]) -> None:
        """Partial update of rows in one table field."""
        ...


class Directory(Protocol):
    def lookup_group_name(self, aql: str) -> Optional[str]:
        ...

    def lookup_object_name(self, object_type_id: str, aql: str) -> Optional[str]:
        ...

    def resolve_user_name(self, user_id: Any) -> Optional[str]:
        ...

    def resolve_user_email(self, user_id: Any) -> Optional[str]:
        ...


class Mailer(Protocol):
    @property
    def is_configured(self) -> bool:
        """False when sending would be skipped regardless of recipients."""
        ...

    def send(
        self,
        recipients: Iterable[str],
        document: bytes,
        subject: str,
        body: str,
        *,
        filename: str = "Invoice.pdf",
    ) -> DispatchResult:
        """Deliver one message with the document attached; failures are reported, not raised."""
        ...
