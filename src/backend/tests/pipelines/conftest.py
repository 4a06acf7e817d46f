import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work when running this folder alone.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import json

import pytest

from common.reconciliation.models import Record
from connectors.ace.client import AceHttpError
from connectors.ace.records import RecordNotFoundError
from connectors.smtp.mailer import DispatchResult


class InMemoryRecordStore:
    """Record store fake that applies updates to its stored copy, like the remote side."""

    TABLE_ATTRIBUTES = {"77": "cf_items_btpo", "88": "cf_items_btpo_api2"}

    def __init__(self, records=None):
        self.records = {rid: dict(attrs) for rid, attrs in (records or {}).items()}
        self.calls = []
        self.fail_on = None

    def fetch_record(self, record_id):
        self.calls.append(("fetch", record_id))
        if self.fail_on == "fetch":
            raise AceHttpError(500, "boom")
        attrs = self.records.get(record_id)
        if not attrs:
            raise RecordNotFoundError(record_id)
        return Record(id=record_id, attributes=dict(attrs))

    def update_record(self, record_id, attributes):
        self.calls.append(("update_record", record_id, dict(attributes)))
        if self.fail_on == "update_record":
            raise AceHttpError(502, "bad gateway")
        self.records[record_id].update(attributes)

    def update_table_rows(self, record_id, table_field_id, rows):
        self.calls.append(("update_table_rows", record_id, table_field_id, [r.row_id for r in rows]))
        if self.fail_on == "update_table_rows":
            raise AceHttpError(500, "boom")
        attrs = self.records[record_id]
        key = self.TABLE_ATTRIBUTES[table_field_id]
        updates = {update.row_id: update.values for update in rows}
        table = json.loads(attrs[key])
        for row in table:
            row["values"].update(updates.get(row["name"], {}))
        attrs[key] = json.dumps(table)


class FakeDirectory:
    def __init__(self, *, groups=None, objects=None, users=None, emails=None):
        self.groups = groups or {}
        self.objects = objects or {}
        self.users = users or {}
        self.emails = emails or {}
        self.queries = []

    def lookup_group_name(self, aql):
        self.queries.append(("group", aql))
        return self.groups.get(aql.rsplit(" ", 1)[-1])

    def lookup_object_name(self, object_type_id, aql):
        self.queries.append((object_type_id, aql))
        return self.objects.get((object_type_id, aql.rsplit(" ", 1)[-1]))

    def resolve_user_name(self, user_id):
        return self.users.get(str(user_id))

    def resolve_user_email(self, user_id):
        self.queries.append(("email", user_id))
        return self.emails.get(str(user_id))


class FakeMailer:
    def __init__(self, result=None, *, is_configured=True):
        self.sent = []
        self.result = result
        self.is_configured = is_configured

    def send(self, recipients, document, subject, body, *, filename="Invoice.pdf"):
        recipients = tuple(recipients)
        self.sent.append({"recipients": recipients, "document": document, "subject": subject, "body": body, "filename": filename})
        return self.result or DispatchResult(sent=True, message_id="<1@test>", recipients=recipients)


@pytest.fixture
def make_table():
    def _make(*rows, suffix="int", amount_key="cf_dollar_amount_internal") -> str:
        return json.dumps(
            [
                {
                    "name": row_id,
                    "values": {
                        f"cf_order_qty_{suffix}": qty,
                        f"cf_price_per_unit_{suffix}": price,
                        amount_key: amount,
                        f"cf_item_desc_{suffix}": f"Item {row_id}",
                        f"cf_uom_{suffix}": "EA",
                        f"cf_item_part_num_{suffix}": "",
                    },
                }
                for row_id, qty, price, amount in rows
            ]
        )

    return _make


@pytest.fixture
def make_store():
    def _make(records) -> InMemoryRecordStore:
        return InMemoryRecordStore(records)

    return _make


@pytest.fixture
def make_directory():
    def _make(**kwargs) -> FakeDirectory:
        return FakeDirectory(**kwargs)

    return _make


@pytest.fixture
def make_mailer():
    def _make(result=None, *, is_configured=True) -> FakeMailer:
        return FakeMailer(result, is_configured=is_configured)

    return _make
