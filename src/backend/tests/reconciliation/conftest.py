import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work when running this folder alone.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import json

import pytest

from common.reconciliation.mapping import INTERNAL_MAPPING


@pytest.fixture
def make_row():
    def _make(row_id="row-1", *, qty=1, price="0", amount=None, desc="Item", uom="EA", part=None, mapping=INTERNAL_MAPPING):
        values = {
            mapping.quantity: qty,
            mapping.price: price,
            mapping.description: desc,
            mapping.uom: uom,
        }
        if amount is not None:
            values[mapping.amount] = amount
        if part is not None:
            values[mapping.part_number] = part
        return {"name": row_id, "values": values}

    return _make


@pytest.fixture
def make_table():
    def _make(*rows) -> str:
        return json.dumps(list(rows))

    return _make
