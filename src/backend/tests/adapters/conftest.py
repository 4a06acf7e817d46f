import json
import os
import sys

import pytest


# Ensure `src/backend` is on sys.path so imports like `import adapters...` work when running this folder alone.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)


@pytest.fixture
def make_table():
    def _make(suffix: str, amount_key: str) -> str:
        return json.dumps(
            [
                {
                    "name": "r1",
                    "values": {
                        f"cf_item_desc_{suffix}": "Centrifuge tubes",
                        f"cf_item_part_num_{suffix}": "CT-50",
                        f"cf_order_qty_{suffix}": 2,
                        f"cf_uom_{suffix}": "CS",
                        f"cf_price_per_unit_{suffix}": "49.99",
                        amount_key: "99.98",
                    },
                }
            ]
        )

    return _make
