import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work when running this folder alone.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from decimal import Decimal

import pytest

from common.documents.models import (
    AddressBlock,
    DocumentLineItem,
    DocumentModel,
    DocumentTemplate,
    HeaderField,
    TotalsLine,
)


@pytest.fixture
def make_line_items():
    def _make(count: int = 3, *, description: str = "Nitrile gloves, powder free") -> list[DocumentLineItem]:
        return [
            DocumentLineItem(
                description=f"{description} #{idx}",
                part_number=f"PN-{idx:03d}",
                quantity="2",
                uom="BX",
                price=Decimal("12.50"),
                amount=Decimal("25.00"),
            )
            for idx in range(1, count + 1)
        ]

    return _make


@pytest.fixture
def make_document_model(make_line_items):
    def _make(
        template: DocumentTemplate = DocumentTemplate.EXTERNAL_PO,
        *,
        items: int = 3,
        project: str | None = None,
    ) -> DocumentModel:
        return DocumentModel(
            template=template,
            number="PO-1001",
            header_fields=[
                HeaderField(label="Purchase Order No:", value="PO-1001", emphasized=True),
                HeaderField(label="Quote No:", value="Q-77"),
                HeaderField(label="Payment Terms:", value=""),
            ],
            address_rows=[
                [AddressBlock(label="SUPPLIER:", lines=["Acme Labs", "1 Main St", "Austin TX 78701", "USA"])],
                [
                    AddressBlock(label="SHIP TO:", lines=["BioTechnique", "", "", ""]),
                    AddressBlock(label="BILL TO:", lines=["BioTechnique LLC", "700 Corporate Center", "", ""]),
                ],
            ],
            project=project,
            line_items=make_line_items(items),
            totals=[
                TotalsLine(label="Sub-Total:", amount=Decimal("75.00")),
                TotalsLine(label="Discount:", amount=Decimal("5.00"), is_discount=True),
                TotalsLine(label="Total (USD):", amount=Decimal("70.00"), emphasized=True),
            ],
        )

    return _make
