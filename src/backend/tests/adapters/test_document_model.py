from decimal import Decimal

import pytest

from adapters.records.document_model import (
    DocumentModelError,
    build_document_model,
    select_template,
)
from common.documents.models import DocumentTemplate
from common.reconciliation.models import Record


@pytest.fixture
def record(make_table) -> Record:
    return Record(
        id="42",
        attributes={
            "pkey": "BT-9",
            "cf_po_type": "Internal",
            "cf_quote_number": "Q-1",
            "cf_supplier_company_nam": "Acme Labs",
            "cf_supplier_city": "Austin",
            "cf_supplier_state": "TX",
            "cf_supplier_zip": "78701",
            "cf_items_btpo": make_table("int", "cf_dollar_amount_internal"),
            "cf_items_btpo_api2": make_table("ext", "cf_dollar_amount_external"),
            "cf_subtotal_n": "99.98",
            "cf_discount_int": "5",
            "cf_total_ca": "94.98",
            "cf_subtotal_external": "99.98",
            "cf_total_btpo": "99.98",
            "cf_additional_handling_ext": "10",
            "cf_total_w_handlingfe": "109.98",
            "cf_client": "Genomix",
            "cf_date_client_invoice": "2026-01-09",
            "cf_project_psc": "Assay validation",
        },
    )


def test_template_selection():
    assert select_template({}, "invoice") == DocumentTemplate.CLIENT_INVOICE
    assert select_template({"cf_po_type": "Internal"}, "po") == DocumentTemplate.INTERNAL_PO
    assert select_template({"cf_po_type": "External"}, "PO") == DocumentTemplate.EXTERNAL_PO
    assert select_template({}, "po") == DocumentTemplate.EXTERNAL_PO
    with pytest.raises(DocumentModelError):
        select_template({}, "receipt")


def test_internal_purchase_order(record):
    model = build_document_model(record, DocumentTemplate.INTERNAL_PO)

    assert model.number == "BT-9"
    assert [(f.label, f.value, f.emphasized) for f in model.header_fields] == [
        ("Purchase Order No:", "BT-9", True),
        ("Quote No:", "Q-1", False),
        ("Payment Terms:", "N/A", False),
    ]
    supplier = model.address_rows[0][0]
    assert supplier.label == "SUPPLIER:"
    assert supplier.lines[:3] == ["Acme Labs", "", "Austin TX 78701"]
    ship_to, bill_to = model.address_rows[1]
    assert ship_to.lines[0] == "BioTechnique"
    assert bill_to.lines[0] == "BioTechnique LLC"
    assert model.project is None

    item = model.line_items[0]
    assert (item.description, item.part_number, item.quantity, item.uom) == ("Centrifuge tubes", "CT-50", "2", "CS")
    assert item.price == Decimal("49.99")

    totals = {line.label: line for line in model.totals}
    assert totals["Sub-Total:"].amount == Decimal("99.98")
    assert totals["Discount:"].is_discount is True
    assert totals["Total (USD):"].emphasized is True
    assert totals["Total (USD):"].amount == Decimal("94.98")
    assert totals["Sales Tax:"].amount is None


def test_external_purchase_order_uses_external_fields(record):
    model = build_document_model(record, DocumentTemplate.EXTERNAL_PO)

    assert model.totals[-1].label == "Total (USD):"
    assert model.totals[-1].amount == Decimal("99.98")
    assert "Handling Fee:" not in [line.label for line in model.totals]


def test_client_invoice(record):
    model = build_document_model(record, DocumentTemplate.CLIENT_INVOICE)

    assert model.number == "BT-9-INV"
    assert model.header_fields[0].value == "BT-9-INV"
    assert model.header_fields[1].value == "09 Jan 2026"
    assert [block.label for block in model.address_rows[0]] == ["INVOICE TO:", "SHIP TO:"]
    assert model.address_rows[0][0].lines[0] == "Genomix"
    assert model.project == "Assay validation"
    assert [line.label for line in model.totals] == [
        "Order Total:",
        "Sales Tax:",
        "Shipping & Handling:",
        "Other:",
        "Discount:",
        "Handling Fee:",
        "Invoice Total (USD):",
    ]
    assert model.totals[-1].amount == Decimal("109.98")


def test_record_without_pkey_falls_back_to_id():
    model = build_document_model(Record(id="42", attributes={"cf_items_btpo_api2": "not json"}), DocumentTemplate.CLIENT_INVOICE)

    assert model.number == "42-INV"
    assert model.line_items == []
    assert model.project == "N/A"
