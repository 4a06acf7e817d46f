from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Optional

from common.documents.company import DEFAULT_COMPANY, CompanyProfile
from common.documents.formatting import format_date, text_or_empty
from common.documents.models import (
    AddressBlock,
    DocumentLineItem,
    DocumentModel,
    DocumentTemplate,
    HeaderField,
    TotalsLine,
)
from common.reconciliation.amounts import parse_amount
from common.reconciliation.mapping import EXTERNAL_CHANNEL, INTERNAL_CHANNEL, ChannelConfig
from common.reconciliation.models import Record
from common.reconciliation.reconciler import parse_table_rows


class DocumentModelError(ValueError):
    pass


@dataclass(frozen=True)
class TotalsFields:
    subtotal: str
    tax: str
    shipping: str
    other: str
    discount: str
    total: str
    handling: Optional[str] = None


INTERNAL_PO_TOTALS = TotalsFields(
    subtotal="cf_subtotal_n",
    tax="cf_tax_c",
    shipping="cf_shipping_n_handling_c",
    other="cf_others_c",
    discount="cf_discount_int",
    total="cf_total_ca",
)

EXTERNAL_PO_TOTALS = TotalsFields(
    subtotal="cf_subtotal_external",
    tax="cf_tax_external",
    shipping="cf_shipping_n_handling_external",
    other="cf_others_external",
    discount="cf_discount_ext",
    total="cf_total_btpo",
)

CLIENT_INVOICE_TOTALS = replace(
    EXTERNAL_PO_TOTALS,
    total="cf_total_w_handlingfe",
    handling="cf_additional_handling_ext",
)


def select_template(attributes: dict[str, Any], kind: str) -> DocumentTemplate:
    """Map a CLI template name (invoice|po) to a template; POs split on cf_po_type."""
    normalized = (kind or "").strip().lower()
    if normalized in ("invoice", ""):
        return DocumentTemplate.CLIENT_INVOICE
    if normalized == "po":
        if text_or_empty(attributes.get("cf_po_type")) == "Internal":
            return DocumentTemplate.INTERNAL_PO
        return DocumentTemplate.EXTERNAL_PO
    raise DocumentModelError(f"Unknown document template '{kind}' (expected 'invoice' or 'po').")


def build_document_model(
    record: Record,
    template: DocumentTemplate,
    *,
    company: CompanyProfile = DEFAULT_COMPANY,
) -> DocumentModel:
    if template == DocumentTemplate.CLIENT_INVOICE:
        return _client_invoice(record)
    return _purchase_order(record, template, company)


def invoice_number(record: Record) -> str:
    return f"{_record_key(record)}-INV"


def line_items_from_table(table_raw: Any, channel: ChannelConfig) -> list[DocumentLineItem]:
    rows = parse_table_rows(table_raw) or []
    mapping = channel.mapping
    return [
        DocumentLineItem(
            description=text_or_empty(row.values.get(mapping.description)),
            part_number=text_or_empty(row.values.get(mapping.part_number)),
            quantity=text_or_empty(row.values.get(mapping.quantity)) or "0",
            uom=text_or_empty(row.values.get(mapping.uom)),
            price=_money(row.values.get(mapping.price)),
            amount=_money(row.values.get(mapping.amount)),
        )
        for row in rows
    ]


def _client_invoice(record: Record) -> DocumentModel:
    attrs = record.attributes
    number = invoice_number(record)
    return DocumentModel(
        template=DocumentTemplate.CLIENT_INVOICE,
        number=number,
        header_fields=[
            HeaderField(label="Invoice Number:", value=number, emphasized=True),
            HeaderField(label="Invoice Date:", value=format_date(attrs.get("cf_date_client_invoice"))),
            HeaderField(label="Invoice Due Date:", value=format_date(attrs.get("cf_due_date_client_invoice"))),
            HeaderField(label="Customer PO Number:", value=text_or_empty(attrs.get("cf_po_number"))),
            HeaderField(label="Payment Terms:", value=text_or_empty(attrs.get("cf_invoice_payment_term"))),
        ],
        address_rows=[
            [
                _address_block(
                    "INVOICE TO:",
                    attrs.get("cf_client"),
                    attrs.get("cf_client_address_crm"),
                    (attrs.get("cf_address_city"), attrs.get("cf_address_state"), attrs.get("cf_address_zip")),
                    attrs.get("cf_address_country"),
                ),
                _address_block(
                    "SHIP TO:",
                    attrs.get("cf_receiving_company"),
                    attrs.get("cf_shipping_address"),
                    (attrs.get("cf_ship_to_city"), attrs.get("cf_ship_to_state"), attrs.get("cf_ship_to_zip")),
                    attrs.get("cf_ship_to_country"),
                ),
            ]
        ],
        project=text_or_empty(attrs.get("cf_project_psc")) or "N/A",
        line_items=line_items_from_table(attrs.get(EXTERNAL_CHANNEL.table_attribute), EXTERNAL_CHANNEL),
        totals=_totals(attrs, CLIENT_INVOICE_TOTALS, subtotal_label="Order Total:", total_label="Invoice Total (USD):"),
    )


def _purchase_order(record: Record, template: DocumentTemplate, company: CompanyProfile) -> DocumentModel:
    attrs = record.attributes
    internal = template == DocumentTemplate.INTERNAL_PO
    channel = INTERNAL_CHANNEL if internal else EXTERNAL_CHANNEL
    totals_fields = INTERNAL_PO_TOTALS if internal else EXTERNAL_PO_TOTALS
    number = _record_key(record)
    return DocumentModel(
        template=template,
        number=number,
        header_fields=[
            HeaderField(label="Purchase Order No:", value=number, emphasized=True),
            HeaderField(label="Quote No:", value=text_or_empty(attrs.get("cf_quote_number")) or "N/A"),
            HeaderField(label="Payment Terms:", value=text_or_empty(attrs.get("cf_payment_terms")) or "N/A"),
        ],
        address_rows=[
            [
                _address_block(
                    "SUPPLIER:",
                    attrs.get("cf_supplier_company_nam"),
                    attrs.get("cf_address_of_supplier"),
                    (attrs.get("cf_supplier_city"), attrs.get("cf_supplier_state"), attrs.get("cf_supplier_zip")),
                    attrs.get("cf_supplier_country"),
                ),
            ],
            [
                _address_block(
                    "SHIP TO:",
                    attrs.get("cf_receiving_company") or company.default_ship_to,
                    attrs.get("cf_shipping_address"),
                    (attrs.get("cf_ship_to_city"), attrs.get("cf_ship_to_state"), attrs.get("cf_ship_to_zip")),
                    attrs.get("cf_ship_to_country"),
                ),
                _address_block(
                    "BILL TO:",
                    attrs.get("cf_bill_to_company") or company.default_bill_to,
                    attrs.get("cf_billing_address"),
                    (attrs.get("cf_bill_to_city"), attrs.get("cf_bill_to_state"), attrs.get("cf_bill_to_zip")),
                    attrs.get("cf_bill_to_country"),
                ),
            ],
        ],
        line_items=line_items_from_table(attrs.get(channel.table_attribute), channel),
        totals=_totals(attrs, totals_fields, subtotal_label="Sub-Total:", total_label="Total (USD):"),
    )


def _totals(
    attrs: dict[str, Any],
    fields: TotalsFields,
    *,
    subtotal_label: str,
    total_label: str,
) -> list[TotalsLine]:
    lines = [
        TotalsLine(label=subtotal_label, amount=_money(attrs.get(fields.subtotal))),
        TotalsLine(label="Sales Tax:", amount=_money(attrs.get(fields.tax))),
        TotalsLine(label="Shipping & Handling:", amount=_money(attrs.get(fields.shipping))),
        TotalsLine(label="Other:", amount=_money(attrs.get(fields.other))),
        TotalsLine(label="Discount:", amount=_money(attrs.get(fields.discount)), is_discount=True),
    ]
    if fields.handling:
        lines.append(TotalsLine(label="Handling Fee:", amount=_money(attrs.get(fields.handling))))
    lines.append(TotalsLine(label=total_label, amount=_money(attrs.get(fields.total)), emphasized=True))
    return lines


def _address_block(label: str, name: Any, street: Any, locality: tuple[Any, ...], country: Any) -> AddressBlock:
    locality_line = " ".join(part for part in (text_or_empty(v) for v in locality) if part)
    return AddressBlock(
        label=label,
        lines=[text_or_empty(name), text_or_empty(street), locality_line, text_or_empty(country)],
    )


def _money(value: Any) -> Optional[Decimal]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_amount(value)


def _record_key(record: Record) -> str:
    return text_or_empty(record.attributes.get("pkey")) or record.id
