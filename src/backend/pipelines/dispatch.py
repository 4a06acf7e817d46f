from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Iterable

from dotenv import load_dotenv

from adapters.records.document_model import invoice_number
from common.documents.company import DEFAULT_COMPANY, CompanyProfile
from common.documents.formatting import format_currency_grouped, format_date, text_or_empty
from common.documents.models import DocumentTemplate
from common.reconciliation.models import Record
from connectors.smtp.mailer import DispatchResult

from .gateways import Directory, Mailer


load_dotenv()

logger = logging.getLogger(__name__)

CLIENT_EMAIL_ATTRIBUTE = "cf_client_email_address_btpo"
USER_PICKER_ATTRIBUTES: tuple[str, ...] = ("cf_client_qa_approvers", "cf_bt_users")


@dataclass(frozen=True)
class RecipientPolicy:
    """Where dispatch recipients come from: fixed addresses, a record e-mail attribute, user pickers."""

    static_recipients: tuple[str, ...] = ()
    email_attribute: str = CLIENT_EMAIL_ATTRIBUTE
    user_picker_attributes: tuple[str, ...] = USER_PICKER_ATTRIBUTES

    def resolve(self, attributes: dict[str, Any], directory: Directory) -> list[str]:
        candidates: list[str] = list(self.static_recipients)
        candidates.append(text_or_empty(attributes.get(self.email_attribute)))
        for attribute in self.user_picker_attributes:
            value = attributes.get(attribute)
            if not value:
                continue
            user_ids = value if isinstance(value, list) else [value]
            for user_id in user_ids:
                candidates.append(directory.resolve_user_email(user_id) or "")
        return _unique_addresses(candidates)


def get_recipient_policy() -> RecipientPolicy:
    """Read DISPATCH_RECIPIENTS (comma separated) as the static recipient list."""
    raw = os.getenv("DISPATCH_RECIPIENTS", "")
    return RecipientPolicy(static_recipients=tuple(part.strip() for part in raw.split(",") if part.strip()))


def compose_invoice_message(record: Record, company: CompanyProfile = DEFAULT_COMPANY) -> tuple[str, str]:
    """Subject and plain-text body for an invoice e-mail; expects enriched attributes."""
    attrs = record.attributes
    client = text_or_empty(attrs.get("cf_client")) or "Client"
    number = invoice_number(record)
    po_number = text_or_empty(attrs.get("cf_po_number")) or "N/A"
    amount = format_currency_grouped(attrs.get("cf_total_w_handlingfe"))
    due_date = format_date(attrs.get("cf_due_date_client_invoice"), default="N/A")
    thank_you = "\n".join(company.thank_you_lines)

    subject = f"Invoice {number} - {client}"
    body = (
        f"Hello {client} Team,\n"
        "\n"
        "I hope you are doing well!\n"
        "\n"
        f"Attached is a copy of the Invoice # {number} billed on your PO # {po_number}.\n"
        "\n"
        f"Invoice Amount: {amount}\n"
        f"Due Date: {due_date}\n"
        "\n"
        f"E-mail remittance details: {company.remittance_email}\n"
        f"Preferred method of payment: {company.preferred_payment_method}\n"
        "\n"
        f"{thank_you}\n"
        "\n"
        "\n"
        "Best regards,\n"
        f"{company.name} Team"
    )
    return subject, body


def compose_purchase_order_message(record: Record, company: CompanyProfile = DEFAULT_COMPANY) -> tuple[str, str]:
    attrs = record.attributes
    number = text_or_empty(attrs.get("pkey")) or record.id
    supplier = text_or_empty(attrs.get("cf_supplier_company_nam")) or "Supplier"
    subject = f"Purchase Order {number} - {supplier}"
    body = (
        f"Hello {supplier} Team,\n"
        "\n"
        f"Attached is Purchase Order # {number}.\n"
        "Please state the purchase order number on the invoice, delivery note, and all other correspondence.\n"
        "\n"
        f"Send invoices to {company.payables_email}.\n"
        "\n"
        "Best regards,\n"
        f"{company.name} Team"
    )
    return subject, body


class DocumentDispatcher:
    def __init__(
        self,
        mailer: Mailer,
        directory: Directory,
        policy: RecipientPolicy | None = None,
        *,
        company: CompanyProfile = DEFAULT_COMPANY,
    ) -> None:
        self._mailer = mailer
        self._directory = directory
        self._policy = policy or RecipientPolicy()
        self._company = company

    def dispatch(self, record: Record, document: bytes, template: DocumentTemplate) -> DispatchResult:
        if not self._mailer.is_configured:
            logger.warning("Mail transport not configured; dispatch skipped for record %s.", record.id)
            return DispatchResult(sent=False, skipped=True)

        recipients = self._policy.resolve(record.attributes, self._directory)
        if not recipients:
            logger.warning("No valid recipients for record %s; dispatch skipped.", record.id)
            return DispatchResult(sent=False, skipped=True)

        if template == DocumentTemplate.CLIENT_INVOICE:
            subject, body = compose_invoice_message(record, self._company)
            filename = "Invoice.pdf"
        else:
            subject, body = compose_purchase_order_message(record, self._company)
            filename = "PurchaseOrder.pdf"
        return self._mailer.send(recipients, document, subject, body, filename=filename)


def _unique_addresses(candidates: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    addresses: list[str] = []
    for candidate in candidates:
        address = (candidate or "").strip()
        if "@" not in address or address in seen:
            continue
        seen.add(address)
        addresses.append(address)
    return addresses
