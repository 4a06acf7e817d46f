from common.documents.models import DocumentTemplate
from common.reconciliation.models import Record
from connectors.smtp.mailer import DispatchResult
from pipelines.dispatch import (
    DocumentDispatcher,
    RecipientPolicy,
    compose_invoice_message,
    get_recipient_policy,
)


def test_recipients_are_deduplicated_and_filtered(make_directory):
    directory = make_directory(emails={"1": "qa@genomix.com", "2": "ar@biotech.com", "3": "not-an-email"})
    policy = RecipientPolicy(static_recipients=("ar@biotech.com", "ops@biotech.com"))

    recipients = policy.resolve(
        {
            "cf_client_email_address_btpo": "client@genomix.com ",
            "cf_client_qa_approvers": [1, 2],
            "cf_bt_users": 3,
        },
        directory,
    )

    assert recipients == ["ar@biotech.com", "ops@biotech.com", "client@genomix.com", "qa@genomix.com"]


def test_recipient_policy_reads_environment(monkeypatch):
    monkeypatch.setenv("DISPATCH_RECIPIENTS", " a@biotech.com, ,b@biotech.com ")

    policy = get_recipient_policy()

    assert policy.static_recipients == ("a@biotech.com", "b@biotech.com")


def test_invoice_message_content():
    record = Record(
        id="42",
        attributes={
            "pkey": "BT-9",
            "cf_client": "Genomix",
            "cf_po_number": "PO-555",
            "cf_total_w_handlingfe": "12345.5",
            "cf_due_date_client_invoice": "2026-01-09",
        },
    )

    subject, body = compose_invoice_message(record)

    assert subject == "Invoice BT-9-INV - Genomix"
    assert body.startswith("Hello Genomix Team,")
    assert "Invoice # BT-9-INV billed on your PO # PO-555." in body
    assert "Invoice Amount: $12,345.50" in body
    assert "Due Date: 09 Jan 2026" in body
    assert "E-mail remittance details: BTQAR@biotech.com" in body
    assert body.endswith("BioTechnique Team")


def test_invoice_message_defaults():
    subject, body = compose_invoice_message(Record(id="42", attributes={}))

    assert subject == "Invoice 42-INV - Client"
    assert "PO # N/A." in body
    assert "Invoice Amount: $0.00" in body
    assert "Due Date: N/A" in body


def test_purchase_orders_use_their_own_attachment_name(make_directory, make_mailer):
    mailer = make_mailer(DispatchResult(sent=False, error="refused"))
    dispatcher = DocumentDispatcher(mailer, make_directory(), RecipientPolicy(static_recipients=("po@supplier.com",)))

    result = dispatcher.dispatch(
        Record(id="7", attributes={"pkey": "PO-7", "cf_supplier_company_nam": "Acme Labs"}),
        b"%PDF",
        DocumentTemplate.EXTERNAL_PO,
    )

    assert result.sent is False
    assert result.error == "refused"
    assert mailer.sent[0]["filename"] == "PurchaseOrder.pdf"
    assert mailer.sent[0]["subject"] == "Purchase Order PO-7 - Acme Labs"


def test_unconfigured_mailer_skips_before_recipient_lookups(make_directory, make_mailer):
    directory = make_directory(emails={"1": "qa@genomix.com"})
    mailer = make_mailer(is_configured=False)
    dispatcher = DocumentDispatcher(mailer, directory, RecipientPolicy(static_recipients=("ar@biotech.com",)))

    result = dispatcher.dispatch(
        Record(id="42", attributes={"cf_client_qa_approvers": [1], "cf_bt_users": 1}),
        b"%PDF",
        DocumentTemplate.CLIENT_INVOICE,
    )

    assert result.skipped is True
    assert result.sent is False
    assert directory.queries == []
    assert mailer.sent == []
