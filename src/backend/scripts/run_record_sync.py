from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def build_synchronizer(*, template: str, dispatch: bool):
    """Wire the live gateways from environment configuration. Raises ValueError on missing config."""
    _ensure_backend_on_path()
    from common.documents.renderer import DocumentRenderer
    from common.reconciliation.mapping import default_channels
    from connectors.ace import (
        AceDirectory,
        AceRecordStore,
        get_ace_config,
        get_object_type_ids,
        get_table_field_ids,
    )
    from connectors.smtp import SmtpMailer, get_smtp_config
    from pipelines.dispatch import DocumentDispatcher, get_recipient_policy
    from pipelines.enrichment import ReferenceEnricher
    from pipelines.record_sync import RecordSynchronizer

    ace_config = get_ace_config()
    table_ids = get_table_field_ids()
    directory = AceDirectory(ace_config)

    dispatcher = None
    if dispatch:
        dispatcher = DocumentDispatcher(SmtpMailer(get_smtp_config()), directory, get_recipient_policy())

    return RecordSynchronizer(
        AceRecordStore(ace_config),
        default_channels(internal_table_id=table_ids.internal, external_table_id=table_ids.external),
        enricher=ReferenceEnricher(directory, get_object_type_ids()),
        renderer=DocumentRenderer(logo_path=os.getenv("DOCUMENT_LOGO_PATH", "").strip() or "logo.png"),
        dispatcher=dispatcher,
        template=template,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Reconcile a record's line items, push corrected totals, then render and e-mail its document."
    )
    parser.add_argument("record_id", help="Record id in the record store.")
    parser.add_argument(
        "--template",
        choices=("invoice", "po"),
        default="invoice",
        help="Document to render: client invoice, or purchase order (internal/external by cf_po_type).",
    )
    parser.add_argument(
        "--no-dispatch",
        action="store_false",
        dest="dispatch",
        help="Render the document but do not e-mail it.",
    )
    parser.add_argument("--output", default=None, help="Also write the rendered PDF to this path.")
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (default: LOG_LEVEL or INFO).",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    _ensure_backend_on_path()
    from connectors.ace.client import AceHttpError

    try:
        synchronizer = build_synchronizer(template=args.template, dispatch=args.dispatch)
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    try:
        report = synchronizer.synchronize(args.record_id)
    except AceHttpError as exc:
        print(f"Record sync failed: {exc}", file=sys.stderr)
        return 1

    for outcome in report.outcomes:
        print(
            f"{outcome.channel}: {len(outcome.result.rows_to_sync)} row(s) synced, "
            f"{outcome.subtotal_attribute}={outcome.result.subtotal}"
        )
    if args.output:
        out_path = Path(args.output).resolve()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(report.document)
        print(f"Wrote {out_path}")
    if report.dispatch is not None:
        if report.dispatch.sent:
            print(f"Sent {report.template.value} to {', '.join(report.dispatch.recipients)}")
        elif report.dispatch.skipped:
            print("Dispatch skipped.")
        else:
            print(f"Dispatch failed: {report.dispatch.error}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
