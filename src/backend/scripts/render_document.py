from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def _load_json(path: Path):
    with path.open() as handle:
        return json.load(handle)


def load_record(path: Path):
    """Accept either a bare record ({"id", "attributes"}) or a store payload ({"data": {...}})."""
    _ensure_backend_on_path()
    from common.reconciliation.models import Record

    payload = _load_json(path)
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        payload = payload["data"]
    if not isinstance(payload, dict):
        raise ValueError(f"{path} does not contain a record object.")
    return Record(id=str(payload.get("id") or path.stem), attributes=payload.get("attributes") or {})


def render_record_file(path: Path, *, template: str, logo_path: str | None = None) -> bytes:
    _ensure_backend_on_path()
    from adapters.records.document_model import build_document_model, select_template
    from common.documents.renderer import DocumentRenderer

    record = load_record(path)
    model = build_document_model(record, select_template(record.attributes, template))
    return DocumentRenderer(logo_path=logo_path).render(model)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Render a purchase order or invoice PDF from a record JSON file (no record store access)."
    )
    parser.add_argument("record_json", help="Path to a record JSON file.")
    parser.add_argument("--template", choices=("invoice", "po"), default="invoice")
    parser.add_argument("--output", default=None, help="Output PDF path (defaults next to the JSON file).")
    parser.add_argument(
        "--logo",
        default=os.getenv("DOCUMENT_LOGO_PATH", "logo.png"),
        help="Logo image path; a text title is drawn when it cannot be loaded.",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    record_path = Path(args.record_json).resolve()
    document = render_record_file(record_path, template=args.template, logo_path=args.logo)

    out_path = Path(args.output).resolve() if args.output else record_path.with_suffix(".pdf")
    out_path.write_bytes(document)
    print(f"Wrote {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
