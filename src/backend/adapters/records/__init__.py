"""Record attribute adapters (no I/O): record snapshot -> DocumentModel."""

from .document_model import (
    DocumentModelError,
    build_document_model,
    invoice_number,
    line_items_from_table,
    select_template,
)

__all__ = [
    "DocumentModelError",
    "build_document_model",
    "invoice_number",
    "line_items_from_table",
    "select_template",
]
