"""Paginated PDF layout for purchase orders and client invoices (no record I/O)."""

from .company import DEFAULT_COMPANY, CompanyProfile
from .layout import LayoutCursor, PageGeometry
from .models import (
    AddressBlock,
    DocumentLineItem,
    DocumentModel,
    DocumentTemplate,
    HeaderField,
    TotalsLine,
)
from .renderer import DocumentRenderer

__all__ = [
    "DEFAULT_COMPANY",
    "AddressBlock",
    "CompanyProfile",
    "DocumentLineItem",
    "DocumentModel",
    "DocumentRenderer",
    "DocumentTemplate",
    "HeaderField",
    "LayoutCursor",
    "PageGeometry",
    "TotalsLine",
]
