from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class DocumentTemplate(str, Enum):
    INTERNAL_PO = "INTERNAL_PO"
    EXTERNAL_PO = "EXTERNAL_PO"
    CLIENT_INVOICE = "CLIENT_INVOICE"

    @property
    def is_purchase_order(self) -> bool:
        return self in (DocumentTemplate.INTERNAL_PO, DocumentTemplate.EXTERNAL_PO)


class HeaderField(BaseModel):
    label: str
    value: str = ""
    emphasized: bool = False


class AddressBlock(BaseModel):
    label: str
    lines: List[str] = Field(default_factory=list)


class DocumentLineItem(BaseModel):
    description: str = ""
    part_number: str = ""
    quantity: str = ""
    uom: str = ""
    price: Optional[Decimal] = None
    amount: Optional[Decimal] = None


class TotalsLine(BaseModel):
    label: str
    amount: Optional[Decimal] = None
    is_discount: bool = False
    emphasized: bool = False


class DocumentModel(BaseModel):
    template: DocumentTemplate
    number: str
    header_fields: List[HeaderField] = Field(default_factory=list)
    # Each inner list is drawn side by side on one band of the page.
    address_rows: List[List[AddressBlock]] = Field(default_factory=list)
    project: Optional[str] = None
    table_title: str = "Purchase Order Items"
    line_items: List[DocumentLineItem] = Field(default_factory=list)
    totals: List[TotalsLine] = Field(default_factory=list)

    @model_validator(mode="after")
    def _single_grand_total(self) -> "DocumentModel":
        emphasized = [line for line in self.totals if line.emphasized]
        if self.totals and len(emphasized) != 1:
            raise ValueError("Totals block must contain exactly one emphasized grand total line.")
        return self
