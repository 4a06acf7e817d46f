from __future__ import annotations

from typing import List, Tuple

from pydantic import BaseModel, Field


class CompanyProfile(BaseModel):
    """Fixed texts printed on every document (title fallback, footers, remittance)."""

    name: str = "BioTechnique"
    legal_name: str = "BIOTECHNIQUE LLC"
    default_ship_to: str = "BioTechnique"
    default_bill_to: str = "BioTechnique LLC"
    remittance_email: str = "BTQAR@biotech.com"
    payables_email: str = "BTQAP@biotech.com"
    preferred_payment_method: str = "ACH or wire transfer"

    thank_you_lines: List[str] = Field(
        default_factory=lambda: [
            "Thank you for choosing BioTechnique LLC!",
            "We value you as a customer and appreciate your business with us!",
        ]
    )
    bank_details: List[Tuple[str, str]] = Field(
        default_factory=lambda: [
            ("Beneficiary Name:", "BIOTECHNIQUE LLC"),
            ("Receiving Bank Name:", "East West Bank"),
            ("Beneficiary Account:", "80 64012910"),
            ("Bank Routing Number: (Domestic wires)", "3 | 2 | 2 | 0 | 7 | 0 | 3 | 8 | 1"),
            ("Bank Routing/Swift Code: (International wires)", "EWBKUS66XXX"),
            ("Remittance Details E-mail:", "BTQAR@biotech.com"),
        ]
    )
    remittance_address: List[str] = Field(
        default_factory=lambda: [
            "BIOTECHNIQUE LLC",
            "700 Corporate Center",
            "Drive, Suite 201",
            "Pomona, CA 91768",
        ]
    )

    @property
    def closing_terms(self) -> List[str]:
        # Empty strings are paragraph breaks.
        return [
            "Please state the purchase order number on the invoice, delivery note, and all other correspondence.",
            "",
            "Only one purchase order number shall be used on each invoice.",
            f"Soft copy invoice is preferred. Please send to {self.payables_email}.",
        ]


DEFAULT_COMPANY = CompanyProfile()
