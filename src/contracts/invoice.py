from __future__ import annotations

from dataclasses import dataclass

# Unit-of-measure codes the extraction prompt allows for invoice lines.
INVOICE_UNIT_CODES = ("HUR", "DAY", "PCE")


@dataclass(frozen=True, slots=True)
class SellerMetadata:
    """
    Seller identity supplied on the command line.

    The extraction engine has no other channel for it, so it is injected into
    the markdown as a fixed two-line header.
    """

    address: str = ""
    tax_no: str = ""

    def header(self) -> str:
        return f"Seller address: {self.address}\nSeller Tax ID: {self.tax_no}\n"
