from __future__ import annotations

from contracts.invoice import SellerMetadata

# Target schema (ZUGFeRD-style). Literal braces are doubled for str.format.
INVOICE_PROMPT_TEMPLATE = """You are an expert OCR data analyst and accountant. Extract invoice data from the following OCR'ed markdown and transform it into a ZUGFeRD invoice JSON format.

Seller address: {seller_address}
Seller Tax ID: {seller_tax_no}

OCR'ed Markdown:
{markdown}

IMPORTANT: The unit can be:
- HUR: per hour (also called PT, MT)
- DAY: per day
- PCE: per unit

Tax percentages should be multiplied by 100 (e.g., 7% = 7.00, 19% = 19.00)

Return ONLY valid JSON matching this structure:
{{
  "Invoice": {{
    "InvoiceNumber": "string",
    "InvoiceDate": "YYYY-MM-DD",
    "DueDate": "YYYY-MM-DD",
    "Seller": {{
      "Name": "string",
      "StreetName": "string",
      "City": "string",
      "PostalCode": "string",
      "CountryCode": "DE",
      "TaxIdentificationNumber": "string"
    }},
    "Buyer": {{
      "Name": "string",
      "StreetName": "string",
      "City": "string",
      "PostalCode": "string",
      "CountryCode": "DE",
      "TaxIdentificationNumber": "string"
    }},
    "DocumentCurrencyCode": "EUR",
    "PaymentMeans": {{
      "Type": "42",
      "PaymentInformation": {{
        "PaymentReceiver": "string",
        "IBAN": "string",
        "BIC": "string",
        "BankName": "string",
        "PaymentReference": "string"
      }}
    }},
    "Tax": {{
      "TaxTypeCode": "VAT",
      "TaxCategoryCode": "S",
      "TaxPercentage": 0.0,
      "TaxAmount": 0.0
    }},
    "MonetarySummation": {{
      "LineTotal": 0.0,
      "TaxExclusiveAmount": 0.0,
      "TaxInclusiveAmount": 0.0,
      "PayableAmount": 0.0
    }},
    "InvoiceLines": [
      {{
        "LineID": "1",
        "ProductName": "string",
        "Unit": "HUR"|"DAY"|"PCE",
        "Quantity": 0.0,
        "UnitPrice": 0.0,
        "LineTotalAmount": 0.0,
        "TaxCategoryCode": "S",
        "TaxPercentage": 0.0
      }}
    ]
  }}
}}
"""


def build_invoice_prompt(*, markdown: str, seller: SellerMetadata) -> str:
    return INVOICE_PROMPT_TEMPLATE.format(
        seller_address=seller.address,
        seller_tax_no=seller.tax_no,
        markdown=markdown,
    )
