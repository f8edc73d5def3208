from __future__ import annotations

import json

from contracts.invoice import INVOICE_UNIT_CODES

from .contracts import ExtractionError


def validate_invoice_json(text: str) -> list[ExtractionError]:
    """
    Strict-mode checks on the extraction response.

    Only shape essentials are checked: a JSON object with an "Invoice" object,
    and every invoice line using one of the allowed unit codes. Amounts,
    dates and party blocks are not validated.
    """

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        return [
            ExtractionError(
                code="EXTRACTION_INVALID_JSON",
                message=f"Extraction response is not valid JSON: {e.msg}",
                detail={"line": e.lineno, "column": e.colno},
            )
        ]

    invoice = payload.get("Invoice") if isinstance(payload, dict) else None
    if not isinstance(invoice, dict):
        return [
            ExtractionError(
                code="EXTRACTION_INVALID_JSON",
                message="Extraction response has no Invoice object",
            )
        ]

    lines = invoice.get("InvoiceLines") or []
    if not isinstance(lines, list):
        return [
            ExtractionError(
                code="EXTRACTION_INVALID_JSON",
                message="InvoiceLines must be a list",
            )
        ]

    bad_units = [
        {"index": i, "unit": line.get("Unit") if isinstance(line, dict) else None}
        for i, line in enumerate(lines)
        if not isinstance(line, dict) or line.get("Unit") not in INVOICE_UNIT_CODES
    ]
    if bad_units:
        return [
            ExtractionError(
                code="EXTRACTION_INVALID_UNIT",
                message=f"Invoice lines use unit codes outside {', '.join(INVOICE_UNIT_CODES)}",
                detail={"invalid_count": len(bad_units), "invalid_examples": bad_units[:3]},
            )
        ]

    return []
