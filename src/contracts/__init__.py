"""
Shared contracts for the invoice page pipeline.

These models are the boundary between stages:
- decomposition produces `PageUnit`s
- the orchestrator produces one `PageResult` per `PageUnit`, collected in a `RunResult`

Stage code should consume/produce these contract objects (not ad-hoc dicts).
"""

from .invoice import INVOICE_UNIT_CODES, SellerMetadata
from .pages import PageError, PageResult, PageUnit, RunResult

__all__ = [
    "INVOICE_UNIT_CODES",
    "PageError",
    "PageResult",
    "PageUnit",
    "RunResult",
    "SellerMetadata",
]
