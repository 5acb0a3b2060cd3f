"""Filtering and ordering of ledger records for display."""

from __future__ import annotations

from .models import InvoiceRecord, ReceiptRecord


def search(records: list[ReceiptRecord], query: str) -> list[ReceiptRecord]:
    """Return receipts matching ``query``, newest first.

    A receipt matches when its customer name or house number contains the
    query (case-insensitive), or its receipt number contains it verbatim.
    An empty query matches everything.
    """
    needle = query.lower()
    matched = [
        r for r in records
        if needle in r.customer_name.lower()
        or needle in r.house_no.lower()
        or query in r.receipt_no
    ]
    return sorted(matched, key=lambda r: r.id or 0, reverse=True)


def total_collections(records: list[ReceiptRecord] | list[InvoiceRecord]) -> float:
    """Sum of receipt totals (or invoice amounts)."""
    total = 0.0
    for r in records:
        total += r.amount if isinstance(r, InvoiceRecord) else r.total_amount
    return total
