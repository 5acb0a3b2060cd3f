"""Invoice table access."""

from __future__ import annotations

from ..models import InvoiceRecord
from .store import RecordStore


class InvoiceStore(RecordStore):
    """Manages the invoices table."""

    table = "invoices"
    record_type = InvoiceRecord

    def get_by_customer(self, customer_name: str) -> list[InvoiceRecord]:
        return self.find_by("customerName", customer_name)
