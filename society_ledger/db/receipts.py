"""Receipt table access."""

from __future__ import annotations

from ..models import ReceiptRecord
from .store import RecordStore


class ReceiptStore(RecordStore):
    """Manages the receipts table."""

    table = "receipts"
    record_type = ReceiptRecord

    def get_by_receipt_no(self, receipt_no: str) -> list[ReceiptRecord]:
        """Return all receipts carrying ``receipt_no``.

        Receipt numbers are not unique, so this may return several records.
        """
        return self.find_by("receiptNo", receipt_no)

    def get_by_house_no(self, house_no: str) -> list[ReceiptRecord]:
        return self.find_by("houseNo", house_no)

    def get_by_fiscal_year(self, fiscal_year: str) -> list[ReceiptRecord]:
        """Return receipts tagged with ``fiscal_year``.

        Receipts written before fiscal years were indexed have no tag and are
        never matched.
        """
        return self.find_by("fiscalYear", fiscal_year)
