"""Receipt drafting, numbering and saving on top of the record stores."""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from .currency import to_indian_words
from .db.invoices import InvoiceStore
from .db.receipts import ReceiptStore
from .errors import ValidationError
from .models import (
    ChequeDetails,
    InvoiceRecord,
    ReceiptItem,
    ReceiptRecord,
    default_items,
)

logger = logging.getLogger(__name__)

RECEIPT_NO_FLOOR = 100

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def display_date(moment: datetime) -> str:
    """Format a date the way it is printed on receipts (``19 - 10 - 2026``)."""
    return moment.strftime("%d - %m - %Y")


def _parse_int(text: str) -> int:
    match = _LEADING_INT.match(text or "")
    return int(match.group(1)) if match else 0


def next_receipt_number(records: list[ReceiptRecord], floor: int = RECEIPT_NO_FLOOR) -> str:
    """Suggest the receipt number for a new receipt.

    The suggestion is one more than the highest numeric receipt number on
    record, and never lower than ``floor + 1``. Non-numeric receipt numbers
    count as zero.
    """
    highest = max((_parse_int(r.receipt_no) for r in records), default=floor)
    return str(max(highest, floor) + 1)


@dataclass
class ReceiptDraft:
    """The receipt form currently being filled in.

    ``edit_id`` is set while an existing receipt is loaded for editing; the
    next save then updates that receipt instead of inserting a new one.
    """

    receipt_no: str
    date: str
    customer_name: str = ""
    payer_name: str = ""
    house_no: str = ""
    items: list[ReceiptItem] = field(default_factory=default_items)
    cheque: ChequeDetails | None = None
    edit_id: int | None = None

    @property
    def total_amount(self) -> float:
        return sum(item.amount for item in self.items)


class ReceiptLedger:
    """Orchestrates receipt numbering, validation and persistence."""

    def __init__(
        self,
        store: ReceiptStore,
        fiscal_year: str = "2025-26",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._fiscal_year = fiscal_year
        self._clock = clock
        self._records: list[ReceiptRecord] = []
        self.draft = ReceiptDraft(receipt_no="", date=display_date(clock()))
        # subscribe() delivers the current records right away, which fills
        # in the first suggested receipt number.
        self._unsubscribe = store.subscribe(self._on_records_changed)

    def close(self) -> None:
        self._unsubscribe()

    @property
    def records(self) -> list[ReceiptRecord]:
        """The latest full result set pushed by the store."""
        return list(self._records)

    @property
    def editing(self) -> bool:
        return self.draft.edit_id is not None

    def _on_records_changed(self, records: list[ReceiptRecord]) -> None:
        self._records = records
        if not self.editing:
            self.draft.receipt_no = next_receipt_number(records)

    def reset(self) -> ReceiptDraft:
        """Discard the draft and start a blank one with a fresh number."""
        self.draft = ReceiptDraft(
            receipt_no=next_receipt_number(self._records),
            date=display_date(self._clock()),
        )
        return self.draft

    def set_amount(self, index: int, amount: float) -> None:
        """Set the amount of one fee line of the draft.

        Raises:
            ValidationError: If the amount is negative or not a finite number.
        """
        if not math.isfinite(amount):
            raise ValidationError(f"Amount must be a number: {amount}")
        if amount < 0:
            raise ValidationError(f"Amount must not be negative: {amount}")
        self.draft.items[index].amount = float(amount)

    def _validate(self, draft: ReceiptDraft) -> None:
        missing = []
        if not draft.customer_name.strip():
            missing.append("Name")
        if not draft.house_no.strip():
            missing.append("House No")
        if draft.total_amount <= 0:
            missing.append("Amount")
        if missing:
            raise ValidationError(
                "Please complete the required fields: " + ", ".join(missing)
            )

    def save(self) -> ReceiptRecord:
        """Persist the draft, then start a new blank draft.

        Inserts a new receipt, or updates the loaded one in edit mode.

        Returns:
            The saved record, with its id set.

        Raises:
            ValidationError: If the name or house number is empty, or the
                total is not positive. Nothing is written in that case.
        """
        draft = self.draft
        self._validate(draft)

        total = draft.total_amount
        record = ReceiptRecord(
            fiscal_year=self._fiscal_year,
            receipt_no=draft.receipt_no,
            date=draft.date,
            customer_name=draft.customer_name,
            payer_name=draft.payer_name,
            house_no=draft.house_no,
            items=[ReceiptItem(i.label, i.amount) for i in draft.items],
            total_amount=total,
            currency_words=to_indian_words(total),
            cheque=draft.cheque,
            created_at=int(self._clock().timestamp() * 1000),
        )

        if draft.edit_id is not None:
            self._store.update(draft.edit_id, record)
            record.id = draft.edit_id
            logger.info("Updated receipt #%s (id=%d)", record.receipt_no, record.id)
        else:
            record.id = self._store.insert(record)
            logger.info("Saved receipt #%s (id=%d)", record.receipt_no, record.id)

        self.reset()
        return record

    def _draft_from(self, record: ReceiptRecord, edit_id: int | None) -> ReceiptDraft:
        cheque = None
        if record.cheque is not None:
            cheque = ChequeDetails(record.cheque.date, record.cheque.bank)
        return ReceiptDraft(
            receipt_no=record.receipt_no,
            date=record.date,
            customer_name=record.customer_name,
            payer_name=record.payer_name,
            house_no=record.house_no,
            items=[ReceiptItem(i.label, i.amount) for i in record.items],
            cheque=cheque,
            edit_id=edit_id,
        )

    def load_for_edit(self, record_id: int) -> ReceiptDraft:
        """Load a stored receipt into the draft; the next save updates it.

        Raises:
            NotFoundError: If ``record_id`` does not exist.
        """
        record = self._store.get(record_id)
        self.draft = self._draft_from(record, edit_id=record.id)
        return self.draft

    def copy_as_new(self, record_id: int) -> ReceiptDraft:
        """Load a stored receipt as a template for a new one.

        The draft gets a freshly suggested receipt number and today's date;
        the next save inserts a new receipt.

        Raises:
            NotFoundError: If ``record_id`` does not exist.
        """
        record = self._store.get(record_id)
        draft = self._draft_from(record, edit_id=None)
        draft.receipt_no = next_receipt_number(self._records)
        draft.date = display_date(self._clock())
        self.draft = draft
        return draft

    def delete(self, record_id: int, confirm: Callable[[], bool]) -> bool:
        """Delete a receipt permanently once ``confirm()`` agrees.

        Returns:
            True if the receipt was deleted, False if confirmation was refused.

        Raises:
            NotFoundError: If ``record_id`` does not exist.
        """
        if not confirm():
            return False
        self._store.delete(record_id)
        if self.draft.edit_id == record_id:
            self.reset()
        return True


class InvoiceLedger:
    """Records standalone invoices."""

    def __init__(
        self,
        store: InvoiceStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._clock = clock

    def add(
        self,
        customer_name: str,
        amount: float,
        description: str = "",
    ) -> InvoiceRecord:
        """Validate and store a new invoice.

        Raises:
            ValidationError: If the customer name is empty or the amount is
                not positive.
        """
        if not customer_name.strip():
            raise ValidationError("Please enter the customer name")
        if not math.isfinite(amount) or amount <= 0:
            raise ValidationError("Invoice amount must be greater than zero")

        record = InvoiceRecord(
            customer_name=customer_name,
            amount=float(amount),
            description=description,
            date=display_date(self._clock()),
            currency_words=to_indian_words(amount),
        )
        record.id = self._store.insert(record)
        logger.info("Saved invoice id=%d for %s", record.id, customer_name)
        return record

    def delete(self, invoice_id: int, confirm: Callable[[], bool]) -> bool:
        if not confirm():
            return False
        self._store.delete(invoice_id)
        return True
