"""Shared fixtures for ledger tests."""

from datetime import datetime

import pytest

from society_ledger.currency import to_indian_words
from society_ledger.db import InvoiceStore, ReceiptStore
from society_ledger.models import ReceiptRecord, default_items


def make_receipt(
    receipt_no="101",
    customer_name="Asha Patel",
    house_no="B-12",
    amounts=(500.0, 0, 0, 0, 0),
    **kwargs,
) -> ReceiptRecord:
    items = default_items()
    for item, amount in zip(items, amounts):
        item.amount = float(amount)
    total = sum(i.amount for i in items)
    return ReceiptRecord(
        receipt_no=receipt_no,
        date=kwargs.pop("date", "01 - 04 - 2025"),
        customer_name=customer_name,
        house_no=house_no,
        items=items,
        total_amount=total,
        currency_words=to_indian_words(total),
        **kwargs,
    )


@pytest.fixture
def receipt_store(tmp_path):
    store = ReceiptStore(db_path=tmp_path / "ledger.db")
    yield store
    store.close()


@pytest.fixture
def invoice_store(tmp_path):
    store = InvoiceStore(db_path=tmp_path / "ledger.db")
    yield store
    store.close()


@pytest.fixture
def clock():
    return lambda: datetime(2025, 10, 19, 10, 30)
