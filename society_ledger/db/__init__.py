"""SQLite storage for receipts and invoices."""

from .invoices import InvoiceStore
from .receipts import ReceiptStore
from .schema import LATEST_VERSION, ensure_schema
from .store import DEFAULT_DB_PATH, RecordStore

__all__ = [
    "DEFAULT_DB_PATH",
    "InvoiceStore",
    "LATEST_VERSION",
    "ReceiptStore",
    "RecordStore",
    "ensure_schema",
]
