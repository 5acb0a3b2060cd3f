"""Fee receipt and invoice ledger for a co-operative housing society."""

from .config import LedgerConfig, SocietyConfig, load_config
from .currency import format_inr, to_indian_words
from .db import InvoiceStore, ReceiptStore, RecordStore
from .errors import (
    LedgerError,
    NotFoundError,
    RestoreError,
    SchemaError,
    ValidationError,
)
from .export import artifact_name, restore, to_backup, to_csv, write_workbook
from .models import (
    DEFAULT_FEE_LABELS,
    ChequeDetails,
    InvoiceRecord,
    ReceiptItem,
    ReceiptRecord,
)
from .search import search, total_collections
from .service import InvoiceLedger, ReceiptDraft, ReceiptLedger, next_receipt_number

__all__ = [
    "DEFAULT_FEE_LABELS",
    "ChequeDetails",
    "InvoiceLedger",
    "InvoiceRecord",
    "InvoiceStore",
    "LedgerConfig",
    "LedgerError",
    "NotFoundError",
    "ReceiptDraft",
    "ReceiptItem",
    "ReceiptLedger",
    "ReceiptRecord",
    "ReceiptStore",
    "RecordStore",
    "RestoreError",
    "SchemaError",
    "SocietyConfig",
    "ValidationError",
    "artifact_name",
    "format_inr",
    "load_config",
    "next_receipt_number",
    "restore",
    "search",
    "to_backup",
    "to_csv",
    "to_indian_words",
    "total_collections",
    "write_workbook",
]
