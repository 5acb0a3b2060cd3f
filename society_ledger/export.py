"""CSV / XLSX export and JSON backup / restore of ledger records."""

from __future__ import annotations

import csv
import io
import json
import logging
import sqlite3
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from .db.store import RecordStore
from .errors import LedgerError, RestoreError
from .models import DEFAULT_FEE_LABELS, InvoiceRecord, ReceiptRecord

logger = logging.getLogger(__name__)

Column = tuple[str, Callable[[Any], Any]]


def _number(value: float) -> float | int:
    """Drop a meaningless ``.0`` so 1500.0 exports as 1500."""
    return int(value) if float(value).is_integer() else value


def _item_amount(index: int) -> Callable[[ReceiptRecord], Any]:
    def get(r: ReceiptRecord) -> Any:
        return _number(r.items[index].amount) if index < len(r.items) else 0
    return get


def _english_label(label: str) -> str:
    # "શેર ફાળા પેટે (Share Contribution)" -> "Share Contribution"
    if label.endswith(")") and "(" in label:
        return label[label.rindex("(") + 1:-1]
    return label


_CSV_COLUMNS: dict[type, list[Column]] = {
    ReceiptRecord: [
        ("FiscalYear", lambda r: r.fiscal_year or ""),
        ("Date", lambda r: r.date),
        ("Receipt No", lambda r: r.receipt_no),
        ("Name", lambda r: r.customer_name),
        ("House No", lambda r: r.house_no),
        ("Total", lambda r: _number(r.total_amount)),
        ("Words", lambda r: r.currency_words),
    ],
    InvoiceRecord: [
        ("ID", lambda r: r.id if r.id is not None else ""),
        ("Customer", lambda r: r.customer_name),
        ("Amount", lambda r: _number(r.amount)),
        ("Date", lambda r: r.date),
        ("Description", lambda r: r.description),
        ("Words", lambda r: r.currency_words),
    ],
}

_XLSX_COLUMNS: dict[type, list[Column]] = {
    ReceiptRecord: [
        ("Fiscal Year", lambda r: r.fiscal_year or ""),
        ("Receipt No", lambda r: r.receipt_no),
        ("Date", lambda r: r.date),
        ("Member Name", lambda r: r.customer_name),
        ("Paid Through", lambda r: r.payer_name),
        ("Block / House No", lambda r: r.house_no),
        *[
            (_english_label(label), _item_amount(i))
            for i, label in enumerate(DEFAULT_FEE_LABELS)
        ],
        ("Total Amount (₹)", lambda r: _number(r.total_amount)),
        ("Amount in Words", lambda r: r.currency_words),
    ],
    InvoiceRecord: [
        ("Invoice No", lambda r: r.id if r.id is not None else ""),
        ("Customer", lambda r: r.customer_name),
        ("Amount (₹)", lambda r: _number(r.amount)),
        ("Date", lambda r: r.date),
        ("Description", lambda r: r.description),
        ("Amount in Words", lambda r: r.currency_words),
    ],
}

_SHEET_TITLES = {ReceiptRecord: "Receipts", InvoiceRecord: "Invoices"}


def to_csv(records: list, kind: type = ReceiptRecord) -> str:
    """Render records as CSV text: a header row, then one row per record.

    Values containing a comma, quote or newline are quoted.
    """
    columns = _CSV_COLUMNS[kind]
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow([header for header, _ in columns])
    for record in records:
        writer.writerow([get(record) for _, get in columns])
    return buf.getvalue()


def write_workbook(
    records: list,
    output_path: str | Path,
    kind: type = ReceiptRecord,
) -> Path:
    """Write records to a single-sheet XLSX workbook.

    Raises:
        ImportError: If openpyxl is not installed.
    """
    try:
        from openpyxl import Workbook
        from openpyxl.styles import Font
    except ImportError:
        raise ImportError(
            "openpyxl is required for workbook export: "
            "pip install 'society-ledger[xlsx]'"
        )

    columns = _XLSX_COLUMNS[kind]
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    ws = wb.active
    ws.title = _SHEET_TITLES[kind]
    ws.append([header for header, _ in columns])
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for record in records:
        ws.append([get(record) for _, get in columns])

    wb.save(str(output_path))
    return output_path


def to_backup(records: list) -> str:
    """Serialize records (ids included) as a JSON array."""
    return json.dumps([r.to_dict() for r in records], ensure_ascii=False, indent=2)


def restore(store: RecordStore, payload: str | bytes) -> int:
    """Re-insert every record of a JSON backup with fresh ids.

    All inserts run in one transaction: either every element is stored or
    none is.

    Returns:
        The number of records restored.

    Raises:
        RestoreError: If the payload is not a JSON array, or any element is
            malformed or fails to insert.
    """
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RestoreError(f"Backup is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise RestoreError(
            f"Backup must be a JSON array, got {type(data).__name__}"
        )

    index = -1
    try:
        with store.transaction():
            for index, element in enumerate(data):
                if not isinstance(element, dict):
                    raise TypeError(f"expected an object, got {type(element).__name__}")
                fields = {k: v for k, v in element.items() if k != "id"}
                store.insert(store.record_type.from_dict(fields))
    except (KeyError, TypeError, ValueError, LedgerError, sqlite3.Error) as e:
        raise RestoreError(
            f"Backup element {index} could not be restored ({e!r}); "
            "nothing was written"
        ) from e

    logger.info("Restored %d %s records", len(data), store.table)
    return len(data)


def artifact_name(prefix: str, extension: str, now: datetime | None = None) -> str:
    """Timestamped download name, e.g. ``Society_Backup_1760850000000.json``."""
    now = now or datetime.now()
    return f"{prefix}_{int(now.timestamp() * 1000)}.{extension}"


def write_artifact(directory: str | Path, name: str, content: str | bytes) -> Path:
    """Write an export artifact into ``directory`` and return its path."""
    directory = Path(directory).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    logger.info("Wrote %s", path)
    return path
