"""Data models for society receipts and invoices."""

from __future__ import annotations

from dataclasses import dataclass, field

# Fee categories printed on every receipt, in print order.
DEFAULT_FEE_LABELS: tuple[str, ...] = (
    "સભાસદ દાખલ ફી (Member Entry Fee)",
    "શેર ફાળા પેટે (Share Contribution)",
    "ડેવલપમેન્ટ ફાળા ખાતે (Development Fund)",
    "વહીવટી ફાળા પેટે (Admin Fund)",
    "બાકી / વ્યાજ / દંડ (Pending/Interest/Fine)",
)


@dataclass
class ReceiptItem:
    """A single fee line on a receipt."""

    label: str
    amount: float = 0.0

    def to_dict(self) -> dict:
        return {"label": self.label, "amount": self.amount}

    @classmethod
    def from_dict(cls, data: dict) -> ReceiptItem:
        return cls(label=_text(data, "label"), amount=float(data.get("amount", 0)))


def _text(data: dict, key: str) -> str:
    """Return a required text field; receipt numbers may arrive as JSON numbers."""
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return str(value)


def default_items() -> list[ReceiptItem]:
    """Return a blank item list, one zero line per fee category."""
    return [ReceiptItem(label=label) for label in DEFAULT_FEE_LABELS]


@dataclass
class ChequeDetails:
    date: str = ""
    bank: str = ""


@dataclass
class ReceiptRecord:
    """A persisted (or about to be persisted) fee receipt.

    ``total_amount`` and ``currency_words`` are cached at save time and are
    never recomputed on read.
    """

    receipt_no: str
    date: str
    customer_name: str
    house_no: str
    items: list[ReceiptItem] = field(default_factory=default_items)
    total_amount: float = 0.0
    currency_words: str = ""
    payer_name: str = ""
    fiscal_year: str | None = None
    cheque: ChequeDetails | None = None
    created_at: int | None = None  # epoch milliseconds
    id: int | None = None

    def to_dict(self) -> dict:
        """Serialize using the backup key names.

        Optional fields that are unset are left out entirely.
        """
        data: dict = {}
        if self.id is not None:
            data["id"] = self.id
        if self.fiscal_year is not None:
            data["fiscalYear"] = self.fiscal_year
        data.update({
            "receiptNo": self.receipt_no,
            "date": self.date,
            "customerName": self.customer_name,
            "payerName": self.payer_name,
            "houseNo": self.house_no,
            "items": [item.to_dict() for item in self.items],
            "totalAmount": self.total_amount,
            "currencyWords": self.currency_words,
        })
        if self.cheque is not None:
            data["chequeDetails"] = {
                "date": self.cheque.date,
                "bank": self.cheque.bank,
            }
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        return data

    @classmethod
    def from_dict(cls, data: dict) -> ReceiptRecord:
        """Build a record from its serialized form.

        Raises:
            KeyError: If a required key is missing.
            TypeError, ValueError: If a value has the wrong shape.
        """
        if not isinstance(data, dict):
            raise TypeError(f"receipt must be an object, got {type(data).__name__}")
        items = data["items"]
        if not isinstance(items, list):
            raise TypeError("receipt items must be a list")

        cheque = None
        raw_cheque = data.get("chequeDetails")
        if raw_cheque is not None:
            if not isinstance(raw_cheque, dict):
                raise TypeError("chequeDetails must be an object")
            cheque = ChequeDetails(
                date=str(raw_cheque.get("date", "")),
                bank=str(raw_cheque.get("bank", "")),
            )

        # Records written by the first release carry the fiscal year as "fy".
        fiscal_year = data.get("fiscalYear", data.get("fy"))
        created_at = data.get("createdAt")

        return cls(
            id=data.get("id"),
            fiscal_year=fiscal_year,
            receipt_no=_text(data, "receiptNo"),
            date=_text(data, "date"),
            customer_name=_text(data, "customerName"),
            payer_name=str(data.get("payerName") or ""),
            house_no=_text(data, "houseNo"),
            items=[ReceiptItem.from_dict(i) for i in items],
            total_amount=float(data["totalAmount"]),
            currency_words=_text(data, "currencyWords"),
            cheque=cheque,
            created_at=int(created_at) if created_at is not None else None,
        )


@dataclass
class InvoiceRecord:
    """A standalone invoice, unrelated to receipts."""

    customer_name: str
    amount: float
    date: str
    description: str = ""
    currency_words: str = ""
    id: int | None = None

    def to_dict(self) -> dict:
        data: dict = {}
        if self.id is not None:
            data["id"] = self.id
        data.update({
            "customerName": self.customer_name,
            "amount": self.amount,
            "description": self.description,
            "date": self.date,
            "currencyWords": self.currency_words,
        })
        return data

    @classmethod
    def from_dict(cls, data: dict) -> InvoiceRecord:
        if not isinstance(data, dict):
            raise TypeError(f"invoice must be an object, got {type(data).__name__}")
        return cls(
            id=data.get("id"),
            customer_name=_text(data, "customerName"),
            amount=float(data["amount"]),
            description=str(data.get("description") or ""),
            date=_text(data, "date"),
            currency_words=_text(data, "currencyWords"),
        )
