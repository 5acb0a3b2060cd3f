"""Tests for receipt numbering, drafting and saving."""

import pytest

from conftest import make_receipt
from society_ledger.errors import NotFoundError, ValidationError
from society_ledger.models import DEFAULT_FEE_LABELS, ChequeDetails
from society_ledger.service import (
    InvoiceLedger,
    ReceiptLedger,
    display_date,
    next_receipt_number,
)


@pytest.fixture
def ledger(receipt_store, clock):
    ledger = ReceiptLedger(receipt_store, fiscal_year="2025-26", clock=clock)
    yield ledger
    ledger.close()


def _fill(ledger, name="Asha Patel", house="B-12", amounts=(1000, 250)):
    ledger.draft.customer_name = name
    ledger.draft.house_no = house
    for index, amount in enumerate(amounts):
        ledger.set_amount(index, amount)


class TestNextReceiptNumber:
    def test_empty(self):
        assert next_receipt_number([]) == "101"

    def test_max_plus_one(self):
        records = [make_receipt(no) for no in ("100", "105", "103")]
        assert next_receipt_number(records) == "106"

    def test_floor_applies(self):
        records = [make_receipt(no) for no in ("5", "42")]
        assert next_receipt_number(records) == "101"

    def test_non_numeric_ignored(self):
        records = [make_receipt(no) for no in ("abc", "", "120")]
        assert next_receipt_number(records) == "121"

    def test_leading_digits_parsed(self):
        records = [make_receipt("150/A")]
        assert next_receipt_number(records) == "151"


def test_display_date(clock):
    assert display_date(clock()) == "19 - 10 - 2025"


def test_initial_draft_has_suggestion(ledger):
    assert ledger.draft.receipt_no == "101"
    assert ledger.draft.date == "19 - 10 - 2025"
    assert [i.label for i in ledger.draft.items] == list(DEFAULT_FEE_LABELS)
    assert not ledger.editing


def test_suggestion_follows_store_changes(ledger, receipt_store):
    receipt_store.insert(make_receipt("250"))
    assert ledger.draft.receipt_no == "251"


def test_save_inserts_and_derives_fields(ledger, receipt_store):
    _fill(ledger)
    saved = ledger.save()

    assert saved.id is not None
    assert saved.total_amount == 1250
    assert saved.total_amount == sum(i.amount for i in saved.items)
    assert saved.currency_words == "One Thousand Two Hundred Fifty Rupees Only"
    assert saved.fiscal_year == "2025-26"
    assert saved.created_at == int(ledger._clock().timestamp() * 1000)

    stored = receipt_store.get(saved.id)
    assert stored.total_amount == 1250
    assert stored.currency_words == saved.currency_words


def test_save_resets_draft(ledger):
    _fill(ledger)
    ledger.draft.payer_name = "Ramesh"
    ledger.save()

    draft = ledger.draft
    assert draft.customer_name == ""
    assert draft.payer_name == ""
    assert draft.house_no == ""
    assert draft.total_amount == 0
    assert draft.receipt_no == "102"
    assert draft.edit_id is None


@pytest.mark.parametrize(
    "name, house, amounts, missing",
    [
        ("", "B-12", (100,), "Name"),
        ("Asha", "  ", (100,), "House No"),
        ("Asha", "B-12", (), "Amount"),
    ],
)
def test_save_validation(ledger, receipt_store, name, house, amounts, missing):
    _fill(ledger, name=name, house=house, amounts=amounts)
    with pytest.raises(ValidationError, match=missing):
        ledger.save()
    assert receipt_store.count() == 0


def test_negative_amount_rejected(ledger):
    with pytest.raises(ValidationError):
        ledger.set_amount(0, -5)


@pytest.mark.parametrize("amount", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_amount_rejected(ledger, receipt_store, amount):
    _fill(ledger, amounts=())
    with pytest.raises(ValidationError):
        ledger.set_amount(0, amount)
    assert ledger.draft.items[0].amount == 0
    with pytest.raises(ValidationError):
        ledger.save()
    assert receipt_store.count() == 0


def test_load_for_edit_then_save_updates(ledger, receipt_store):
    _fill(ledger)
    saved = ledger.save()

    draft = ledger.load_for_edit(saved.id)
    assert ledger.editing
    assert draft.customer_name == "Asha Patel"
    assert draft.receipt_no == saved.receipt_no

    ledger.set_amount(2, 750)
    updated = ledger.save()

    assert updated.id == saved.id
    assert receipt_store.count() == 1
    assert receipt_store.get(saved.id).total_amount == 2000
    assert not ledger.editing


def test_edit_mode_keeps_receipt_number(ledger, receipt_store):
    _fill(ledger)
    saved = ledger.save()
    ledger.load_for_edit(saved.id)
    receipt_store.insert(make_receipt("500"))
    assert ledger.draft.receipt_no == saved.receipt_no


def test_load_for_edit_copies_items(ledger):
    _fill(ledger)
    saved = ledger.save()
    ledger.load_for_edit(saved.id)
    ledger.set_amount(0, 1)
    assert saved.items[0].amount == 1000


def test_load_missing(ledger):
    with pytest.raises(NotFoundError):
        ledger.load_for_edit(404)


def test_copy_as_new_inserts_new_record(ledger, receipt_store):
    _fill(ledger)
    ledger.draft.payer_name = "Ramesh"
    ledger.draft.cheque = ChequeDetails(date="01 - 10 - 2025", bank="SBI")
    original = ledger.save()

    draft = ledger.copy_as_new(original.id)
    assert not ledger.editing
    assert draft.receipt_no == "102"
    copy = ledger.save()

    assert copy.id != original.id
    assert receipt_store.count() == 2
    assert copy.customer_name == original.customer_name
    assert copy.payer_name == original.payer_name
    assert copy.house_no == original.house_no
    assert copy.items == original.items
    assert copy.total_amount == original.total_amount
    assert copy.currency_words == original.currency_words
    assert copy.cheque == original.cheque


def test_duplicate_receipt_numbers_allowed(ledger, receipt_store):
    _fill(ledger)
    ledger.draft.receipt_no = "101"
    ledger.save()
    _fill(ledger)
    ledger.draft.receipt_no = "101"
    ledger.save()
    assert len(receipt_store.get_by_receipt_no("101")) == 2


def test_delete_requires_confirmation(ledger, receipt_store):
    _fill(ledger)
    saved = ledger.save()

    assert ledger.delete(saved.id, confirm=lambda: False) is False
    assert receipt_store.count() == 1

    assert ledger.delete(saved.id, confirm=lambda: True) is True
    assert receipt_store.count() == 0
    assert ledger.records == []

    with pytest.raises(NotFoundError):
        ledger.delete(saved.id, confirm=lambda: True)


def test_delete_record_being_edited_resets_draft(ledger):
    _fill(ledger)
    saved = ledger.save()
    ledger.load_for_edit(saved.id)
    ledger.delete(saved.id, confirm=lambda: True)
    assert not ledger.editing
    assert ledger.draft.customer_name == ""


class TestInvoiceLedger:
    def test_add(self, invoice_store, clock):
        ledger = InvoiceLedger(invoice_store, clock=clock)
        invoice = ledger.add("Sharma Traders", 4500, "Lift repair")

        assert invoice.id is not None
        assert invoice.currency_words == "Four Thousand Five Hundred Rupees Only"
        assert invoice.date == "19 - 10 - 2025"
        assert invoice_store.get(invoice.id).description == "Lift repair"

    @pytest.mark.parametrize(
        "name, amount",
        [
            ("", 100),
            ("Sharma", 0),
            ("Sharma", -3),
            ("Sharma", float("nan")),
            ("Sharma", float("inf")),
        ],
    )
    def test_add_validation(self, invoice_store, name, amount):
        ledger = InvoiceLedger(invoice_store)
        with pytest.raises(ValidationError):
            ledger.add(name, amount)
        assert invoice_store.count() == 0

    def test_delete(self, invoice_store):
        ledger = InvoiceLedger(invoice_store)
        invoice = ledger.add("Sharma", 10)
        assert ledger.delete(invoice.id, confirm=lambda: False) is False
        assert ledger.delete(invoice.id, confirm=lambda: True) is True
        assert invoice_store.count() == 0
