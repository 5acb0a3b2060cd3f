"""Tests for receipt search and ordering."""

from conftest import make_receipt
from society_ledger.models import InvoiceRecord
from society_ledger.search import search, total_collections


def _records():
    rows = [
        make_receipt("101", customer_name="Asha Patel", house_no="A-01"),
        make_receipt("102", customer_name="Bhavesh Shah", house_no="B-12"),
        make_receipt("203", customer_name="Chetna Desai", house_no="C-07"),
    ]
    for record_id, record in zip((3, 7, 5), rows):
        record.id = record_id
    return rows


def test_empty_query_returns_all_newest_first():
    result = search(_records(), "")
    assert [r.id for r in result] == [7, 5, 3]


def test_house_no_case_insensitive():
    result = search(_records(), "b-12")
    assert [r.customer_name for r in result] == ["Bhavesh Shah"]


def test_customer_name_case_insensitive():
    assert [r.id for r in search(_records(), "PATEL")] == [3]
    assert [r.id for r in search(_records(), "SHAH")] == [7]


def test_receipt_no_substring():
    assert [r.receipt_no for r in search(_records(), "10")] == ["102", "101"]
    assert [r.receipt_no for r in search(_records(), "203")] == ["203"]


def test_no_match():
    assert search(_records(), "zzz") == []


def test_does_not_modify_input():
    records = _records()
    search(records, "")
    assert [r.id for r in records] == [3, 7, 5]


def test_total_collections():
    assert total_collections(_records()) == 1500
    invoices = [
        InvoiceRecord(customer_name="A", amount=100, date="d"),
        InvoiceRecord(customer_name="B", amount=50.5, date="d"),
    ]
    assert total_collections(invoices) == 150.5
    assert total_collections([]) == 0
