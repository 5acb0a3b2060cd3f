"""Tests for receipt PDF rendering."""

from unittest.mock import patch

import pytest

from conftest import make_receipt
from society_ledger.config import SocietyConfig
from society_ledger.models import ChequeDetails


def _require_pdf_support():
    pytest.importorskip("reportlab")
    from society_ledger.pdf import _find_gujarati_font

    try:
        _find_gujarati_font()
    except FileNotFoundError:
        pytest.skip("No Gujarati font available")


def test_generate_receipt_pdf(tmp_path):
    _require_pdf_support()
    from society_ledger.pdf import generate_receipt_pdf

    record = make_receipt(
        payer_name="Ramesh & Sons",
        amounts=(500, 1000, 0, 250.5, 0),
        cheque=ChequeDetails(date="01 - 10 - 2025", bank="SBI"),
    )
    record.id = 1
    output = tmp_path / "receipt.pdf"
    result = generate_receipt_pdf(record, output)

    assert result == output
    assert output.stat().st_size > 0
    with open(output, "rb") as f:
        assert f.read(4) == b"%PDF"


def test_generate_receipt_pdf_creates_parent_dirs(tmp_path):
    _require_pdf_support()
    from society_ledger.pdf import generate_receipt_pdf

    output = tmp_path / "sub" / "nested" / "receipt.pdf"
    generate_receipt_pdf(make_receipt(), output, SocietyConfig(name="Shanti <CHS>"))
    assert output.exists()


def test_find_gujarati_font_not_found():
    from society_ledger.pdf import _find_gujarati_font

    with patch("society_ledger.pdf._FONT_SEARCH_PATHS", ["/nonexistent/font.ttf"]):
        with pytest.raises(FileNotFoundError, match="No Gujarati font"):
            _find_gujarati_font()


def test_find_gujarati_font_first_existing(tmp_path):
    from society_ledger.pdf import _find_gujarati_font

    font = tmp_path / "Lohit-Gujarati.ttf"
    font.write_bytes(b"")
    with patch(
        "society_ledger.pdf._FONT_SEARCH_PATHS",
        ["/nonexistent/font.ttf", str(font)],
    ):
        assert _find_gujarati_font() == str(font)
