"""Tests for rupee amounts in words and figures."""

from decimal import Decimal

import pytest

from society_ledger.currency import format_inr, to_indian_words


def test_zero():
    assert to_indian_words(0) == "Zero Rupees Only"


def test_one_lakh():
    assert to_indian_words(100000) == "One Lakh Rupees Only"


def test_one_crore():
    assert to_indian_words(10000000) == "One Crore Rupees Only"


def test_rupees_and_paise():
    words = to_indian_words(1234.50)
    assert words == "One Thousand Two Hundred Thirty Four Rupees and Fifty Paise"
    assert "Only" not in words


@pytest.mark.parametrize(
    "amount, expected",
    [
        (1, "One Rupees Only"),
        (10, "Ten Rupees Only"),
        (11, "Eleven Rupees Only"),
        (15, "Fifteen Rupees Only"),
        (19, "Nineteen Rupees Only"),
        (20, "Twenty Rupees Only"),
        (21, "Twenty One Rupees Only"),
        (99, "Ninety Nine Rupees Only"),
        (100, "One Hundred Rupees Only"),
        (115, "One Hundred Fifteen Rupees Only"),
        (2500, "Two Thousand Five Hundred Rupees Only"),
        (50000, "Fifty Thousand Rupees Only"),
    ],
)
def test_small_numbers(amount, expected):
    assert to_indian_words(amount) == expected


def test_indian_grouping():
    assert to_indian_words(12345678) == (
        "One Crore Twenty Three Lakh Forty Five Thousand "
        "Six Hundred Seventy Eight Rupees Only"
    )


def test_skips_zero_groups():
    assert to_indian_words(10000005) == "One Crore Five Rupees Only"
    assert to_indian_words(200100) == "Two Lakh One Hundred Rupees Only"


def test_crore_count_above_ninety_nine():
    assert to_indian_words(1_000_000_000) == "One Hundred Crore Rupees Only"


def test_paise_only():
    assert to_indian_words(0.5) == "Zero Rupees and Fifty Paise"


def test_rounds_to_two_decimals():
    assert to_indian_words(10.005) == "Ten Rupees and One Paise"
    assert to_indian_words(0.1 + 0.2) == "Zero Rupees and Thirty Paise"
    assert to_indian_words(7.999) == "Eight Rupees Only"


def test_accepts_decimal_and_string():
    assert to_indian_words(Decimal("1500.00")) == "One Thousand Five Hundred Rupees Only"
    assert to_indian_words("250") == "Two Hundred Fifty Rupees Only"


def test_repeatable():
    first = to_indian_words(98765.43)
    assert all(to_indian_words(98765.43) == first for _ in range(5))


def test_negative_rejected():
    with pytest.raises(ValueError, match="negative"):
        to_indian_words(-1)


def test_nan_rejected():
    with pytest.raises(ValueError):
        to_indian_words(float("nan"))


class TestFormatInr:
    def test_small(self):
        assert format_inr(0) == "0.00"
        assert format_inr(999) == "999.00"

    def test_thousands(self):
        assert format_inr(1000) == "1,000.00"

    def test_lakh_grouping(self):
        assert format_inr(100000) == "1,00,000.00"
        assert format_inr(1234567.5) == "12,34,567.50"

    def test_crore_grouping(self):
        assert format_inr(123456789) == "12,34,56,789.00"
