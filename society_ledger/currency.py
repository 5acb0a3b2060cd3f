"""Rupee amounts in words and figures, using the Indian numbering system."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]

_TENS = [
    "", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy",
    "Eighty", "Ninety",
]

# (divisor, place name), largest first. Crore is handled separately because
# the crore count itself may need grouping.
_PLACES = [
    (10**5, "Lakh"),
    (10**3, "Thousand"),
    (10**2, "Hundred"),
]

_CRORE = 10**7
_CENT = Decimal("0.01")


def _two_digit_words(n: int) -> str:
    if n < 20:
        return _ONES[n]
    tens, units = divmod(n, 10)
    if units:
        return f"{_TENS[tens]} {_ONES[units]}"
    return _TENS[tens]


def _integer_words(n: int) -> str:
    parts: list[str] = []

    crores, n = divmod(n, _CRORE)
    if crores:
        parts.append(f"{_integer_words(crores)} Crore")

    for divisor, name in _PLACES:
        count, n = divmod(n, divisor)
        if count:
            parts.append(f"{_two_digit_words(count)} {name}")

    if n:
        parts.append(_two_digit_words(n))
    return " ".join(parts)


def _to_cents(amount: float | int | str | Decimal) -> Decimal:
    value = Decimal(str(amount))
    if value.is_nan() or value.is_infinite():
        raise ValueError(f"amount must be a finite number: {amount!r}")
    if value < 0:
        raise ValueError(f"amount must not be negative: {amount!r}")
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def to_indian_words(amount: float | int | str | Decimal) -> str:
    """Spell out a rupee amount, e.g. ``"One Lakh Rupees Only"``.

    The amount is rounded to paise first. A non-zero paise remainder adds an
    ``"and <N> Paise"`` clause in place of the trailing ``"Only"``.

    Raises:
        ValueError: If the amount is negative or not finite.
    """
    value = _to_cents(amount)
    rupees = int(value)
    paise = int((value - rupees) * 100)

    if rupees == 0 and paise == 0:
        return "Zero Rupees Only"

    words = _integer_words(rupees) or "Zero"
    if paise:
        return f"{words} Rupees and {_two_digit_words(paise)} Paise"
    return f"{words} Rupees Only"


def format_inr(amount: float | int | str | Decimal) -> str:
    """Format an amount with Indian digit grouping, e.g. ``12,34,567.50``."""
    value = _to_cents(amount)
    whole, fraction = f"{value:.2f}".split(".")

    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups: list[str] = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"{whole}.{fraction}"
