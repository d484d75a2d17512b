"""
Tests for money formatting and amount parsing
"""
from decimal import Decimal

import pytest

from savings.utils.money import format_money, format_money2, format_percent
from savings.utils.validation import normalize_amount_input, parse_amount, validate_and_normalize_amount


@pytest.mark.parametrize("amount,currency,expected", [
    (15000, "USD", "$15,000"),
    ("1200.5", "EUR", "€1,201"),
    (Decimal("999.4"), "CHF", "999 CHF"),
    (-42, "USD", "-$42"),
    (0, "GBP", "£0"),
])
def test_format_money(amount, currency, expected):
    assert format_money(amount, currency) == expected


def test_format_money2():
    assert format_money2(Decimal("1234.5")) == "$1,234.50"
    assert format_money2("-0.456", "SEK") == "-0.46 SEK"


def test_format_percent():
    assert format_percent(Decimal("66.666")) == "67%"
    assert format_percent(Decimal("66.666"), decimals=1) == "66.7%"
    assert format_percent(100) == "100%"


def test_normalize_amount_input():
    assert normalize_amount_input(" $ 1 200,50 ") == "1200.50"


@pytest.mark.parametrize("value,expected", [
    ("100", Decimal("100")),
    ("100,5", Decimal("100.5")),
    ("-3.25", Decimal("-3.25")),
    ("1_000", Decimal("1000")),
])
def test_parse_amount(value, expected):
    assert parse_amount(value) == expected


@pytest.mark.parametrize("value,message", [
    ("abc", "Некорректная сумма"),
    ("", "Некорректная сумма"),
    ("NaN", "Некорректная сумма"),
    ("1.234", "Максимум 2 знака"),
])
def test_parse_amount_errors(value, message):
    with pytest.raises(ValueError, match=message):
        parse_amount(value)


def test_validate_and_normalize_amount():
    assert validate_and_normalize_amount("100,50") == "100.50"
