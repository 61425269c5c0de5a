"""Tests for amount parsing utilities."""

from decimal import Decimal

import pytest

from profitfirst.utils.amount_parser import (
    is_number,
    parse_amount,
    parse_sheet_amount,
    round_cents,
    to_decimal,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("৳ 1,000", Decimal("1000")),
        ("-123.45", Decimal("-123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("(123.45)", Decimal("-123.45")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "NaN", "Infinity"])
def test_parse_amount_rejects(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_parse_sheet_amount_is_lenient():
    assert parse_sheet_amount('1,000') == Decimal("1000")
    assert parse_sheet_amount(None) == Decimal("0")
    assert parse_sheet_amount("n/a") == Decimal("0")


def test_is_number():
    assert is_number(1)
    assert is_number(0.5)
    assert is_number(Decimal("2"))
    assert not is_number(True)
    assert not is_number("1")
    assert not is_number(float("nan"))
    assert not is_number(float("inf"))


def test_to_decimal_avoids_float_noise():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(5) == Decimal("5")
    with pytest.raises(ValueError):
        to_decimal("5")


def test_round_cents():
    assert round_cents(Decimal("13.333")) == Decimal("13.33")
    assert round_cents(Decimal("2.5")) == Decimal("2.50")
