from decimal import Decimal

import pytest

from errors import InvalidAmount
from utils import (
    describe_balance,
    divide_money,
    format_currency,
    parse_amount,
    parse_names,
    to_money,
)


def test_to_money_avoids_binary_float_drift():
    assert to_money(0.1) == Decimal("0.10")
    assert to_money(2.675) == Decimal("2.68")
    assert to_money("1.005") == Decimal("1.01")


def test_divide_money_rounds_half_up():
    assert divide_money(Decimal("100.00"), 3) == Decimal("33.33")
    assert divide_money(Decimal("0.01"), 2) == Decimal("0.01")


@pytest.mark.parametrize("text, expected", [
    ("12", Decimal("12.00")),
    (" 12.5 ", Decimal("12.50")),
    ("$1,250.50", Decimal("1250.50")),
    ("-3", Decimal("-3.00")),
])
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "nan", "Infinity", "1e40"])
def test_parse_amount_rejects_garbage(text):
    with pytest.raises(InvalidAmount):
        parse_amount(text)


@pytest.mark.parametrize("value", [Decimal("1e40"), "1e40", Decimal("NaN"), float("inf")])
def test_to_money_rejects_values_that_cannot_be_held_to_the_cent(value):
    with pytest.raises(InvalidAmount):
        to_money(value)


def test_parse_amount_reports_the_text_it_was_given():
    with pytest.raises(InvalidAmount) as excinfo:
        parse_amount(" 1e40 ")

    assert excinfo.value.value == " 1e40 "


def test_parse_names_trims_and_drops_blanks():
    assert parse_names(" A , B,,C ,") == ["A", "B", "C"]
    assert parse_names("") == []


def test_format_currency():
    assert format_currency(Decimal("1234.5")) == "$1,234.50"
    assert format_currency(Decimal("-5"), "€") == "-€5.00"


def test_describe_balance():
    assert describe_balance("A", Decimal("66.66")) == "A is owed: $66.66"
    assert describe_balance("B", Decimal("-33.33")) == "B owes: $33.33"
    assert describe_balance("C", Decimal("0.00")) == "C is settled up"
