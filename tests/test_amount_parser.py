"""Tests for teller amount parsing."""

import pytest
from decimal import Decimal

from bankdesk.domain.errors import InvalidAmountError
from bankdesk.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("1,234,567", Decimal("1234567.00")),
        ("100", Decimal("100.00")),
        (" € 7.5 ", Decimal("7.50")),
        ("-20.00", Decimal("-20.00")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "12,34", "1,2345.00", "1.005", "$"])
def test_parse_amount_rejects(text):
    with pytest.raises(InvalidAmountError):
        parse_amount(text)
