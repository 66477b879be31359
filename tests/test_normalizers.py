from datetime import date
from decimal import Decimal

import pytest

from statement_ingest.formats import get_format
from statement_ingest.models import RawRow
from statement_ingest.normalizers import (
    clean_amount,
    normalize_amount,
    normalize_balance,
    normalize_date,
)

NAB = get_format("nab")
CREDITCARD = get_format("creditcard")
NAB_HEADER = ("Date", "Description", "Debit", "Credit", "Balance")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("85.50", Decimal("85.50")),
        ("-508.02", Decimal("-508.02")),
        ("+586.72", Decimal("586.72")),
        ("$1,234.56", Decimal("1234.56")),
        ("AUD 12.5", Decimal("12.50")),
        ("(45.00)", Decimal("-45.00")),
        ("-($1,234.56)", Decimal("-1234.56")),
        ('"3"', Decimal("3.00")),
        ("0.005", Decimal("0.01")),
        ("9999999999999.99", Decimal("9999999999999.99")),
    ],
)
def test_clean_amount_parses_bank_notation(raw: str, expected: Decimal):
    assert clean_amount(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "   ",
        "abc",
        "$",
        "NaN",
        "Infinity",
        "1.2.3",
        "1e30",
        "123456789012345678901234567890",
        "10000000000000.00",
    ],
)
def test_clean_amount_rejects_non_numbers(raw):
    assert clean_amount(raw) is None


def test_debit_only_row_is_negative():
    row = RawRow(fields=("15/01/2024", "WOOLWORTHS", "50.00", "", "100.00"), header=NAB_HEADER)
    amount, errors = normalize_amount(row, NAB)
    assert amount == Decimal("-50.00")
    assert errors == []


def test_credit_only_row_is_positive():
    row = RawRow(fields=("15/01/2024", "SALARY", "", "50.00", "100.00"), header=NAB_HEADER)
    amount, errors = normalize_amount(row, NAB)
    assert amount == Decimal("50.00")
    assert errors == []


def test_signed_debit_column_still_counts_as_outflow():
    # Some exports print debits as negative numbers; the column decides the sign.
    row = RawRow(fields=("15/01/2024", "FEE", "-2.50", "", ""), header=NAB_HEADER)
    amount, _ = normalize_amount(row, NAB)
    assert amount == Decimal("-2.50")


def test_unparseable_debit_and_credit_is_an_error():
    row = RawRow(fields=("15/01/2024", "???", "n/a", "", ""), header=NAB_HEADER)
    amount, errors = normalize_amount(row, NAB)
    assert amount == Decimal("0.00")
    assert [e.field for e in errors] == ["amount"]
    assert errors[0].message == "Both debit and credit amounts are invalid"


def test_single_amount_column_keeps_sign():
    row = RawRow(fields=("15/01/2024", "REFUND", "-12.00"), header=("Date", "Description", "Amount"))
    amount, errors = normalize_amount(row, CREDITCARD)
    assert amount == Decimal("-12.00")
    assert errors == []

    bad = RawRow(fields=("15/01/2024", "X", "twelve"), header=("Date", "Description", "Amount"))
    amount, errors = normalize_amount(bad, CREDITCARD)
    assert amount == Decimal("0.00")
    assert errors[0].message == "Invalid amount value"


def test_amount_too_large_to_store_is_an_error_not_a_crash():
    row = RawRow(
        fields=("15/01/2024", "WOOLWORTHS", "1e30"),
        header=("Date", "Description", "Amount"),
    )
    amount, errors = normalize_amount(row, CREDITCARD)
    assert amount == Decimal("0.00")
    assert [(e.field, e.message, e.value) for e in errors] == [
        ("amount", "Invalid amount value", "1e30")
    ]


def test_balance_is_optional():
    row = RawRow(fields=("15/01/2024", "X", "1.00", "", "1,234.56"), header=NAB_HEADER)
    assert normalize_balance(row, NAB) == Decimal("1234.56")
    assert normalize_balance(row, CREDITCARD) is None


@pytest.mark.parametrize(
    "raw, grammar, expected",
    [
        ("15/01/2024", "DD/MM/YYYY", date(2024, 1, 15)),
        ("01/15/2024", "MM/DD/YYYY", date(2024, 1, 15)),
        ("2024-01-15", "YYYY-MM-DD", date(2024, 1, 15)),
        ("15 Jan 2024", "DD MMM YYYY", date(2024, 1, 15)),
        ("15 January 2024", "DD MMM YYYY", date(2024, 1, 15)),
        ("13:03 26-09-25", "HH:MM DD-MM-YY", date(2025, 9, 26)),
        ("08:00 01-02-99", "HH:MM DD-MM-YY", date(1999, 2, 1)),
    ],
)
def test_normalize_date_grammars(raw: str, grammar: str, expected: date):
    assert normalize_date(raw, grammar) == expected


@pytest.mark.parametrize(
    "raw, grammar",
    [
        ("31/02/2024", "DD/MM/YYYY"),
        ("15/13/2024", "DD/MM/YYYY"),
        ("2024-01-15", "DD/MM/YYYY"),
        ("", "DD/MM/YYYY"),
        (None, "DD/MM/YYYY"),
        ("26-09-25", "HH:MM DD-MM-YY"),
    ],
)
def test_normalize_date_rejects_invalid(raw, grammar: str):
    assert normalize_date(raw, grammar) is None
