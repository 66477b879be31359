from datetime import date
from decimal import Decimal

import pytest

from statement_ingest.formats import get_format
from statement_ingest.ingest import iter_raw_rows
from statement_ingest.models import RawRow, RowStatus
from statement_ingest.validation import assess_batch, summarize_candidates, validate_row

NAB = get_format("nab")
COMMONWEALTH = get_format("commonwealth")


def _rows(text: str, fmt):
    return [validate_row(r, fmt, i) for i, r in enumerate(iter_raw_rows(text, fmt))]


def test_headerless_debit_credit_row():
    row = RawRow(fields=("15/01/2024", "WOOLWORTHS 1234", "85.50", "", "1234.56"))
    cand = validate_row(row, NAB, 0)

    assert cand.status is RowStatus.VALID
    assert cand.errors == ()
    assert cand.date == date(2024, 1, 15)
    assert cand.amount == Decimal("-85.50")
    assert cand.category == "Groceries"
    assert cand.merchant == "WOOLWORTHS"
    assert cand.balance == Decimal("1234.56")
    assert cand.id == "tx_0"


def test_commonwealth_quoted_row():
    text = '12/09/2025,"-508.02","Direct Debit, Nissan Financial","+586.72"\n'
    (cand,) = _rows(text, COMMONWEALTH)

    assert cand.status is RowStatus.VALID
    assert cand.date == date(2025, 9, 12)
    assert cand.amount == Decimal("-508.02")
    assert cand.description == "Direct Debit, Nissan Financial"
    assert cand.merchant == "Nissan Financial"
    assert cand.balance == Decimal("586.72")
    assert cand.raw == {
        "date": "12/09/2025",
        "amount": "-508.02",
        "description": "Direct Debit, Nissan Financial",
        "balance": "+586.72",
    }
    assert cand.line_number == 1


def test_header_row_is_consumed_and_columns_matched_by_name():
    text = (
        "Date,Description,Debit,Credit,Balance\n"
        "\n"
        "16/01/2024,ACME PTY LTD SALARY,,2500.00,3734.56\n"
    )
    (cand,) = _rows(text, NAB)
    assert cand.amount == Decimal("2500.00")
    assert cand.category == "Income"
    assert cand.line_number == 3


def test_invalid_date_and_missing_description_are_collected():
    row = RawRow(fields=("32/01/2024", "  ", "10.00", "", ""))
    cand = validate_row(row, NAB, 7)

    assert cand.status is RowStatus.ERROR
    assert {e.field for e in cand.errors} == {"date", "description"}
    date_error = next(e for e in cand.errors if e.field == "date")
    assert date_error.message == "Invalid date format. Expected: DD/MM/YYYY"
    assert date_error.value == "32/01/2024"
    assert cand.merchant == "Unknown"
    assert cand.category == "Uncategorized"
    assert not cand.is_importable


def test_amount_error_marks_row_as_error():
    row = RawRow(fields=("15/01/2024", "SOMETHING", "abc", "xyz", ""))
    cand = validate_row(row, NAB, 0)
    assert cand.status is RowStatus.ERROR
    assert [e.field for e in cand.errors] == ["amount"]


def test_oversized_amount_marks_row_as_error():
    row = RawRow(
        fields=("15/01/2024", "WOOLWORTHS", "1e30"),
        header=("Date", "Description", "Amount"),
    )
    cand = validate_row(row, get_format("creditcard"), 0)
    assert cand.status is RowStatus.ERROR
    assert cand.amount == Decimal("0.00")
    assert [e.message for e in cand.errors] == ["Invalid amount value"]


@pytest.mark.parametrize(
    "description, expected",
    [
        ("McDonald's", "McDonald's"),
        ("'TIS THE SEASON", "'TIS THE SEASON"),
        ("PAYMENT TO JAMES'", "PAYMENT TO JAMES'"),
        ('"ALDI STORES"', "ALDI STORES"),
        ('  " ALDI STORES "  ', "ALDI STORES"),
    ],
)
def test_description_keeps_apostrophes_and_drops_enclosing_quotes(description, expected):
    row = RawRow(fields=("15/01/2024", description, "10.00", "", ""))
    assert validate_row(row, NAB, 0).description == expected


def test_transfer_flag():
    row = RawRow(fields=("15/01/2024", "Transfer to Savings Account", "100.00", "", ""))
    assert validate_row(row, NAB, 0).is_transfer


def test_assess_accepts_mostly_valid_batch():
    text = "15/01/2024,WOOLWORTHS,10.00,,\n16/01/2024,COLES,5.00,,\nbad,row,,,\n"
    cands = _rows(text, NAB)
    verdict = assess_batch(cands)

    assert verdict.is_acceptable
    assert (verdict.stats.total, verdict.stats.valid, verdict.stats.errors) == (3, 2, 1)
    assert "1 transactions have date format errors." in verdict.warnings


def test_assess_rejects_when_importable_share_below_threshold():
    text = "15/01/2024,WOOLWORTHS,10.00,,\n" + "bad,row,,,\n" * 9
    cands = _rows(text, NAB)

    verdict = assess_batch(cands)
    assert not verdict.is_acceptable
    assert verdict.errors == ("90% of transactions have errors. Please check the CSV format.",)

    # 1 in 10 importable passes a lower bar.
    assert assess_batch(cands, min_valid_fraction=0.1).is_acceptable


def test_assess_rejects_empty_and_all_error_batches():
    empty = assess_batch([])
    assert not empty.is_acceptable
    assert empty.errors == ("No transactions found in the CSV file.",)

    all_bad = assess_batch(_rows("bad,row,,,\n", NAB))
    assert not all_bad.is_acceptable
    assert all_bad.errors == ("No valid transactions found. All transactions have errors.",)


def test_assess_rejects_out_of_range_threshold():
    with pytest.raises(ValueError):
        assess_batch([], min_valid_fraction=1.5)


def test_summary_over_importable_rows():
    text = (
        "15/01/2024,WOOLWORTHS,10.00,,\n"
        "20/01/2024,COLES,20.00,,\n"
        "17/01/2024,ACME SALARY,,100.00,\n"
        "bad,row,,,\n"
    )
    summary = summarize_candidates(_rows(text, NAB))

    assert (summary.total_rows, summary.valid_rows, summary.error_rows) == (4, 3, 1)
    assert summary.categories == {"Groceries": 2, "Income": 1}
    assert summary.earliest == date(2024, 1, 15)
    assert summary.latest == date(2024, 1, 20)
    assert summary.total_amount == Decimal("70.00")
    assert summary.average_amount == Decimal("23.33")
