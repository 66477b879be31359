"""Row validation and the file-level acceptability guard.

``validate_row`` turns one :class:`~statement_ingest.models.RawRow` into a
:class:`~statement_ingest.models.TransactionCandidate` in a single step
(pending → valid | error). Merchant and category are filled in for every
row, including error rows, so a reviewer sees a best-effort label next to
the problem.

``assess_batch`` runs after all rows are classified and decides whether the
file as a whole is trustworthy enough to import.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from decimal import Decimal

from .categorization import categorize, is_transfer
from .formats import BankFormat
from .merchants import extract_merchant
from .models import (
    BatchAssessment,
    BatchStats,
    RawRow,
    RowStatus,
    TransactionCandidate,
    UploadSummary,
    ValidationError,
)
from .normalizers import ZERO, normalize_amount, normalize_balance, normalize_date

DEFAULT_MIN_VALID_FRACTION = 0.2


def _strip_quotes(value: str) -> str:
    """Trim whitespace and one enclosing pair of double quotes; apostrophes are data."""

    s = value.strip()
    if len(s) >= 2 and s[0] == s[-1] == '"':
        s = s[1:-1].strip()
    return s


def _optional(row: RawRow, column: str | None, fmt: BankFormat) -> str | None:
    if not column:
        return None
    return _strip_quotes(row.get(column, fmt)) or None


def validate_row(
    row: RawRow,
    fmt: BankFormat,
    row_index: int,
    *,
    id_prefix: str = "tx",
) -> TransactionCandidate:
    """Normalize and classify one row; never raises for malformed data."""

    errors: list[ValidationError] = []

    date_raw = row.get(fmt.date_column, fmt)
    parsed_date = normalize_date(date_raw, fmt.date_grammar)
    if parsed_date is None:
        errors.append(
            ValidationError(
                field="date",
                message=f"Invalid date format. Expected: {fmt.date_grammar}",
                value=date_raw,
            )
        )

    amount, amount_errors = normalize_amount(row, fmt)
    errors.extend(amount_errors)

    description_raw = row.get(fmt.description_column, fmt)
    description = _strip_quotes(description_raw)
    if not description:
        errors.append(
            ValidationError(
                field="description",
                message="Transaction description is required",
                value=description_raw,
            )
        )

    merchant = extract_merchant(description)
    category = categorize(description, merchant, amount)

    return TransactionCandidate(
        id=f"{id_prefix}_{row_index}",
        date=parsed_date,
        description=description,
        amount=amount,
        category=category,
        merchant=merchant,
        status=RowStatus.ERROR if errors else RowStatus.VALID,
        errors=tuple(errors),
        balance=normalize_balance(row, fmt),
        reference=_optional(row, fmt.reference_column, fmt),
        receipt_number=_optional(row, fmt.receipt_column, fmt),
        transaction_id=_optional(row, fmt.transaction_id_column, fmt),
        is_transfer=is_transfer(description),
        raw=row.as_dict(fmt),
        line_number=row.line_number,
    )


def _stats(candidates: Sequence[TransactionCandidate]) -> BatchStats:
    by_status = Counter(c.status for c in candidates)
    return BatchStats(
        total=len(candidates),
        valid=by_status[RowStatus.VALID],
        errors=by_status[RowStatus.ERROR],
        warnings=by_status[RowStatus.WARNING],
    )


def assess_batch(
    candidates: Sequence[TransactionCandidate],
    *,
    min_valid_fraction: float = DEFAULT_MIN_VALID_FRACTION,
) -> BatchAssessment:
    """Aggregate row statuses and decide whether the batch may be imported.

    The batch is rejected when it is empty, when no row is importable, or
    when the importable fraction (valid + warning) is below
    ``min_valid_fraction``. Date and amount error counts are reported as
    diagnostics only.
    """

    if not 0.0 <= min_valid_fraction <= 1.0:
        raise ValueError("min_valid_fraction must be within [0, 1]")

    stats = _stats(candidates)
    errors: list[str] = []
    warnings: list[str] = []

    importable = stats.valid + stats.warnings
    if stats.total == 0:
        errors.append("No transactions found in the CSV file.")
    elif importable == 0:
        errors.append("No valid transactions found. All transactions have errors.")
    elif importable / stats.total < min_valid_fraction:
        error_pct = round(stats.errors / stats.total * 100)
        errors.append(f"{error_pct}% of transactions have errors. Please check the CSV format.")

    error_rows = [c for c in candidates if c.status is RowStatus.ERROR]
    date_errors = sum(1 for c in error_rows if any(e.field == "date" for e in c.errors))
    amount_errors = sum(1 for c in error_rows if any(e.field == "amount" for e in c.errors))
    if date_errors:
        warnings.append(f"{date_errors} transactions have date format errors.")
    if amount_errors:
        warnings.append(f"{amount_errors} transactions have amount parsing errors.")
    if stats.total and importable < stats.total / 2:
        warnings.append(f"Only {importable} out of {stats.total} transactions are valid.")

    return BatchAssessment(
        stats=stats,
        is_acceptable=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
    )


def summarize_candidates(candidates: Sequence[TransactionCandidate]) -> UploadSummary:
    """Category counts, date range and totals over the importable rows."""

    stats = _stats(candidates)
    importable = [c for c in candidates if c.is_importable]
    categories = Counter(c.category for c in importable)
    dates = sorted(c.date for c in importable if c.date is not None)
    total = sum((c.amount for c in importable), ZERO)
    average = (total / len(importable)).quantize(Decimal("0.01")) if importable else ZERO
    return UploadSummary(
        total_rows=stats.total,
        valid_rows=stats.valid,
        error_rows=stats.errors,
        warning_rows=stats.warnings,
        categories=dict(categories),
        earliest=dates[0] if dates else None,
        latest=dates[-1] if dates else None,
        total_amount=total,
        average_amount=average,
    )


__all__ = [
    "DEFAULT_MIN_VALID_FRACTION",
    "assess_batch",
    "summarize_candidates",
    "validate_row",
]
