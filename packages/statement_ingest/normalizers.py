"""Raw token → typed value conversion (dates, signed amounts, balances).

Nothing here raises on malformed input. Dates come back as ``None`` and
amount problems come back as :class:`~statement_ingest.models.ValidationError`
values so the row validator can attach them to the candidate.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .formats import BankFormat
from .models import RawRow, ValidationError

ZERO = Decimal("0.00")
_CENTS = Decimal("0.01")
# transactions.amount is Numeric(15, 2)
_MAX_INTEGER_DIGITS = 13

# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

_CURRENCY_PREFIX_RE = re.compile(r"^(?:AUD|USD|A\$|US\$|[$€£¥])", re.IGNORECASE)
_STRIP_CHARS = " \t\"'"


def clean_amount(raw: str | None) -> Decimal | None:
    """Parse a bank amount string, or return ``None`` when it is not a number.

    Handles currency symbols, thousands separators, explicit ``+``/``-``
    signs and parenthesis negatives in any order, e.g. ``"-($1,234.56)"``.
    """

    if raw is None:
        return None
    s = raw.strip(_STRIP_CHARS)
    if not s:
        return None

    negative = False
    # Peel sign, currency and parentheses until stable so ordering doesn't matter.
    while True:
        changed = False
        if s.startswith("+"):
            s = s[1:].lstrip()
            changed = True
        elif s.startswith("-"):
            negative = True
            s = s[1:].lstrip()
            changed = True
        m = _CURRENCY_PREFIX_RE.match(s)
        if m:
            s = s[m.end() :].lstrip()
            changed = True
        if s.startswith("(") and s.endswith(")") and len(s) >= 2:
            negative = True
            s = s[1:-1].strip()
            changed = True
        if not changed:
            break

    s = s.replace(",", "").replace(" ", "")
    if not s:
        return None
    try:
        d = Decimal(s)
        if not d.is_finite() or d.adjusted() >= _MAX_INTEGER_DIGITS:
            return None
        d = d.quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None
    return -abs(d) if negative else d


def normalize_amount(row: RawRow, fmt: BankFormat) -> tuple[Decimal, list[ValidationError]]:
    """Return the signed amount for ``row`` (inflow positive) and any errors.

    On failure the amount is ``0.00`` so callers never deal with ``None``;
    the accompanying error forces the row to ``error`` status.
    """

    errors: list[ValidationError] = []
    if fmt.uses_debit_credit:
        debit_raw = row.get(fmt.debit_column, fmt)
        credit_raw = row.get(fmt.credit_column, fmt)
        debit = clean_amount(debit_raw)
        credit = clean_amount(credit_raw)
        if debit is None and credit is None:
            errors.append(
                ValidationError(
                    field="amount",
                    message="Both debit and credit amounts are invalid",
                    value={"debit": debit_raw, "credit": credit_raw},
                )
            )
            return ZERO, errors
        amount = abs(credit or ZERO) - abs(debit or ZERO)
        return amount.quantize(_CENTS), errors

    raw = row.get(fmt.amount_column, fmt)
    value = clean_amount(raw)
    if value is None:
        errors.append(ValidationError(field="amount", message="Invalid amount value", value=raw))
        return ZERO, errors
    return value, errors


def normalize_balance(row: RawRow, fmt: BankFormat) -> Decimal | None:
    if not fmt.balance_column:
        return None
    return clean_amount(row.get(fmt.balance_column, fmt))


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def _strptime_any(s: str, patterns: tuple[str, ...]) -> date | None:
    for p in patterns:
        try:
            return datetime.strptime(s, p).date()
        except ValueError:
            continue
    return None


def _time_then_dmy(s: str) -> date | None:
    # "13:03 26-09-25": the time is ignored; two-digit years pivot at 50.
    parts = s.split()
    if len(parts) != 2:
        return None
    pieces = parts[1].split("-")
    if len(pieces) != 3 or not all(p.isdigit() for p in pieces):
        return None
    day, month, year = (int(p) for p in pieces)
    if len(pieces[2]) <= 2:
        year += 2000 if year < 50 else 1900
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _iso(s: str) -> date | None:
    try:
        return date.fromisoformat(s.split("T", 1)[0].split()[0])
    except ValueError:
        return None


_GRAMMARS: dict[str, Callable[[str], date | None]] = {
    "DD/MM/YYYY": lambda s: _strptime_any(s, ("%d/%m/%Y",)),
    "MM/DD/YYYY": lambda s: _strptime_any(s, ("%m/%d/%Y",)),
    "YYYY-MM-DD": lambda s: _strptime_any(s, ("%Y-%m-%d",)),
    "DD MMM YYYY": lambda s: _strptime_any(s, ("%d %b %Y", "%d %B %Y")),
    "HH:MM DD-MM-YY": _time_then_dmy,
}


def normalize_date(raw: str | None, grammar: str) -> date | None:
    """Parse ``raw`` according to ``grammar``; ``None`` when it doesn't fit."""

    if raw is None:
        return None
    s = raw.strip(_STRIP_CHARS)
    if not s:
        return None
    parser = _GRAMMARS.get(grammar, _iso)
    return parser(s)


__all__ = [
    "ZERO",
    "clean_amount",
    "normalize_amount",
    "normalize_balance",
    "normalize_date",
]
