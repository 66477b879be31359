"""Registry of supported bank CSV layouts.

Each :class:`BankFormat` names the columns a bank exports and which of them
carry the date, description, amount(s), running balance and identifiers. A
format uses either a debit/credit column pair or a single signed amount
column, never both.

Registry order matters: :func:`statement_ingest.detect.detect_format` tries
header formats in this order, so layouts with more specific header keywords
come before generic ones.
"""

from __future__ import annotations

from dataclasses import dataclass

DATE_GRAMMARS: frozenset[str] = frozenset(
    {"DD/MM/YYYY", "MM/DD/YYYY", "YYYY-MM-DD", "DD MMM YYYY", "HH:MM DD-MM-YY"}
)


@dataclass(frozen=True, slots=True)
class BankFormat:
    key: str
    name: str
    columns: tuple[str, ...]
    date_column: str
    description_column: str
    date_grammar: str
    amount_column: str | None = None
    debit_column: str | None = None
    credit_column: str | None = None
    balance_column: str | None = None
    reference_column: str | None = None
    receipt_column: str | None = None
    transaction_id_column: str | None = None
    header_rows: int = 1
    header_keywords: tuple[str, ...] = ()
    delimiter: str = ","

    def __post_init__(self) -> None:
        has_pair = self.debit_column is not None and self.credit_column is not None
        has_single = self.amount_column is not None
        if has_pair == has_single:
            raise ValueError(
                f"BankFormat {self.key!r} must configure exactly one of "
                "a debit/credit pair or a single amount column"
            )
        if (self.debit_column is None) != (self.credit_column is None):
            raise ValueError(f"BankFormat {self.key!r}: debit and credit must be set together")
        if self.date_grammar not in DATE_GRAMMARS:
            raise ValueError(f"BankFormat {self.key!r}: unknown date grammar {self.date_grammar!r}")
        if self.header_rows < 0:
            raise ValueError(f"BankFormat {self.key!r}: header_rows must be >= 0")

    @property
    def has_header(self) -> bool:
        return self.header_rows > 0

    @property
    def uses_debit_credit(self) -> bool:
        return self.amount_column is None


_FORMATS: tuple[BankFormat, ...] = (
    # Headerless export, e.g. 12/09/2025,"-508.02","Direct Debit ...","+586.72"
    BankFormat(
        key="commonwealth",
        name="Commonwealth Bank",
        columns=("date", "amount", "description", "balance"),
        date_column="date",
        description_column="description",
        date_grammar="DD/MM/YYYY",
        amount_column="amount",
        balance_column="balance",
        header_rows=0,
    ),
    BankFormat(
        key="ubank",
        name="UBank",
        columns=(
            "Date and time",
            "Description",
            "Debit",
            "Credit",
            "From account",
            "To account",
            "Payment type",
            "Category",
            "Receipt number",
            "Transaction ID",
        ),
        date_column="Date and time",
        description_column="Description",
        date_grammar="HH:MM DD-MM-YY",
        debit_column="Debit",
        credit_column="Credit",
        receipt_column="Receipt number",
        transaction_id_column="Transaction ID",
        header_keywords=("date and time",),
    ),
    BankFormat(
        key="westpac",
        name="Westpac",
        columns=("Date", "Narrative", "Debit Amount", "Credit Amount", "Balance"),
        date_column="Date",
        description_column="Narrative",
        date_grammar="DD MMM YYYY",
        debit_column="Debit Amount",
        credit_column="Credit Amount",
        balance_column="Balance",
        header_keywords=("narrative",),
    ),
    BankFormat(
        key="anz",
        name="ANZ",
        columns=("Date", "Amount", "Transaction Details", "Balance"),
        date_column="Date",
        description_column="Transaction Details",
        date_grammar="YYYY-MM-DD",
        amount_column="Amount",
        balance_column="Balance",
        header_keywords=("transaction details",),
    ),
    BankFormat(
        key="latitude",
        name="Latitude Credit Card",
        columns=("Date", "Card", "Description", "Debits", "Credits"),
        date_column="Date",
        description_column="Description",
        date_grammar="DD/MM/YYYY",
        debit_column="Debits",
        credit_column="Credits",
        header_keywords=("debits", "credits"),
    ),
    BankFormat(
        key="nab",
        name="NAB",
        columns=("Date", "Description", "Debit", "Credit", "Balance"),
        date_column="Date",
        description_column="Description",
        date_grammar="DD/MM/YYYY",
        debit_column="Debit",
        credit_column="Credit",
        balance_column="Balance",
        reference_column="Reference",
        header_keywords=("debit", "credit"),
    ),
    BankFormat(
        key="creditcard",
        name="Generic Credit Card",
        columns=("Date", "Description", "Amount"),
        date_column="Date",
        description_column="Description",
        date_grammar="DD/MM/YYYY",
        amount_column="Amount",
        reference_column="Reference",
        header_keywords=("date", "description", "amount"),
    ),
)

BANK_FORMATS: dict[str, BankFormat] = {f.key: f for f in _FORMATS}


def _norm_key(key: str) -> str:
    return key.strip().lower().replace(" ", "_").replace("-", "_")


def get_format(key: str) -> BankFormat:
    """Return the registry entry for ``key`` (case- and separator-insensitive)."""

    k = _norm_key(key)
    try:
        return BANK_FORMATS[k]
    except KeyError:
        raise KeyError(
            f"unknown bank format: {key!r}. Known: {', '.join(BANK_FORMATS)}"
        ) from None


def list_formats() -> list[BankFormat]:
    return list(_FORMATS)


__all__ = ["BANK_FORMATS", "DATE_GRAMMARS", "BankFormat", "get_format", "list_formats"]
