"""Data models for the ``statement_ingest`` pipeline.

Every value here is a frozen ``dataclass``: candidates and outcomes are
created once by the stage that owns them and never mutated afterwards.
Amounts are ``Decimal`` quantized to cents (positive = inflow/credit,
negative = outflow/debit) and dates are ``datetime.date``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .formats import BankFormat


class RowStatus(StrEnum):
    """Terminal state of a validated row.

    ``WARNING`` is reserved: nothing emits it today, but it is counted and
    treated as importable wherever statuses are consumed.
    """

    VALID = "valid"
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class ValidationError:
    """A structured, row-level problem attached to a candidate."""

    field: str
    message: str
    value: Any = None


@dataclass(frozen=True, slots=True)
class RawRow:
    """One tokenized input line plus the header it was read under (if any)."""

    fields: tuple[str, ...]
    header: tuple[str, ...] | None = None
    line_number: int = 0

    def get(self, column: str | None, fmt: BankFormat) -> str:
        """Return the raw value for ``column`` or ``""`` when absent.

        Header rows are matched by name (exact first, then case-insensitive);
        headerless rows are matched by the column's position in
        ``fmt.columns``.
        """

        if not column:
            return ""
        if self.header is not None:
            names = [h.strip() for h in self.header]
            if column in names:
                pos = names.index(column)
            else:
                folded = [n.casefold() for n in names]
                if column.casefold() not in folded:
                    return ""
                pos = folded.index(column.casefold())
        else:
            if column not in fmt.columns:
                return ""
            pos = fmt.columns.index(column)
        return self.fields[pos] if pos < len(self.fields) else ""

    def as_dict(self, fmt: BankFormat) -> dict[str, str]:
        names = self.header if self.header is not None else fmt.columns
        return {
            name.strip(): (self.fields[i] if i < len(self.fields) else "")
            for i, name in enumerate(names)
        }


@dataclass(frozen=True, slots=True)
class TransactionCandidate:
    """Normalized, not-yet-persisted transaction for one input row."""

    id: str
    date: date | None
    description: str
    amount: Decimal
    category: str
    merchant: str
    status: RowStatus
    errors: tuple[ValidationError, ...] = ()
    balance: Decimal | None = None
    reference: str | None = None
    receipt_number: str | None = None
    transaction_id: str | None = None
    is_transfer: bool = False
    raw: Mapping[str, str] = field(default_factory=dict)
    line_number: int = 0

    @property
    def is_importable(self) -> bool:
        return self.status is not RowStatus.ERROR


@dataclass(frozen=True, slots=True)
class BatchStats:
    total: int
    valid: int
    errors: int
    warnings: int


@dataclass(frozen=True, slots=True)
class BatchAssessment:
    """File-level verdict computed after every row has been classified."""

    stats: BatchStats
    is_acceptable: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class UploadSummary:
    total_rows: int
    valid_rows: int
    error_rows: int
    warning_rows: int
    categories: Mapping[str, int]
    earliest: date | None
    latest: date | None
    total_amount: Decimal
    average_amount: Decimal


class CategoryResolver(Protocol):
    """Capability that maps a category label to a storage identifier."""

    def resolve(self, user_id: str, category: str) -> str | None: ...


@dataclass(frozen=True, slots=True)
class AcceptedTransaction:
    candidate: TransactionCandidate
    fingerprint: str
    category_id: str | None = None


@dataclass(frozen=True, slots=True)
class AccountSnapshot:
    """What the reconciler needs to know about the destination account."""

    account_id: str
    user_id: str
    opening_balance: Decimal
    fingerprints: frozenset[str]
    amounts: tuple[Decimal, ...] = ()


@dataclass(frozen=True, slots=True)
class ImportOutcome:
    """Result of one reconciliation run."""

    account_id: str
    inserted: tuple[AcceptedTransaction, ...]
    skipped: tuple[TransactionCandidate, ...]
    rejected: tuple[TransactionCandidate, ...]
    balance: Decimal

    @property
    def inserted_count(self) -> int:
        return len(self.inserted)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)


__all__ = [
    "AcceptedTransaction",
    "AccountSnapshot",
    "BatchAssessment",
    "BatchStats",
    "CategoryResolver",
    "ImportOutcome",
    "RawRow",
    "RowStatus",
    "TransactionCandidate",
    "UploadSummary",
    "ValidationError",
]
