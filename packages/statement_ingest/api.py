"""Public orchestration for the ``statement_ingest`` package.

:func:`parse_statement` turns statement text into classified candidates and a
file-level verdict without touching storage. :func:`import_statement` runs the
whole pipeline against a database session: parse, load the account
snapshot, reconcile and persist. The session's owner commits; when parsing
rejects the file nothing is written.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from .config import IngestSettings
from .detect import detect_format
from .errors import StatementRejected, UnrecognizedStatementFormat
from .formats import BankFormat, get_format
from .ingest import head_lines, iter_raw_rows
from .logging_setup import get_logger
from .models import BatchAssessment, ImportOutcome, TransactionCandidate
from .reconcile import reconcile_with_snapshot
from .validation import assess_batch, validate_row

_logger = get_logger("statement_ingest.api")


@dataclass(frozen=True, slots=True)
class ParsedStatement:
    format: BankFormat
    candidates: tuple[TransactionCandidate, ...]
    assessment: BatchAssessment


def _resolve_format(text: str, bank: str | None, settings: IngestSettings) -> BankFormat:
    if bank:
        return get_format(bank)
    fmt = detect_format(head_lines(text), default=settings.default_format)
    if fmt is None:
        raise UnrecognizedStatementFormat(
            "Could not recognize the statement format; pass a bank explicitly."
        )
    return fmt


def parse_statement(
    text: str,
    *,
    bank: str | None = None,
    settings: IngestSettings | None = None,
    enforce: bool = True,
) -> ParsedStatement:
    """Detect the layout of ``text`` and validate every data row.

    ``bank`` (a registry key) skips detection. With ``enforce`` a batch the
    file-level guard refuses raises :class:`StatementRejected`; without it
    the verdict is only reported on the returned ``assessment``.
    """

    settings = settings or IngestSettings()
    fmt = _resolve_format(text, bank, settings)

    candidates = tuple(
        validate_row(row, fmt, i) for i, row in enumerate(iter_raw_rows(text, fmt))
    )
    assessment = assess_batch(candidates, min_valid_fraction=settings.min_valid_fraction)
    _logger.info(
        "parse:done format=%s total=%d valid=%d errors=%d acceptable=%s",
        fmt.key,
        assessment.stats.total,
        assessment.stats.valid,
        assessment.stats.errors,
        assessment.is_acceptable,
    )
    for warning in assessment.warnings:
        _logger.warning("parse:warning format=%s %s", fmt.key, warning)

    if enforce and not assessment.is_acceptable:
        raise StatementRejected(
            " ".join(assessment.errors),
            assessment=assessment,
            candidates=candidates,
        )
    return ParsedStatement(format=fmt, candidates=candidates, assessment=assessment)


def import_statement(
    session: Session,
    text: str,
    *,
    user_id: str,
    account_id: str,
    bank: str | None = None,
    settings: IngestSettings | None = None,
) -> ImportOutcome:
    """Parse ``text`` and store its new transactions in ``account_id``.

    Re-importing the same statement inserts nothing: every row is skipped
    as a duplicate and the derived balance is unchanged.
    """

    # Local import keeps parse-only consumers free of the DB models.
    from .persistence import DbCategoryResolver, load_account_snapshot, persist_outcome

    settings = settings or IngestSettings()
    parsed = parse_statement(text, bank=bank, settings=settings)

    snapshot = load_account_snapshot(session, user_id=user_id, account_id=account_id)
    outcome = reconcile_with_snapshot(
        parsed.candidates,
        snapshot,
        category_resolver=DbCategoryResolver(session),
        use_transaction_id=settings.fingerprint_use_transaction_id,
    )
    persist_outcome(session, outcome, user_id=user_id, currency=settings.currency)
    return outcome


__all__ = ["ParsedStatement", "import_statement", "parse_statement"]
