"""File-level failures that abort an import before anything is persisted.

Row-level problems never raise; they travel on the candidates as
:class:`~statement_ingest.models.ValidationError` values.
"""

from __future__ import annotations

from collections.abc import Sequence

from .models import BatchAssessment, TransactionCandidate, ValidationError


class StatementRejected(Exception):
    """The whole statement was refused; nothing was imported.

    ``assessment`` and ``candidates`` are attached for diagnostics when the
    rejection happened after rows were classified. ``file_errors`` holds
    problems found before parsing (size, extension, emptiness).
    """

    def __init__(
        self,
        message: str,
        *,
        assessment: BatchAssessment | None = None,
        candidates: Sequence[TransactionCandidate] = (),
        file_errors: Sequence[ValidationError] = (),
    ) -> None:
        super().__init__(message)
        self.assessment = assessment
        self.candidates = tuple(candidates)
        self.file_errors = tuple(file_errors)


class UnrecognizedStatementFormat(StatementRejected):
    """No registry entry matches the statement and no fallback is configured."""


__all__ = ["StatementRejected", "UnrecognizedStatementFormat"]
