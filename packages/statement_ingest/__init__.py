"""Public interface for the ``statement_ingest`` package.

This module exposes the package's API functions and public models/types as the
stable import surface. There is no runtime logic here, only symbol re-exports.
Persistence helpers live in ``statement_ingest.persistence`` and are not
imported here so parse-only consumers never load the DB models.
"""

from .api import ParsedStatement, import_statement, parse_statement
from .categorization import DEFAULT_RULES, CategoryRule, categorize, is_transfer
from .config import IngestSettings
from .detect import detect_format
from .duplicates import compute_fingerprint, fingerprint_candidate
from .errors import StatementRejected, UnrecognizedStatementFormat
from .formats import BANK_FORMATS, BankFormat, get_format, list_formats
from .merchants import extract_merchant
from .models import (
    AcceptedTransaction,
    AccountSnapshot,
    BatchAssessment,
    BatchStats,
    ImportOutcome,
    RawRow,
    RowStatus,
    TransactionCandidate,
    UploadSummary,
    ValidationError,
)
from .normalizers import clean_amount, normalize_amount, normalize_date
from .reconcile import recompute_balance, reconcile, reconcile_with_snapshot
from .tokenizer import tokenize
from .validation import assess_batch, summarize_candidates, validate_row

__all__ = [
    # API
    "import_statement",
    "parse_statement",
    "ParsedStatement",
    # Pipeline stages
    "assess_batch",
    "categorize",
    "clean_amount",
    "compute_fingerprint",
    "detect_format",
    "extract_merchant",
    "fingerprint_candidate",
    "get_format",
    "is_transfer",
    "list_formats",
    "normalize_amount",
    "normalize_date",
    "recompute_balance",
    "reconcile",
    "reconcile_with_snapshot",
    "summarize_candidates",
    "tokenize",
    "validate_row",
    # Models / config / errors
    "AcceptedTransaction",
    "AccountSnapshot",
    "BANK_FORMATS",
    "BankFormat",
    "BatchAssessment",
    "BatchStats",
    "CategoryRule",
    "DEFAULT_RULES",
    "ImportOutcome",
    "IngestSettings",
    "RawRow",
    "RowStatus",
    "StatementRejected",
    "TransactionCandidate",
    "UnrecognizedStatementFormat",
    "UploadSummary",
    "ValidationError",
]
