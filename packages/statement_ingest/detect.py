"""Pick a :class:`~statement_ingest.formats.BankFormat` from a file's first line.

Detection strategy:
- A first line with no header words whose first field is a strict
  ``d/m/yyyy`` date selects the headerless numeric-first layout.
- Otherwise the first header format whose keywords all appear among the
  lower-cased header tokens wins (registry order).
- Otherwise the configured default format is returned. This fallback is a
  convenience, not a guarantee: a wrong guess shows up later as a batch with
  too many error rows, which the file-level guard rejects.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from .formats import BankFormat, get_format, list_formats
from .logging_setup import get_logger
from .tokenizer import tokenize

_logger = get_logger("statement_ingest.detect")

_NUMERIC_DATE_RE = re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$")
_DATA_LEAD_RE = re.compile(r"^\d")
_HEADER_WORDS: tuple[str, ...] = (
    "date",
    "description",
    "narrative",
    "details",
    "amount",
    "debit",
    "credit",
    "balance",
)


def _first_non_empty(lines: Iterable[str]) -> str | None:
    for line in lines:
        if line.strip():
            return line
    return None


def looks_like_header(tokens: Sequence[str]) -> bool:
    """True when ``tokens`` read as column names rather than a data row.

    A line whose first field starts with a digit (a date, in every supported
    layout) is data even if a description mentions "debit" or "credit".
    """

    if not tokens or _DATA_LEAD_RE.match(tokens[0].strip()):
        return False
    return any(word in tok.lower() for tok in tokens for word in _HEADER_WORDS)


def detect_format(
    lines: Iterable[str],
    *,
    default: str | None = "creditcard",
) -> BankFormat | None:
    """Return the matching format, the ``default`` fallback, or ``None``.

    ``lines`` only needs to contain the leading line(s) of the file; data rows
    beyond the first non-empty line are never inspected.
    """

    first = _first_non_empty(lines)
    if first is None:
        _logger.info("detect:empty_input")
        return None

    tokens = tokenize(first)
    lowered = {t.strip().lower() for t in tokens}

    headerless = [f for f in list_formats() if not f.has_header]
    if not looks_like_header(tokens) and _NUMERIC_DATE_RE.match(tokens[0].strip()):
        if headerless:
            _logger.debug("detect:headerless format=%s", headerless[0].key)
            return headerless[0]

    for fmt in list_formats():
        if not fmt.has_header or not fmt.header_keywords:
            continue
        if all(kw in lowered for kw in fmt.header_keywords):
            _logger.debug("detect:header_match format=%s", fmt.key)
            return fmt

    if default is None:
        _logger.info("detect:unrecognized first_line=%r", first[:80])
        return None
    fallback = get_format(default)
    _logger.warning(
        "detect:fallback format=%s first_line=%r", fallback.key, first[:80]
    )
    return fallback


__all__ = ["detect_format", "looks_like_header"]
