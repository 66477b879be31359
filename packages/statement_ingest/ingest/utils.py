"""File loading and line → :class:`RawRow` helpers.

The statement is read fully into memory (files are bounded by
``max_file_bytes``). Line splitting happens only in
:func:`statement_ingest.tokenizer.tokenize`; this module decides which lines
are headers and which are data.
"""

from __future__ import annotations

from collections.abc import Iterator
from os import PathLike
from pathlib import Path

from ..detect import looks_like_header
from ..errors import StatementRejected
from ..formats import BankFormat
from ..models import RawRow, ValidationError
from ..tokenizer import tokenize

DEFAULT_MAX_FILE_BYTES = 10 * 1024 * 1024


def check_statement_file(
    path: str | PathLike[str],
    *,
    max_bytes: int = DEFAULT_MAX_FILE_BYTES,
) -> list[ValidationError]:
    """Return file-level problems (missing, wrong type, empty, too large)."""

    p = Path(path)
    if not p.is_file():
        return [ValidationError(field="file", message="File not found", value=str(p))]

    errors: list[ValidationError] = []
    if p.suffix.lower() != ".csv":
        errors.append(
            ValidationError(field="file", message="File must be in CSV format", value=p.suffix)
        )
    size = p.stat().st_size
    if size == 0:
        errors.append(ValidationError(field="file", message="File cannot be empty", value=size))
    elif size > max_bytes:
        errors.append(
            ValidationError(
                field="file",
                message=f"File size must be less than {max_bytes / 1024 / 1024:g}MB",
                value=f"{size / 1024 / 1024:.2f}MB",
            )
        )
    return errors


def load_statement_text(
    path: str | PathLike[str],
    *,
    max_bytes: int = DEFAULT_MAX_FILE_BYTES,
) -> str:
    """Validate and read a statement file as UTF-8 (a leading BOM is dropped)."""

    problems = check_statement_file(path, max_bytes=max_bytes)
    if problems:
        raise StatementRejected(
            "; ".join(e.message for e in problems),
            file_errors=problems,
        )
    return Path(path).read_text(encoding="utf-8-sig")


def iter_raw_rows(text: str, fmt: BankFormat) -> Iterator[RawRow]:
    """Yield data rows of ``text`` tokenized under ``fmt``.

    Blank lines are skipped. The first ``fmt.header_rows`` non-blank lines are
    consumed as headers; the last of them names the columns for the rows
    that follow, unless that line does not look like a header at all, in
    which case rows are read positionally against ``fmt.columns``.
    ``line_number`` is the 1-based physical line in ``text``.
    """

    header: tuple[str, ...] | None = None
    to_skip = fmt.header_rows
    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        tokens = tuple(tokenize(line, fmt.delimiter))
        if to_skip > 0:
            if to_skip == 1 and not looks_like_header(tokens):
                # Header missing from an export that normally has one: read positionally.
                to_skip = 0
            else:
                to_skip -= 1
                if to_skip == 0:
                    header = tuple(t.strip() for t in tokens)
                continue
        yield RawRow(fields=tokens, header=header, line_number=line_number)


def head_lines(text: str, limit: int = 5) -> list[str]:
    """Return up to ``limit`` leading non-blank lines for format detection."""

    out: list[str] = []
    for line in text.splitlines():
        if line.strip():
            out.append(line)
            if len(out) >= limit:
                break
    return out


__all__ = [
    "DEFAULT_MAX_FILE_BYTES",
    "check_statement_file",
    "head_lines",
    "iter_raw_rows",
    "load_statement_text",
]
