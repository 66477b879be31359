# ruff: noqa: I001
"""CLI for the ``statement_ingest`` package.

This module exposes callable command handlers (``cmd_preview``,
``cmd_import`` ...) and a Typer-based console interface. Environment
variables (``DATABASE_URL`` and ``STATEMENT_INGEST_*``) are loaded from a
local ``.env`` using ``python-dotenv`` before delegating to command logic.
Business logic lives in ``statement_ingest.api`` and related modules.

Exit codes: ``0`` success, ``1`` the statement or account was refused,
``2`` invalid options or configuration.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .logging_setup import configure_logging


def _err(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def _load_settings():
    from .config import IngestSettings

    return IngestSettings.from_env()


def _check_bank(bank: str | None) -> str | None:
    if bank is None:
        return None
    from .formats import get_format

    return get_format(bank).key


def _report_rejection(exc) -> None:
    _err(str(exc))
    for fe in exc.file_errors:
        print(f"  file: {fe.message} ({fe.value})", file=sys.stderr)
    if exc.assessment is not None:
        stats = exc.assessment.stats
        print(
            f"  rows: total={stats.total} valid={stats.valid} errors={stats.errors}",
            file=sys.stderr,
        )
    for cand in exc.candidates:
        for e in cand.errors:
            print(f"  line {cand.line_number}: {e.field}: {e.message}", file=sys.stderr)


# ---- Command handlers --------------------------------------------------------


def cmd_formats() -> int:
    """List the registered bank layouts in detection order."""

    from .formats import list_formats

    for fmt in list_formats():
        mode = "debit/credit" if fmt.uses_debit_credit else "amount"
        header = "header" if fmt.has_header else "headerless"
        typer.echo(f"{fmt.key:<14} {fmt.name:<22} {fmt.date_grammar:<15} {mode:<13} {header}")
    return 0


def cmd_preview(csv_path: Path, *, bank: str | None = None) -> int:
    """Parse a statement and print per-row results without persisting."""

    from pydantic import ValidationError as SettingsError

    from .api import parse_statement
    from .errors import StatementRejected
    from .ingest import load_statement_text
    from .validation import summarize_candidates

    try:
        settings = _load_settings()
        bank_key = _check_bank(bank)
    except (SettingsError, ValueError, KeyError) as e:
        _err(str(e))
        return 2

    try:
        text = load_statement_text(csv_path, max_bytes=settings.max_file_bytes)
        parsed = parse_statement(text, bank=bank_key, settings=settings, enforce=False)
    except StatementRejected as e:
        _report_rejection(e)
        return 1

    typer.echo(f"format: {parsed.format.key} ({parsed.format.name})")
    for cand in parsed.candidates:
        day = cand.date.isoformat() if cand.date else "----------"
        line = (
            f"{cand.line_number:>5} {cand.status.value:<7} {day} {cand.amount:>12} "
            f"{cand.category:<16} {cand.merchant}"
        )
        typer.echo(line)
        for e in cand.errors:
            typer.echo(f"        ! {e.field}: {e.message}")

    summary = summarize_candidates(parsed.candidates)
    typer.echo(
        f"rows: total={summary.total_rows} valid={summary.valid_rows} "
        f"errors={summary.error_rows} warnings={summary.warning_rows}"
    )
    if summary.earliest is not None:
        typer.echo(f"range: {summary.earliest.isoformat()} .. {summary.latest.isoformat()}")
    typer.echo(f"total: {summary.total_amount} average: {summary.average_amount}")
    for name, count in sorted(summary.categories.items()):
        typer.echo(f"  {name}: {count}")
    for w in parsed.assessment.warnings:
        typer.echo(f"warning: {w}")
    for msg in parsed.assessment.errors:
        typer.echo(f"rejected: {msg}")
    return 0 if parsed.assessment.is_acceptable else 1


def cmd_import(
    csv_path: Path,
    *,
    user_id: str,
    account_id: str,
    bank: str | None = None,
    database_url: str | None = None,
) -> int:
    """Import a statement into an account and print the outcome."""

    from pydantic import ValidationError as SettingsError

    from db.client import session_scope
    from .api import import_statement
    from .errors import StatementRejected
    from .ingest import load_statement_text

    try:
        settings = _load_settings()
        bank_key = _check_bank(bank)
    except (SettingsError, ValueError, KeyError) as e:
        _err(str(e))
        return 2

    try:
        text = load_statement_text(csv_path, max_bytes=settings.max_file_bytes)
        with session_scope(database_url=database_url) as session:
            outcome = import_statement(
                session,
                text,
                user_id=user_id,
                account_id=account_id,
                bank=bank_key,
                settings=settings,
            )
    except StatementRejected as e:
        _report_rejection(e)
        return 1
    except RuntimeError as e:
        # Missing DATABASE_URL.
        _err(str(e))
        return 2
    except LookupError as e:
        _err(str(e.args[0]) if e.args else "account not found")
        return 1

    typer.echo(
        f"imported={outcome.inserted_count} skipped={outcome.skipped_count} "
        f"rejected={outcome.rejected_count} balance={outcome.balance}"
    )
    for cand in outcome.rejected:
        reasons = "; ".join(e.message for e in cand.errors)
        typer.echo(f"  line {cand.line_number}: {reasons}")
    return 0


def cmd_init_db(*, database_url: str | None = None) -> int:
    """Create the ingest tables directly from the ORM metadata."""

    from db import Base
    from db.client import get_engine

    try:
        engine = get_engine(database_url=database_url)
    except RuntimeError as e:
        _err(str(e))
        return 2
    Base.metadata.create_all(bind=engine)
    typer.echo(f"initialized {engine.url.render_as_string(hide_password=True)}")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Import bank statement CSV exports into an account, skipping rows "
        "already imported. Loads DATABASE_URL and STATEMENT_INGEST_* from a "
        "local .env before running."
    ),
)


# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect these when used as default values below.
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--csv-path",
    help="Path to a bank statement CSV export",
    dir_okay=False,
    file_okay=True,
    exists=False,  # allow non-existent here; the handler will report nice errors
)
BANK_OPTION: OptionInfo = typer.Option(
    "--bank", help="Bank format key (skips detection). See `formats`."
)
DATABASE_URL_OPTION: OptionInfo = typer.Option(
    "--database-url", help="Override DATABASE_URL (falls back to env var)."
)


@app.command("formats")
def formats_cmd() -> None:
    """List supported bank formats."""

    raise typer.Exit(cmd_formats())


@app.command("preview")
def preview_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    bank: Annotated[str | None, BANK_OPTION] = None,
) -> None:
    """Parse and validate a statement without writing anything."""

    raise typer.Exit(cmd_preview(csv_path, bank=bank))


@app.command("import")
def import_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    user_id: Annotated[str, typer.Option(..., "--user-id", help="Owner of the account")],
    account_id: Annotated[str, typer.Option(..., "--account-id", help="Destination account")],
    bank: Annotated[str | None, BANK_OPTION] = None,
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Import a statement; re-importing the same file is a no-op."""

    raise typer.Exit(
        cmd_import(
            csv_path,
            user_id=user_id,
            account_id=account_id,
            bank=bank,
            database_url=database_url,
        )
    )


@app.command("init-db")
def init_db_cmd(
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Create tables for a fresh development database (use Alembic elsewhere)."""

    raise typer.Exit(cmd_init_db(database_url=database_url))


@app.callback()
def _root() -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    # Load environment from .env in CWD (override=False to keep existing env)
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    # Central logging setup so child loggers inherit configuration
    configure_logging()


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m statement_ingest.cli`
    app()
