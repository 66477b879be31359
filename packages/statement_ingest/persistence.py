# ruff: noqa: I001
"""Persistence integration for statement_ingest.

Functions here read account history from, and write imported rows to, the
shared database owned by ``libs/db``. They rely on SQLAlchemy ORM models
defined in ``db.models.finance`` and a session provided by ``db.client``.
Nothing here commits: the caller's ``session_scope`` decides whether the
inserted rows and the recomputed balance land together or not at all.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db.models.finance import Account, Category, Transaction
from .logging_setup import get_logger
from .models import AccountSnapshot, ImportOutcome

_logger = get_logger("statement_ingest.persistence")


def _get_owned_account(session: Session, *, user_id: str, account_id: str) -> Account:
    account = session.get(Account, account_id)
    if account is None or account.user_id != user_id:
        raise LookupError(f"account {account_id!r} not found for user {user_id!r}")
    return account


def load_account_snapshot(
    session: Session,
    *,
    user_id: str,
    account_id: str,
) -> AccountSnapshot:
    """Collect what reconciliation needs to know about ``account_id``.

    Fingerprints are scoped to the destination account; amounts cover every
    stored transaction of the account so the balance can be derived from
    scratch.
    """

    account = _get_owned_account(session, user_id=user_id, account_id=account_id)
    rows = session.execute(
        select(Transaction.duplicate_check_hash, Transaction.amount).where(
            Transaction.account_id == account_id
        )
    ).all()
    fingerprints = frozenset(h for h, _ in rows if h)
    amounts = tuple(Decimal(a) for _, a in rows)
    _logger.debug(
        "persistence:snapshot account=%s stored=%d fingerprints=%d",
        account_id,
        len(rows),
        len(fingerprints),
    )
    return AccountSnapshot(
        account_id=account.id,
        user_id=account.user_id,
        opening_balance=Decimal(account.opening_balance or 0),
        fingerprints=fingerprints,
        amounts=amounts,
    )


class DbCategoryResolver:
    """Map category labels to ``categories.id`` for a user, creating rows on demand.

    Lookups are cached on the instance so one import touches each category
    at most once; create one resolver per session.
    """

    def __init__(self, session: Session) -> None:
        self._session = session
        self._cache: dict[tuple[str, str], str] = {}

    def resolve(self, user_id: str, category: str) -> str | None:
        name = (category or "").strip()
        if not name:
            return None
        key = (user_id, name)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        existing = self._session.execute(
            select(Category.id).where(Category.user_id == user_id, Category.name == name)
        ).scalar_one_or_none()
        if existing is None:
            existing = str(uuid.uuid4())
            self._session.add(Category(id=existing, user_id=user_id, name=name, is_default=False))
            self._session.flush()
            _logger.info("persistence:category_created user=%s name=%s", user_id, name)
        self._cache[key] = existing
        return existing


def persist_outcome(
    session: Session,
    outcome: ImportOutcome,
    *,
    user_id: str,
    currency: str = "AUD",
) -> list[str]:
    """Insert the accepted rows of ``outcome`` and store its derived balance.

    Returns the ids of the inserted ``transactions`` rows in file order.
    """

    account = _get_owned_account(session, user_id=user_id, account_id=outcome.account_id)

    ids: list[str] = []
    for accepted in outcome.inserted:
        cand = accepted.candidate
        if cand.date is None:
            # Importable candidates always carry a date; guard the NOT NULL column.
            raise ValueError(f"candidate {cand.id} has no transaction date")
        tx_id = str(uuid.uuid4())
        session.add(
            Transaction(
                id=tx_id,
                user_id=user_id,
                account_id=outcome.account_id,
                category_id=accepted.category_id,
                amount=cand.amount,
                currency=currency,
                description=cand.description,
                merchant=cand.merchant,
                reference=cand.reference,
                receipt_number=cand.receipt_number,
                external_id=cand.transaction_id,
                transaction_date=cand.date,
                balance=cand.balance,
                type="debit" if cand.amount < 0 else "credit",
                is_transfer=cand.is_transfer,
                original_data=dict(cand.raw),
                duplicate_check_hash=accepted.fingerprint,
            )
        )
        ids.append(tx_id)

    account.balance = outcome.balance
    account.updated_at = func.now()
    session.flush()
    _logger.info(
        "persistence:saved account=%s inserted=%d balance=%s",
        outcome.account_id,
        len(ids),
        outcome.balance,
    )
    return ids


__all__ = ["DbCategoryResolver", "load_account_snapshot", "persist_outcome"]
