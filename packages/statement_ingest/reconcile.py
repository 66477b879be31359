"""Insert-vs-skip partitioning and derived balance recomputation.

Reconciliation walks the candidates in file order:

- ``error`` rows go to ``rejected`` and take no further part;
- every other row is fingerprinted against the destination account; a
  fingerprint already in the working set (stored history plus rows accepted
  earlier in this batch) is a duplicate and goes to ``skipped``;
- the rest go to ``inserted`` and their fingerprint joins the working set,
  so the first occurrence within a batch wins.

The account balance is then derived from scratch: opening balance plus every
amount associated with the account (existing rows and newly inserted ones).
It is never patched incrementally.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from .duplicates import fingerprint_candidate
from .logging_setup import get_logger
from .models import (
    AcceptedTransaction,
    AccountSnapshot,
    CategoryResolver,
    ImportOutcome,
    TransactionCandidate,
)
from .normalizers import ZERO

_logger = get_logger("statement_ingest.reconcile")


def recompute_balance(opening_balance: Decimal, amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, Decimal(opening_balance)).quantize(Decimal("0.01"))


def reconcile(
    candidates: Sequence[TransactionCandidate],
    existing_fingerprints: Iterable[str],
    account_id: str,
    *,
    user_id: str,
    opening_balance: Decimal = ZERO,
    existing_amounts: Iterable[Decimal] = (),
    category_resolver: CategoryResolver | None = None,
    use_transaction_id: bool = False,
) -> ImportOutcome:
    """Partition ``candidates`` into inserted/skipped/rejected and derive the balance."""

    seen: set[str] = set(existing_fingerprints)
    inserted: list[AcceptedTransaction] = []
    skipped: list[TransactionCandidate] = []
    rejected: list[TransactionCandidate] = []

    for cand in candidates:
        if not cand.is_importable:
            rejected.append(cand)
            continue
        fp = fingerprint_candidate(
            cand,
            user_id=user_id,
            account_id=account_id,
            use_transaction_id=use_transaction_id,
        )
        if fp in seen:
            skipped.append(cand)
            continue
        seen.add(fp)
        category_id = (
            category_resolver.resolve(user_id, cand.category) if category_resolver else None
        )
        inserted.append(AcceptedTransaction(candidate=cand, fingerprint=fp, category_id=category_id))

    balance = recompute_balance(
        opening_balance,
        [*existing_amounts, *(a.candidate.amount for a in inserted)],
    )

    _logger.info(
        "reconcile:done account=%s inserted=%d skipped=%d rejected=%d balance=%s",
        account_id,
        len(inserted),
        len(skipped),
        len(rejected),
        balance,
    )
    return ImportOutcome(
        account_id=account_id,
        inserted=tuple(inserted),
        skipped=tuple(skipped),
        rejected=tuple(rejected),
        balance=balance,
    )


def reconcile_with_snapshot(
    candidates: Sequence[TransactionCandidate],
    snapshot: AccountSnapshot,
    *,
    category_resolver: CategoryResolver | None = None,
    use_transaction_id: bool = False,
) -> ImportOutcome:
    return reconcile(
        candidates,
        snapshot.fingerprints,
        snapshot.account_id,
        user_id=snapshot.user_id,
        opening_balance=snapshot.opening_balance,
        existing_amounts=snapshot.amounts,
        category_resolver=category_resolver,
        use_transaction_id=use_transaction_id,
    )


__all__ = ["recompute_balance", "reconcile", "reconcile_with_snapshot"]
