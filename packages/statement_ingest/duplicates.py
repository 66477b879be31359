"""Duplicate-check fingerprints.

A fingerprint is a truncated SHA-256 over a canonical JSON payload of
``(user, account, date, description, amount)``. The description is
lower-cased with whitespace collapsed so cosmetic differences don't defeat
deduplication. SHA-256 is used for its negligible accidental-collision rate,
not for secrecy.

Two genuinely separate purchases sharing all five values on the same day
(two identical coffees) get the same fingerprint and the second is treated
as a duplicate. That is the documented behavior. A bank-supplied
transaction id can be mixed in as a tiebreaker when the caller opts in
(``use_transaction_id``); changing the hashed fields changes dedup semantics
for stored data, hence ``FINGERPRINT_VERSION`` in the payload.
"""

from __future__ import annotations

import datetime as dt
import hashlib
import json
from decimal import ROUND_HALF_UP, Decimal

from .models import TransactionCandidate

FINGERPRINT_VERSION = 1
FINGERPRINT_LENGTH = 16


def normalize_description(description: str) -> str:
    return " ".join((description or "").split()).lower()


def compute_fingerprint(
    *,
    user_id: str,
    account_id: str,
    date: dt.date | str | None,
    description: str,
    amount: Decimal | int | str,
    transaction_id: str | None = None,
) -> str:
    """Return the fixed-length hex fingerprint for one transaction."""

    amt = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if amt == 0:
        amt = abs(amt)  # -0.00 and 0.00 hash alike
    day = date.isoformat() if hasattr(date, "isoformat") else (date or None)
    payload: dict[str, object] = {
        "v": FINGERPRINT_VERSION,
        "user": str(user_id),
        "account": str(account_id),
        "date": day,
        "description": normalize_description(description),
        "amount": f"{amt:.2f}",
    }
    tx_id = (transaction_id or "").strip()
    if tx_id:
        payload["transaction_id"] = tx_id

    data = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(data.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def fingerprint_candidate(
    candidate: TransactionCandidate,
    *,
    user_id: str,
    account_id: str,
    use_transaction_id: bool = False,
) -> str:
    return compute_fingerprint(
        user_id=user_id,
        account_id=account_id,
        date=candidate.date,
        description=candidate.description,
        amount=candidate.amount,
        transaction_id=candidate.transaction_id if use_transaction_id else None,
    )


__all__ = [
    "FINGERPRINT_LENGTH",
    "FINGERPRINT_VERSION",
    "compute_fingerprint",
    "fingerprint_candidate",
    "normalize_description",
]
