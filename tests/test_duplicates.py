from datetime import date
from decimal import Decimal

from statement_ingest.duplicates import (
    FINGERPRINT_LENGTH,
    compute_fingerprint,
    fingerprint_candidate,
    normalize_description,
)
from statement_ingest.models import RowStatus, TransactionCandidate


def _fp(**overrides) -> str:
    values = {
        "user_id": "user-1",
        "account_id": "acc-1",
        "date": date(2024, 1, 15),
        "description": "WOOLWORTHS 1234",
        "amount": Decimal("-85.50"),
    }
    values.update(overrides)
    return compute_fingerprint(**values)


def test_fingerprint_is_fixed_length_hex():
    fp = _fp()
    assert len(fp) == FINGERPRINT_LENGTH
    int(fp, 16)


def test_cosmetic_description_differences_do_not_matter():
    assert _fp(description="  woolworths   1234 ") == _fp()
    assert normalize_description("  A\tB  c ") == "a b c"


def test_amount_representation_does_not_matter():
    assert _fp(amount="-85.5") == _fp()
    assert _fp(amount=Decimal("-0.00")) == _fp(amount=Decimal("0"))
    assert _fp(date="2024-01-15") == _fp()


def test_each_identity_field_changes_the_fingerprint():
    base = _fp()
    assert _fp(user_id="user-2") != base
    assert _fp(account_id="acc-2") != base
    assert _fp(date=date(2024, 1, 16)) != base
    assert _fp(description="COLES 1234") != base
    assert _fp(amount=Decimal("85.50")) != base


def test_transaction_id_only_used_when_given():
    assert _fp(transaction_id="  ") == _fp()
    assert _fp(transaction_id="T-1") != _fp()
    assert _fp(transaction_id="T-1") != _fp(transaction_id="T-2")


def test_fingerprint_candidate_opts_into_transaction_id():
    cand = TransactionCandidate(
        id="tx_0",
        date=date(2024, 1, 15),
        description="WOOLWORTHS 1234",
        amount=Decimal("-85.50"),
        category="Groceries",
        merchant="WOOLWORTHS",
        status=RowStatus.VALID,
        transaction_id="T-1",
    )
    plain = fingerprint_candidate(cand, user_id="user-1", account_id="acc-1")
    assert plain == _fp()
    with_id = fingerprint_candidate(
        cand, user_id="user-1", account_id="acc-1", use_transaction_id=True
    )
    assert with_id == _fp(transaction_id="T-1")
