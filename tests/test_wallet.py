from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import ConcurrentModification, InsufficientFunds, PolicyNotFound, UnauthorizedAccess, WalletUnderflow
from app.models import LedgerType, Policy, WalletLedger
from app.services.wallet import adjust_wallet_balance, get_wallet_balance, new_reference, run_policy_transaction


class _CountingSession:
    def __init__(self):
        self.commits = 0
        self.rollbacks = 0

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1


def test_new_reference_format():
    ref = new_reference("COV")
    assert ref.startswith("COV_")
    assert len(ref) == len("COV_") + 16
    assert ref == ref.upper()
    assert new_reference("COV") != ref


def test_transaction_retries_then_gives_up():
    session = _CountingSession()
    calls = {"n": 0}

    def _unit():
        calls["n"] += 1
        raise StaleDataError("version mismatch")

    with pytest.raises(ConcurrentModification):
        run_policy_transaction(session, _unit, label="test", max_attempts=3)

    assert calls["n"] == 3
    assert session.rollbacks == 3
    assert session.commits == 0


def test_transaction_succeeds_after_a_lost_race():
    session = _CountingSession()
    calls = {"n": 0}

    def _unit():
        calls["n"] += 1
        if calls["n"] == 1:
            raise StaleDataError("version mismatch")
        return "done"

    assert run_policy_transaction(session, _unit, label="test", max_attempts=3) == "done"
    assert session.rollbacks == 1
    assert session.commits == 1


def test_transaction_propagates_domain_errors_without_retry():
    session = _CountingSession()
    calls = {"n": 0}

    def _unit():
        calls["n"] += 1
        raise ValueError("boom")

    with pytest.raises(ValueError):
        run_policy_transaction(session, _unit, label="test", max_attempts=5)

    assert calls["n"] == 1
    assert session.rollbacks == 1
    assert session.commits == 0


def _integrity_error(message):
    return IntegrityError("INSERT INTO coverage_records ...", {}, Exception(message))


def test_transaction_retries_duplicate_coverage_day():
    session = _CountingSession()
    calls = {"n": 0}

    def _unit():
        calls["n"] += 1
        if calls["n"] == 1:
            raise _integrity_error(
                "UNIQUE constraint failed: coverage_records.policy_id, coverage_records.coverage_date"
            )
        return "done"

    assert run_policy_transaction(session, _unit, label="test", max_attempts=3) == "done"
    assert session.rollbacks == 1


def test_transaction_retries_named_unique_violation():
    session = _CountingSession()

    def _unit():
        raise _integrity_error(
            'duplicate key value violates unique constraint "uq_coverage_records_policy_date"'
        )

    with pytest.raises(ConcurrentModification):
        run_policy_transaction(session, _unit, label="test", max_attempts=2)
    assert session.rollbacks == 2


def test_transaction_does_not_retry_other_integrity_errors():
    session = _CountingSession()
    calls = {"n": 0}

    def _unit():
        calls["n"] += 1
        raise _integrity_error("NOT NULL constraint failed: wallet_ledger.description")

    with pytest.raises(IntegrityError):
        run_policy_transaction(session, _unit, label="test", max_attempts=5)

    assert calls["n"] == 1
    assert session.rollbacks == 1
    assert session.commits == 0


def test_top_up_credits_wallet_and_ledger(db, make_policy):
    number = make_policy("20.00")

    policy = adjust_wallet_balance(db, number, Decimal("30.50"), user_id=1)

    assert policy.wallet_balance == Decimal("50.50")
    entries = db.query(WalletLedger).filter(WalletLedger.policy_id == policy.id).all()
    assert len(entries) == 1
    assert entries[0].entry_type == LedgerType.CREDIT
    assert entries[0].amount == Decimal("30.50")
    assert entries[0].reference.startswith("TOPUP_")


def test_negative_adjustment_debits_wallet(db, make_policy):
    number = make_policy("20.00")

    policy = adjust_wallet_balance(db, number, Decimal("-7.25"))

    assert policy.wallet_balance == Decimal("12.75")
    entry = db.query(WalletLedger).filter(WalletLedger.policy_id == policy.id).one()
    assert entry.entry_type == LedgerType.DEBIT
    assert entry.reference.startswith("ADJ_")


def test_adjustment_cannot_overdraw(db, make_policy):
    number = make_policy("20.00")

    with pytest.raises(WalletUnderflow) as excinfo:
        adjust_wallet_balance(db, number, Decimal("-20.01"))

    assert isinstance(excinfo.value, InsufficientFunds)
    assert excinfo.value.code == "WALLET_UNDERFLOW"
    assert excinfo.value.status_code == 400

    db.expire_all()
    policy = db.query(Policy).filter(Policy.policy_number == number).one()
    assert policy.wallet_balance == Decimal("20.00")
    assert db.query(WalletLedger).count() == 0


def test_adjustment_requires_owner(db, make_policy):
    number = make_policy("20.00", user_id=1)

    with pytest.raises(UnauthorizedAccess):
        adjust_wallet_balance(db, number, Decimal("10"), user_id=2)

    assert get_wallet_balance(db, number) == Decimal("20.00")


def test_balance_of_unknown_policy(db, plan):
    with pytest.raises(PolicyNotFound):
        get_wallet_balance(db, "POL000000MISSING")
