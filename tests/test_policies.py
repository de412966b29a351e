from datetime import date
from decimal import Decimal

import pytest

from app.core.errors import ActivePolicyExists, PlanNotFound, PolicyNotActive, UnauthorizedAccess
from app.models import LedgerType, PolicyStatus, WalletLedger
from app.services.policies import (
    add_months,
    cancel_policy,
    create_policy,
    generate_policy_number,
    get_policy,
    list_user_policies,
    renew_policy,
)

TODAY = date(2026, 1, 10)


def test_policy_number_format():
    number = generate_policy_number(TODAY)
    assert number.startswith("POL202601")
    assert len(number) == len("POL202601") + 8


def test_create_policy_with_opening_balance(db, plan):
    policy = create_policy(db, user_id=7, plan_code="gig_basic", today=TODAY, initial_wallet_top_up=Decimal("50"))

    assert policy.policy_number.startswith("POL202601")
    assert policy.status == PolicyStatus.ACTIVE
    assert policy.start_date == TODAY
    assert policy.end_date == date(2027, 1, 10)
    assert policy.wallet_balance == Decimal("50.00")
    assert policy.total_premium_paid == Decimal("0")
    assert policy.plan_id == plan.id

    entry = db.query(WalletLedger).filter(WalletLedger.policy_id == policy.id).one()
    assert entry.entry_type == LedgerType.CREDIT
    assert entry.amount == Decimal("50.00")


def test_create_policy_without_top_up_writes_no_ledger(db, plan):
    policy = create_policy(db, user_id=7, plan_code="GIG_BASIC", today=TODAY)

    assert policy.wallet_balance == Decimal("0")
    assert db.query(WalletLedger).count() == 0


def test_only_one_active_policy_per_user(db, plan):
    create_policy(db, user_id=7, plan_code="GIG_BASIC", today=TODAY)

    with pytest.raises(ActivePolicyExists):
        create_policy(db, user_id=7, plan_code="GIG_BASIC", today=TODAY)

    assert len(list_user_policies(db, 7)) == 1


def test_unknown_plan(db, plan):
    with pytest.raises(PlanNotFound):
        create_policy(db, user_id=7, plan_code="GIG_DIAMOND", today=TODAY)


def test_cancel_policy(db, make_policy):
    number = make_policy("20.00")

    policy = cancel_policy(db, number, user_id=1)

    assert policy.status == PolicyStatus.CANCELLED
    assert policy.auto_renew is False
    with pytest.raises(PolicyNotActive):
        cancel_policy(db, number, user_id=1)


def test_cancelled_policy_allows_a_new_purchase(db, make_policy):
    number = make_policy("20.00", user_id=7)
    cancel_policy(db, number)

    policy = create_policy(db, user_id=7, plan_code="GIG_BASIC", today=TODAY)

    assert policy.status == PolicyStatus.ACTIVE
    assert len(list_user_policies(db, 7)) == 2


def test_get_policy_checks_owner(db, make_policy):
    number = make_policy("20.00", user_id=1)

    assert get_policy(db, number, user_id=1).policy_number == number
    with pytest.raises(UnauthorizedAccess):
        get_policy(db, number, user_id=2)


def test_add_months_clamps_to_month_end():
    assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
    assert add_months(date(2027, 1, 1), 12) == date(2028, 1, 1)
    assert add_months(date(2026, 11, 15), 3) == date(2027, 2, 15)


def test_renew_extends_term_by_default_year(db, make_policy):
    number = make_policy("20.00")

    policy = renew_policy(db, number, today=TODAY, user_id=1)

    assert policy.end_date == date(2028, 1, 1)
    assert policy.status == PolicyStatus.ACTIVE
    assert policy.wallet_balance == Decimal("20.00")
    assert db.query(WalletLedger).count() == 0


def test_renew_expired_policy_with_top_up(db, make_policy):
    number = make_policy("20.00", status=PolicyStatus.EXPIRED)

    policy = renew_policy(db, number, today=TODAY, renewal_months=6, wallet_top_up=Decimal("30"))

    assert policy.status == PolicyStatus.ACTIVE
    assert policy.end_date == date(2027, 7, 1)
    assert policy.wallet_balance == Decimal("50.00")
    entry = db.query(WalletLedger).filter(WalletLedger.policy_id == policy.id).one()
    assert entry.entry_type == LedgerType.CREDIT
    assert entry.amount == Decimal("30.00")


def test_cancelled_policy_cannot_be_renewed(db, make_policy):
    number = make_policy("20.00", status=PolicyStatus.CANCELLED)

    with pytest.raises(PolicyNotActive):
        renew_policy(db, number, today=TODAY, wallet_top_up=Decimal("10"))

    assert db.query(WalletLedger).count() == 0


def test_renew_checks_owner(db, make_policy):
    number = make_policy("20.00", user_id=1)

    with pytest.raises(UnauthorizedAccess):
        renew_policy(db, number, today=TODAY, user_id=2)
