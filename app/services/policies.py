import calendar
import logging
import uuid
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import ActivePolicyExists, PlanNotFound, PolicyNotActive
from app.models import InsurancePlan, Policy, PolicyStatus
from app.services.plans import get_active_plan
from app.services.wallet import credit_wallet, ensure_owner, load_policy, new_reference, run_policy_transaction

settings = get_settings()
logger = logging.getLogger(__name__)

DEFAULT_RENEWAL_MONTHS = 12


def generate_policy_number(today: date) -> str:
    return f"POL{today.year}{today.month:02d}{uuid.uuid4().hex[:8].upper()}"


def create_policy(
    db: Session,
    *,
    user_id: int,
    plan_code: str,
    today: date,
    initial_wallet_top_up: Decimal | None = None,
    auto_renew: bool = True,
) -> Policy:
    active_count = db.query(Policy).filter(
        Policy.user_id == user_id,
        Policy.status == PolicyStatus.ACTIVE,
    ).count()
    if active_count > 0:
        raise ActivePolicyExists("User already has an active policy. Only one active policy is allowed at a time.")

    terms = get_active_plan(db, plan_code)
    plan = db.query(InsurancePlan).filter(InsurancePlan.plan_code == terms.plan_code).first()
    if not plan:
        raise PlanNotFound(f"Insurance plan not found: {plan_code}")

    policy = Policy(
        policy_number=generate_policy_number(today),
        user_id=user_id,
        plan_id=plan.id,
        start_date=today,
        end_date=today + timedelta(days=settings.policy_term_days),
        status=PolicyStatus.ACTIVE,
        wallet_balance=Decimal("0"),
        total_premium_paid=Decimal("0"),
        auto_renew=auto_renew,
    )
    db.add(policy)

    try:
        db.flush()
        opening = Decimal(str(initial_wallet_top_up or 0))
        if opening > 0:
            credit_wallet(db, policy, opening, new_reference("TOPUP"), "Initial wallet top-up")
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(policy)

    logger.info(
        "Created policy %s for user %s on plan %s (opening balance %s)",
        policy.policy_number,
        user_id,
        plan.plan_code,
        policy.wallet_balance,
    )
    return policy


def get_policy(db: Session, policy_number: str, *, user_id: int | None = None) -> Policy:
    policy = load_policy(db, policy_number)
    ensure_owner(policy, user_id, "view")
    return policy


def list_user_policies(db: Session, user_id: int) -> list[Policy]:
    return db.query(Policy).filter(Policy.user_id == user_id).order_by(Policy.id.desc()).all()


def cancel_policy(db: Session, policy_number: str, *, user_id: int | None = None) -> Policy:
    def _unit() -> Policy:
        policy = load_policy(db, policy_number, for_update=True)
        ensure_owner(policy, user_id, "cancel")
        if policy.status != PolicyStatus.ACTIVE:
            raise PolicyNotActive(f"Policy cannot be cancelled. Current status: {policy.status.value}")
        policy.status = PolicyStatus.CANCELLED
        policy.auto_renew = False
        return policy

    policy = run_policy_transaction(db, _unit, label="policy cancellation")
    db.refresh(policy)
    logger.info("Cancelled policy %s for user %s", policy.policy_number, user_id)
    return policy


def add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    # Clamp to the last day, so Jan 31 + 1 month lands on Feb 28/29.
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def renew_policy(
    db: Session,
    policy_number: str,
    *,
    today: date,
    renewal_months: int | None = None,
    wallet_top_up: Decimal | None = None,
    user_id: int | None = None,
) -> Policy:
    months = renewal_months or DEFAULT_RENEWAL_MONTHS
    top_up = Decimal(str(wallet_top_up or 0))

    def _unit() -> Policy:
        policy = load_policy(db, policy_number, for_update=True)
        ensure_owner(policy, user_id, "renew")
        if policy.status not in (PolicyStatus.ACTIVE, PolicyStatus.EXPIRED):
            raise PolicyNotActive(f"Policy cannot be renewed. Current status: {policy.status.value}")

        policy.end_date = add_months(policy.end_date or today, months)
        policy.status = PolicyStatus.ACTIVE
        if top_up > 0:
            credit_wallet(db, policy, top_up, new_reference("TOPUP"), "Wallet top-up on renewal")
        return policy

    policy = run_policy_transaction(db, _unit, label="policy renewal")
    db.refresh(policy)
    if top_up > 0:
        logger.info("Wallet topped up by %s during renewal of policy %s", top_up, policy.policy_number)
    logger.info("Renewed policy %s until %s", policy.policy_number, policy.end_date)
    return policy
