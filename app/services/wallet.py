import logging
import secrets
from decimal import Decimal
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.config import get_settings
from app.core.errors import ConcurrentModification, InsufficientFunds, PolicyNotFound, UnauthorizedAccess, WalletUnderflow
from app.models import Policy, WalletLedger, LedgerType

settings = get_settings()
logger = logging.getLogger(__name__)

T = TypeVar("T")

COVERAGE_DAY_CONSTRAINT = "uq_coverage_records_policy_date"
# SQLite reports the columns rather than the constraint name.
COVERAGE_DAY_COLUMNS = "coverage_records.policy_id, coverage_records.coverage_date"


def new_reference(prefix: str) -> str:
    return f"{prefix}_{secrets.token_hex(8).upper()}"


def load_policy(db: Session, policy_number: str, *, for_update: bool = False) -> Policy:
    query = db.query(Policy).filter(Policy.policy_number == str(policy_number or "").strip())
    if for_update:
        # Row lock where the backend supports it; the version column covers the rest.
        query = query.with_for_update().populate_existing()
    policy = query.first()
    if not policy:
        raise PolicyNotFound(f"Policy not found: {policy_number}")
    return policy


def ensure_owner(policy: Policy, user_id: int | None, action: str = "access") -> None:
    if user_id is None or policy.user_id == user_id:
        return
    logger.warning(
        "User %s attempted to %s policy %s owned by user %s",
        user_id,
        action,
        policy.policy_number,
        policy.user_id,
    )
    raise UnauthorizedAccess(f"You are not authorized to {action} this policy")


def credit_wallet(db: Session, policy: Policy, amount: Decimal, reference: str, description: str) -> WalletLedger:
    policy.wallet_balance = Decimal(policy.wallet_balance) + amount
    entry = WalletLedger(
        policy_id=policy.id,
        amount=amount,
        entry_type=LedgerType.CREDIT,
        reference=reference,
        description=description,
    )
    db.add(entry)
    return entry


def debit_wallet(db: Session, policy: Policy, amount: Decimal, reference: str, description: str) -> WalletLedger:
    balance = Decimal(policy.wallet_balance)
    if balance < amount:
        raise InsufficientFunds(
            f"Insufficient wallet balance. Current balance: {balance}, required: {amount}"
        )
    policy.wallet_balance = balance - amount
    entry = WalletLedger(
        policy_id=policy.id,
        amount=amount,
        entry_type=LedgerType.DEBIT,
        reference=reference,
        description=description,
    )
    db.add(entry)
    return entry


def is_coverage_day_conflict(exc: IntegrityError) -> bool:
    message = str(getattr(exc, "orig", None) or exc)
    return COVERAGE_DAY_CONSTRAINT in message or COVERAGE_DAY_COLUMNS in message


def run_policy_transaction(db: Session, unit: Callable[[], T], *, label: str, max_attempts: int | None = None) -> T:
    """Run ``unit`` and commit it as one transaction, retrying lost races.

    A concurrent writer shows up either as a stale version on the policy or
    coverage row, or as a duplicate (policy, date) coverage row. Both leave
    nothing behind after rollback, so the unit is simply re-run against
    fresh state. Any other integrity failure is a real bug and propagates,
    as does everything else.
    """
    attempts = max(1, int(max_attempts or settings.coverage_toggle_max_attempts))
    for attempt in range(1, attempts + 1):
        try:
            result = unit()
            db.commit()
            return result
        except StaleDataError as exc:
            db.rollback()
            logger.warning("Conflict during %s (attempt %s/%s): %s", label, attempt, attempts, exc.__class__.__name__)
        except IntegrityError as exc:
            db.rollback()
            if not is_coverage_day_conflict(exc):
                raise
            logger.warning("Conflict during %s (attempt %s/%s): %s", label, attempt, attempts, exc.__class__.__name__)
        except Exception:
            db.rollback()
            raise
    raise ConcurrentModification(f"Policy was modified concurrently during {label}. Please retry.")


def adjust_wallet_balance(db: Session, policy_number: str, amount: Decimal, *, user_id: int | None = None) -> Policy:
    amount = Decimal(str(amount))

    def _unit() -> Policy:
        policy = load_policy(db, policy_number, for_update=True)
        ensure_owner(policy, user_id, "update the wallet of")

        balance = Decimal(policy.wallet_balance)
        new_balance = balance + amount
        if new_balance < 0:
            raise WalletUnderflow(
                f"Insufficient wallet balance. Current balance: {balance}, attempted deduction: {abs(amount)}"
            )

        if amount >= 0:
            credit_wallet(db, policy, amount, new_reference("TOPUP"), "Wallet top-up")
        else:
            debit_wallet(db, policy, -amount, new_reference("ADJ"), "Wallet adjustment")
        return policy

    policy = run_policy_transaction(db, _unit, label="wallet adjustment")
    db.refresh(policy)
    logger.info(
        "Updated wallet balance for policy %s by %s. New balance: %s",
        policy.policy_number,
        amount,
        policy.wallet_balance,
    )
    return policy


def get_wallet_balance(db: Session, policy_number: str, *, user_id: int | None = None) -> Decimal:
    policy = load_policy(db, policy_number)
    ensure_owner(policy, user_id, "view the wallet of")
    return Decimal(policy.wallet_balance)
