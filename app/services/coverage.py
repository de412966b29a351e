import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Callable
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import AlreadyActive, AlreadyInactive, CoverageCancelled, PolicyNotActive
from app.models import CoverageRecord, CoverageStatus, Policy, PolicyStatus
from app.services.plans import get_active_plan
from app.services.premium import PremiumCalculator, PremiumConfig
from app.services.wallet import debit_wallet, ensure_owner, load_policy, new_reference, run_policy_transaction

settings = get_settings()
logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def service_now() -> datetime:
    return datetime.now(ZoneInfo(settings.timezone))


@dataclass(frozen=True)
class CoverageResult:
    policy_number: str
    coverage_date: date
    status: CoverageStatus
    coverage_active: bool
    message: str
    premium_charged: Decimal
    coverage_amount: Decimal
    wallet_balance: Decimal
    start_time: datetime | None = None
    end_time: datetime | None = None
    location: str | None = None
    gig_platform: str | None = None
    weather_risk_multiplier: Decimal | None = None
    reference: str | None = None


@dataclass(frozen=True)
class CoverageSnapshot:
    policy_number: str
    coverage_date: date
    is_coverage_active: bool
    current_status: CoverageStatus
    premium_paid: Decimal
    wallet_balance: Decimal
    location: str | None = None
    gig_platform: str | None = None


def _clean(value: str | None) -> str | None:
    text = str(value or "").strip()
    return text or None


class CoverageLedger:
    """Per-day coverage state machine backed by the policy wallet.

    A toggle runs as one transaction per policy: the policy row is locked (or
    version-checked), the premium is computed once, and the wallet debit and
    record transition are committed together or not at all.
    """

    def __init__(
        self,
        db: Session,
        calculator: PremiumCalculator | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.db = db
        self.calculator = calculator or PremiumCalculator(PremiumConfig.from_settings(settings))
        self.clock = clock or service_now

    def toggle(
        self,
        policy_number: str,
        *,
        activate: bool,
        coverage_date: date | None = None,
        location: str | None = None,
        gig_platform: str | None = None,
        temperature=None,
        user_id: int | None = None,
    ) -> CoverageResult:
        now = self.clock()
        day = coverage_date or now.date()
        location = _clean(location)
        gig_platform = _clean(gig_platform)

        if activate:
            def _unit() -> CoverageResult:
                return self._activate(policy_number, day, now, location, gig_platform, temperature, user_id)
            label = "coverage activation"
        else:
            def _unit() -> CoverageResult:
                return self._deactivate(policy_number, day, now, user_id)
            label = "coverage deactivation"

        result = run_policy_transaction(self.db, _unit, label=label)
        if activate:
            logger.info(
                "Coverage activated for policy %s on %s. Premium charged: %s",
                result.policy_number,
                result.coverage_date,
                result.premium_charged,
            )
        else:
            logger.info("Coverage deactivated for policy %s on %s", result.policy_number, result.coverage_date)
        return result

    def get_status(self, policy_number: str, coverage_date: date | None = None, *, user_id: int | None = None) -> CoverageSnapshot:
        day = coverage_date or self.clock().date()
        policy = load_policy(self.db, policy_number)
        ensure_owner(policy, user_id, "view coverage of")
        record = self._find_record(policy, day)

        if not record:
            return CoverageSnapshot(
                policy_number=policy.policy_number,
                coverage_date=day,
                is_coverage_active=False,
                current_status=CoverageStatus.INACTIVE,
                premium_paid=ZERO,
                wallet_balance=Decimal(policy.wallet_balance),
            )
        return CoverageSnapshot(
            policy_number=policy.policy_number,
            coverage_date=day,
            is_coverage_active=bool(record.is_active),
            current_status=record.status,
            premium_paid=Decimal(record.premium_amount) if record.premium_amount is not None else ZERO,
            wallet_balance=Decimal(policy.wallet_balance),
            location=record.location,
            gig_platform=record.gig_platform,
        )

    def _find_record(self, policy: Policy, day: date) -> CoverageRecord | None:
        return self.db.query(CoverageRecord).filter(
            CoverageRecord.policy_id == policy.id,
            CoverageRecord.coverage_date == day,
        ).first()

    def _load_active_policy(self, policy_number: str, user_id: int | None, action: str) -> Policy:
        policy = load_policy(self.db, policy_number, for_update=True)
        ensure_owner(policy, user_id, action)
        if policy.status != PolicyStatus.ACTIVE:
            raise PolicyNotActive(f"Policy {policy.policy_number} is not active")
        return policy

    def _activate(self, policy_number, day, now, location, gig_platform, temperature, user_id) -> CoverageResult:
        policy = self._load_active_policy(policy_number, user_id, "activate coverage on")
        record = self._find_record(policy, day)
        if record is not None:
            if record.status == CoverageStatus.CANCELLED:
                raise CoverageCancelled(f"Coverage for {day} has been cancelled")
            if record.status == CoverageStatus.ACTIVE:
                raise AlreadyActive(f"Coverage is already active for {day}")

        plan = get_active_plan(self.db, policy.plan.plan_code)
        breakdown = self.calculator.compute(
            plan.base_premium,
            temperature,
            location,
            gig_platform,
            now=now,
        )
        premium = breakdown.final_premium

        reference = new_reference("COV")
        debit_wallet(self.db, policy, premium, reference, f"Daily coverage premium for {day.isoformat()}")
        policy.total_premium_paid = Decimal(policy.total_premium_paid) + premium

        if record is None:
            record = CoverageRecord(
                policy_id=policy.id,
                coverage_date=day,
                coverage_amount=plan.coverage_amount,
            )
            self.db.add(record)

        record.status = CoverageStatus.ACTIVE
        record.is_active = True
        record.start_time = now
        record.end_time = None
        record.premium_amount = premium
        record.weather_risk_multiplier = breakdown.weather
        record.location_multiplier = breakdown.location
        record.platform_multiplier = breakdown.platform
        record.time_multiplier = breakdown.time_of_day
        record.location = location
        record.gig_platform = gig_platform

        # Flush inside the unit so version and uniqueness conflicts surface here.
        self.db.flush()

        return CoverageResult(
            policy_number=policy.policy_number,
            coverage_date=day,
            status=CoverageStatus.ACTIVE,
            coverage_active=True,
            message="Coverage activated successfully",
            premium_charged=premium,
            coverage_amount=Decimal(record.coverage_amount) if record.coverage_amount is not None else ZERO,
            wallet_balance=Decimal(policy.wallet_balance),
            start_time=now,
            end_time=None,
            location=location,
            gig_platform=gig_platform,
            weather_risk_multiplier=breakdown.weather,
            reference=reference,
        )

    def _deactivate(self, policy_number, day, now, user_id) -> CoverageResult:
        policy = self._load_active_policy(policy_number, user_id, "deactivate coverage on")
        record = self._find_record(policy, day)
        if record is None:
            raise AlreadyInactive(f"Coverage is already inactive for {day}")
        if record.status == CoverageStatus.CANCELLED:
            raise CoverageCancelled(f"Coverage for {day} has been cancelled")
        if record.status != CoverageStatus.ACTIVE:
            raise AlreadyInactive(f"Coverage is already inactive for {day}")

        # Premium is non-refundable on voluntary deactivation.
        record.status = CoverageStatus.INACTIVE
        record.is_active = False
        record.end_time = now
        self.db.flush()

        return CoverageResult(
            policy_number=policy.policy_number,
            coverage_date=day,
            status=CoverageStatus.INACTIVE,
            coverage_active=False,
            message="Coverage deactivated successfully",
            premium_charged=Decimal(record.premium_amount) if record.premium_amount is not None else ZERO,
            coverage_amount=Decimal(record.coverage_amount) if record.coverage_amount is not None else ZERO,
            wallet_balance=Decimal(policy.wallet_balance),
            start_time=record.start_time,
            end_time=now,
            location=record.location,
            gig_platform=record.gig_platform,
            weather_risk_multiplier=Decimal(record.weather_risk_multiplier) if record.weather_risk_multiplier is not None else None,
        )
