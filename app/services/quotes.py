from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from app.services.plans import get_active_plan
from app.services.premium import PremiumCalculator, annual_premium, monthly_premium, no_claim_bonus_multiplier


@dataclass(frozen=True)
class PremiumQuote:
    plan_code: str
    plan_name: str
    base_premium: Decimal
    calculated_premium: Decimal
    weather_multiplier: Decimal
    location_multiplier: Decimal
    platform_multiplier: Decimal
    time_multiplier: Decimal
    no_claim_discount: Decimal
    final_premium: Decimal
    currency: str


def quote_premium(
    db: Session,
    calculator: PremiumCalculator,
    *,
    plan_code: str,
    now: datetime,
    currency: str,
    temperature=None,
    location: str | None = None,
    gig_platform: str | None = None,
    no_claim_years: int | None = None,
    monthly: bool = False,
    annual: bool = False,
) -> PremiumQuote:
    plan = get_active_plan(db, plan_code)
    breakdown = calculator.compute(plan.base_premium, temperature, location, gig_platform, now=now)

    # The no-claim multiplier is reported for display; it is not folded into the charge.
    final = breakdown.final_premium
    if monthly:
        final = monthly_premium(breakdown.final_premium)
    elif annual:
        final = annual_premium(breakdown.final_premium)

    return PremiumQuote(
        plan_code=plan.plan_code,
        plan_name=plan.plan_name,
        base_premium=plan.base_premium,
        calculated_premium=breakdown.final_premium,
        weather_multiplier=breakdown.weather,
        location_multiplier=breakdown.location,
        platform_multiplier=breakdown.platform,
        time_multiplier=breakdown.time_of_day,
        no_claim_discount=no_claim_bonus_multiplier(no_claim_years),
        final_premium=final,
        currency=currency,
    )
