from dataclasses import dataclass
from decimal import Decimal
from sqlalchemy.orm import Session
from app.core.errors import PlanNotFound
from app.models import InsurancePlan


@dataclass(frozen=True)
class PlanTerms:
    plan_code: str
    plan_name: str
    base_premium: Decimal
    coverage_amount: Decimal
    min_age: int | None
    max_age: int | None


def _normalize_plan_code(plan_code: str) -> str:
    return str(plan_code or "").strip().upper()


def get_active_plan(db: Session, plan_code: str) -> PlanTerms:
    code = _normalize_plan_code(plan_code)
    plan = db.query(InsurancePlan).filter(
        InsurancePlan.plan_code == code,
        InsurancePlan.is_active == True,
    ).first()
    if not plan:
        raise PlanNotFound(f"Insurance plan not found: {code or plan_code}")
    return PlanTerms(
        plan_code=plan.plan_code,
        plan_name=plan.plan_name,
        base_premium=Decimal(plan.daily_premium),
        coverage_amount=Decimal(plan.coverage_amount),
        min_age=plan.min_age,
        max_age=plan.max_age,
    )
