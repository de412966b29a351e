from sqlalchemy import Column, Integer, String, Numeric, Boolean, Index, CheckConstraint
from app.core.database import Base
from app.models.base import TimestampMixin


class InsurancePlan(Base, TimestampMixin):
    __tablename__ = "insurance_plans"
    __table_args__ = (
        CheckConstraint("daily_premium >= 0", name="ck_insurance_plans_daily_premium_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    plan_code = Column(String(64), nullable=False, unique=True)
    plan_name = Column(String(128), nullable=False)
    description = Column(String(255), nullable=True)
    daily_premium = Column(Numeric(10, 2), nullable=False)
    coverage_amount = Column(Numeric(15, 2), nullable=False)
    coverage_type = Column(String(32), nullable=False)  # accident|health|comprehensive
    min_age = Column(Integer, nullable=True)
    max_age = Column(Integer, nullable=True)
    waiting_period_days = Column(Integer, nullable=False, default=30)
    is_active = Column(Boolean, default=True, nullable=False)


Index("ix_insurance_plans_code_active", InsurancePlan.plan_code, InsurancePlan.is_active)
