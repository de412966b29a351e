import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Boolean, Date, Enum, Index, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import TimestampMixin


class PolicyStatus(str, enum.Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    SUSPENDED = "suspended"


class Policy(Base, TimestampMixin):
    __tablename__ = "policies"
    __table_args__ = (
        CheckConstraint("wallet_balance >= 0", name="ck_policies_wallet_balance_non_negative"),
        CheckConstraint("total_premium_paid >= 0", name="ck_policies_total_premium_paid_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    policy_number = Column(String(32), nullable=False, unique=True, index=True)
    user_id = Column(Integer, nullable=False)
    plan_id = Column(Integer, ForeignKey("insurance_plans.id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    status = Column(Enum(PolicyStatus), nullable=False, default=PolicyStatus.ACTIVE)
    wallet_balance = Column(Numeric(15, 2), nullable=False, default=0)
    total_premium_paid = Column(Numeric(15, 2), nullable=False, default=0)
    auto_renew = Column(Boolean, default=True, nullable=False)
    version_id = Column(Integer, nullable=False)

    plan = relationship("InsurancePlan")
    coverage_records = relationship("CoverageRecord", back_populates="policy")
    ledger_entries = relationship("WalletLedger", back_populates="policy")

    # Every wallet write bumps the version, so a concurrent writer holding a
    # stale row fails its UPDATE instead of overwriting the balance.
    __mapper_args__ = {"version_id_col": version_id}


Index("ix_policies_user_status", Policy.user_id, Policy.status)
