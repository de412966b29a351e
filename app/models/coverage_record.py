import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Boolean, Date, DateTime, Enum, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import TimestampMixin


class CoverageStatus(str, enum.Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    PENDING = "pending"
    CANCELLED = "cancelled"


class CoverageRecord(Base, TimestampMixin):
    __tablename__ = "coverage_records"
    __table_args__ = (
        UniqueConstraint("policy_id", "coverage_date", name="uq_coverage_records_policy_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    policy_id = Column(Integer, ForeignKey("policies.id"), nullable=False)
    coverage_date = Column(Date, nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=True)
    end_time = Column(DateTime(timezone=True), nullable=True)
    status = Column(Enum(CoverageStatus), nullable=False, default=CoverageStatus.INACTIVE)
    is_active = Column(Boolean, default=False, nullable=False)
    premium_amount = Column(Numeric(10, 2), nullable=True)
    coverage_amount = Column(Numeric(15, 2), nullable=True)
    weather_risk_multiplier = Column(Numeric(6, 4), nullable=False, default=1)
    location_multiplier = Column(Numeric(6, 4), nullable=False, default=1)
    platform_multiplier = Column(Numeric(6, 4), nullable=False, default=1)
    time_multiplier = Column(Numeric(6, 4), nullable=False, default=1)
    location = Column(String(255), nullable=True)
    gig_platform = Column(String(50), nullable=True)
    version_id = Column(Integer, nullable=False)

    policy = relationship("Policy", back_populates="coverage_records")

    # Deactivation only touches this row, so it carries its own version check.
    __mapper_args__ = {"version_id_col": version_id}


Index("ix_coverage_records_policy_active", CoverageRecord.policy_id, CoverageRecord.is_active)
