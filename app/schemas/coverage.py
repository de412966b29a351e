from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.coverage_record import CoverageStatus


class CoverageToggleRequest(BaseModel):
    policy_number: str = Field(..., min_length=3, max_length=32)
    coverage_date: Optional[date] = None
    activate: bool
    location: Optional[str] = Field(default=None, max_length=255)
    gig_platform: Optional[str] = Field(default=None, max_length=50)
    temperature: Optional[Decimal] = None


class CoverageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    policy_number: str
    coverage_date: date
    status: CoverageStatus | str
    coverage_active: bool
    message: str
    premium_charged: Decimal
    coverage_amount: Decimal
    wallet_balance: Decimal
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    gig_platform: Optional[str] = None
    weather_risk_multiplier: Optional[Decimal] = None
    reference: Optional[str] = None


class CoverageStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    policy_number: str
    coverage_date: date
    is_coverage_active: bool
    current_status: CoverageStatus | str
    premium_paid: Decimal
    wallet_balance: Decimal
    location: Optional[str] = None
    gig_platform: Optional[str] = None
