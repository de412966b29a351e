from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PremiumQuoteRequest(BaseModel):
    plan_code: str = Field(..., min_length=1, max_length=64)
    temperature: Optional[Decimal] = None
    location: Optional[str] = Field(default=None, max_length=255)
    gig_platform: Optional[str] = Field(default=None, max_length=50)
    no_claim_years: Optional[int] = Field(default=None, ge=0, le=50)
    is_monthly_subscription: bool = False
    is_annual_subscription: bool = False


class PremiumQuoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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
