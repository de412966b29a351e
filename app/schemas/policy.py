from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.policy import PolicyStatus


class CreatePolicyRequest(BaseModel):
    plan_code: str = Field(..., min_length=1, max_length=64)
    initial_wallet_top_up: Optional[Decimal] = Field(default=None, ge=0)
    auto_renew: bool = True


class WalletAdjustmentRequest(BaseModel):
    amount: Decimal


class PolicyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    policy_number: str
    user_id: int
    start_date: date
    end_date: Optional[date] = None
    status: PolicyStatus | str
    wallet_balance: Decimal
    total_premium_paid: Decimal
    auto_renew: bool


class RenewPolicyRequest(BaseModel):
    policy_number: str = Field(..., min_length=3, max_length=32)
    renewal_months: Optional[int] = Field(default=None, ge=1, le=120)
    wallet_top_up: Optional[Decimal] = Field(default=None, ge=0)


class WalletBalanceOut(BaseModel):
    policy_number: str
    wallet_balance: Decimal
    currency: str
