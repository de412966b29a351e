from functools import lru_cache

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.dependencies import get_current_user_id
from app.schemas.premium import PremiumQuoteRequest, PremiumQuoteResponse
from app.services.coverage import service_now
from app.services.premium import PremiumCalculator, PremiumConfig
from app.services.quotes import quote_premium

router = APIRouter()
settings = get_settings()


@lru_cache
def get_premium_calculator() -> PremiumCalculator:
    return PremiumCalculator(PremiumConfig.from_settings(settings))


@router.post("/calculate", response_model=PremiumQuoteResponse)
def calculate_premium(
    payload: PremiumQuoteRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    calculator: PremiumCalculator = Depends(get_premium_calculator),
):
    return quote_premium(
        db,
        calculator,
        plan_code=payload.plan_code,
        now=service_now(),
        currency=settings.currency,
        temperature=payload.temperature,
        location=payload.location,
        gig_platform=payload.gig_platform,
        no_claim_years=payload.no_claim_years,
        monthly=payload.is_monthly_subscription,
        annual=payload.is_annual_subscription,
    )
