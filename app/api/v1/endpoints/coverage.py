from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.dependencies import get_current_user_id
from app.middlewares.rate_limit import limiter
from app.schemas.coverage import CoverageToggleRequest, CoverageResponse, CoverageStatusResponse
from app.services.coverage import CoverageLedger
from app.services.premium import PremiumCalculator
from app.api.v1.endpoints.premium import get_premium_calculator

router = APIRouter()


def get_coverage_ledger(
    db: Session = Depends(get_db),
    calculator: PremiumCalculator = Depends(get_premium_calculator),
) -> CoverageLedger:
    return CoverageLedger(db, calculator)


@router.post("/toggle", response_model=CoverageResponse)
@limiter.limit("20/minute")
def toggle_coverage(
    request: Request,
    payload: CoverageToggleRequest,
    user_id: int = Depends(get_current_user_id),
    ledger: CoverageLedger = Depends(get_coverage_ledger),
):
    return ledger.toggle(
        payload.policy_number,
        activate=payload.activate,
        coverage_date=payload.coverage_date,
        location=payload.location,
        gig_platform=payload.gig_platform,
        temperature=payload.temperature,
        user_id=user_id,
    )


@router.post("/activate/{policy_number}", response_model=CoverageResponse)
@limiter.limit("20/minute")
def activate_coverage(
    request: Request,
    policy_number: str,
    location: Optional[str] = None,
    gig_platform: Optional[str] = None,
    temperature: Optional[Decimal] = None,
    user_id: int = Depends(get_current_user_id),
    ledger: CoverageLedger = Depends(get_coverage_ledger),
):
    return ledger.toggle(
        policy_number,
        activate=True,
        location=location,
        gig_platform=gig_platform,
        temperature=temperature,
        user_id=user_id,
    )


@router.post("/deactivate/{policy_number}", response_model=CoverageResponse)
@limiter.limit("20/minute")
def deactivate_coverage(
    request: Request,
    policy_number: str,
    user_id: int = Depends(get_current_user_id),
    ledger: CoverageLedger = Depends(get_coverage_ledger),
):
    return ledger.toggle(policy_number, activate=False, user_id=user_id)


@router.get("/status/{policy_number}", response_model=CoverageStatusResponse)
def get_coverage_status(
    policy_number: str,
    coverage_date: Optional[date] = Query(default=None, alias="date"),
    user_id: int = Depends(get_current_user_id),
    ledger: CoverageLedger = Depends(get_coverage_ledger),
):
    return ledger.get_status(policy_number, coverage_date, user_id=user_id)
