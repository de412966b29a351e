from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.dependencies import get_current_user_id
from app.middlewares.rate_limit import limiter
from app.schemas.policy import CreatePolicyRequest, PolicyOut, RenewPolicyRequest, WalletAdjustmentRequest, WalletBalanceOut
from app.services.coverage import service_now
from app.services.policies import cancel_policy, create_policy, get_policy, list_user_policies, renew_policy
from app.services.wallet import adjust_wallet_balance, get_wallet_balance

router = APIRouter()
settings = get_settings()


@router.post("", response_model=PolicyOut)
@limiter.limit("5/minute")
def purchase_policy(
    request: Request,
    payload: CreatePolicyRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return create_policy(
        db,
        user_id=user_id,
        plan_code=payload.plan_code,
        today=service_now().date(),
        initial_wallet_top_up=payload.initial_wallet_top_up,
        auto_renew=payload.auto_renew,
    )


@router.post("/renew", response_model=PolicyOut)
@limiter.limit("5/minute")
def renew(
    request: Request,
    payload: RenewPolicyRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return renew_policy(
        db,
        payload.policy_number,
        today=service_now().date(),
        renewal_months=payload.renewal_months,
        wallet_top_up=payload.wallet_top_up,
        user_id=user_id,
    )


@router.get("/me", response_model=list[PolicyOut])
def my_policies(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return list_user_policies(db, user_id)


@router.get("/{policy_number}", response_model=PolicyOut)
def read_policy(policy_number: str, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return get_policy(db, policy_number, user_id=user_id)


@router.post("/{policy_number}/wallet", response_model=PolicyOut)
@limiter.limit("10/minute")
def adjust_wallet(
    request: Request,
    policy_number: str,
    payload: WalletAdjustmentRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if payload.amount == 0:
        raise HTTPException(status_code=400, detail="Amount must not be zero")
    return adjust_wallet_balance(db, policy_number, payload.amount, user_id=user_id)


@router.get("/{policy_number}/wallet/balance", response_model=WalletBalanceOut)
def wallet_balance(policy_number: str, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    balance = get_wallet_balance(db, policy_number, user_id=user_id)
    return {"policy_number": policy_number, "wallet_balance": balance, "currency": settings.currency}


@router.post("/{policy_number}/cancel", response_model=PolicyOut)
@limiter.limit("5/minute")
def cancel(request: Request, policy_number: str, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return cancel_policy(db, policy_number, user_id=user_id)
