from fastapi import APIRouter
from app.api.v1.endpoints import coverage, premium, policies

router = APIRouter()

router.include_router(coverage.router, prefix="/coverage", tags=["coverage"])
router.include_router(premium.router, prefix="/premium", tags=["premium"])
router.include_router(policies.router, prefix="/policies", tags=["policies"])
