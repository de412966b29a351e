from app.models.insurance_plan import InsurancePlan
from app.models.policy import Policy, PolicyStatus
from app.models.coverage_record import CoverageRecord, CoverageStatus
from app.models.wallet_ledger import WalletLedger, LedgerType

__all__ = [
    "InsurancePlan",
    "Policy",
    "PolicyStatus",
    "CoverageRecord",
    "CoverageStatus",
    "WalletLedger",
    "LedgerType",
]
