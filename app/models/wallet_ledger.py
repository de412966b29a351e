import enum
from sqlalchemy import Column, Integer, ForeignKey, Numeric, String, Enum, Index
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import TimestampMixin


class LedgerType(str, enum.Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class WalletLedger(Base, TimestampMixin):
    __tablename__ = "wallet_ledger"

    id = Column(Integer, primary_key=True, index=True)
    policy_id = Column(Integer, ForeignKey("policies.id"), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    entry_type = Column(Enum(LedgerType), nullable=False)
    reference = Column(String(64), nullable=False, unique=True, index=True)
    description = Column(String(255), nullable=False)

    policy = relationship("Policy", back_populates="ledger_entries")


Index("ix_wallet_ledger_policy_id_type", WalletLedger.policy_id, WalletLedger.entry_type)
