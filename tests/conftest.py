import os
from datetime import date
from decimal import Decimal

import pytest


def _set_test_env() -> None:
    defaults = {
        "APP_NAME": "ToggleCover Test",
        "ENVIRONMENT": "test",
        "SECRET_KEY": "test-secret",
        "ACCESS_TOKEN_EXPIRE_MINUTES": "30",
        "AUTO_CREATE_TABLES": "false",
        "DATABASE_URL": "sqlite://",
        "TIMEZONE": "Asia/Kolkata",
        "RATE_LIMIT_ENABLED": "false",
        "LOG_LEVEL": "WARNING",
        "CORS_ORIGINS": "http://localhost:5173,http://localhost:3000",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


_set_test_env()

from sqlalchemy.orm import sessionmaker  # noqa: E402

from app.core.database import Base, build_engine  # noqa: E402
from app.models import InsurancePlan, Policy, PolicyStatus  # noqa: E402


@pytest.fixture
def session_factory(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'togglecover.db'}")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        yield factory
    finally:
        engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def plan(db):
    plan = InsurancePlan(
        plan_code="GIG_BASIC",
        plan_name="Gig Basic Accident Cover",
        daily_premium=Decimal("5.00"),
        coverage_amount=Decimal("100000.00"),
        coverage_type="accident",
        min_age=18,
        max_age=60,
        waiting_period_days=0,
        is_active=True,
    )
    db.add(plan)
    db.commit()
    db.refresh(plan)
    return plan


@pytest.fixture
def make_policy(db, plan):
    counter = {"n": 0}

    def _make(balance="20.00", *, user_id=1, status=PolicyStatus.ACTIVE) -> str:
        counter["n"] += 1
        policy = Policy(
            policy_number=f"POL202601TEST{counter['n']:04d}",
            user_id=user_id,
            plan_id=plan.id,
            start_date=date(2026, 1, 1),
            end_date=date(2027, 1, 1),
            status=status,
            wallet_balance=Decimal(balance),
            total_premium_paid=Decimal("0"),
            auto_renew=True,
        )
        db.add(policy)
        db.commit()
        return policy.policy_number

    return _make
