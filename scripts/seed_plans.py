from decimal import Decimal
from app.core.database import SessionLocal
from app.models import InsurancePlan


SAMPLE_PLANS = [
    {
        "plan_code": "GIG_BASIC",
        "plan_name": "Gig Basic Accident Cover",
        "description": "Accident cover for delivery partners on active shifts",
        "daily_premium": Decimal("5.00"),
        "coverage_amount": Decimal("100000.00"),
        "coverage_type": "accident",
        "min_age": 18,
        "max_age": 60,
        "waiting_period_days": 0,
    },
    {
        "plan_code": "GIG_PLUS",
        "plan_name": "Gig Plus Accident & Health",
        "description": "Accident and hospitalisation cover for full-time gig workers",
        "daily_premium": Decimal("12.00"),
        "coverage_amount": Decimal("300000.00"),
        "coverage_type": "comprehensive",
        "min_age": 18,
        "max_age": 65,
        "waiting_period_days": 7,
    },
]


def main():
    db = SessionLocal()
    try:
        for plan in SAMPLE_PLANS:
            existing = db.query(InsurancePlan).filter(InsurancePlan.plan_code == plan["plan_code"]).first()
            if not existing:
                db.add(InsurancePlan(**plan))
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    main()
