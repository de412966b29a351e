"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "insurance_plans",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("plan_code", sa.String(64), nullable=False),
        sa.Column("plan_name", sa.String(128), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("daily_premium", sa.Numeric(10, 2), nullable=False),
        sa.Column("coverage_amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("coverage_type", sa.String(32), nullable=False),
        sa.Column("min_age", sa.Integer, nullable=True),
        sa.Column("max_age", sa.Integer, nullable=True),
        sa.Column("waiting_period_days", sa.Integer, nullable=False, server_default="30"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("daily_premium >= 0", name="ck_insurance_plans_daily_premium_non_negative"),
    )
    op.create_unique_constraint("uq_insurance_plans_plan_code", "insurance_plans", ["plan_code"])
    op.create_index("ix_insurance_plans_code_active", "insurance_plans", ["plan_code", "is_active"], unique=False)

    op.create_table(
        "policies",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("policy_number", sa.String(32), nullable=False),
        sa.Column("user_id", sa.Integer, nullable=False),
        sa.Column("plan_id", sa.Integer, sa.ForeignKey("insurance_plans.id"), nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "EXPIRED", "CANCELLED", "SUSPENDED", name="policystatus"),
            nullable=False,
        ),
        sa.Column("wallet_balance", sa.Numeric(15, 2), nullable=False, server_default="0"),
        sa.Column("total_premium_paid", sa.Numeric(15, 2), nullable=False, server_default="0"),
        sa.Column("auto_renew", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("version_id", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("wallet_balance >= 0", name="ck_policies_wallet_balance_non_negative"),
        sa.CheckConstraint("total_premium_paid >= 0", name="ck_policies_total_premium_paid_non_negative"),
    )
    op.create_index("ix_policies_policy_number", "policies", ["policy_number"], unique=True)
    op.create_index("ix_policies_user_status", "policies", ["user_id", "status"], unique=False)

    op.create_table(
        "coverage_records",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("policy_id", sa.Integer, sa.ForeignKey("policies.id"), nullable=False),
        sa.Column("coverage_date", sa.Date, nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "status",
            sa.Enum("INACTIVE", "ACTIVE", "PENDING", "CANCELLED", name="coveragestatus"),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("premium_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("coverage_amount", sa.Numeric(15, 2), nullable=True),
        sa.Column("weather_risk_multiplier", sa.Numeric(6, 4), nullable=False, server_default="1"),
        sa.Column("location_multiplier", sa.Numeric(6, 4), nullable=False, server_default="1"),
        sa.Column("platform_multiplier", sa.Numeric(6, 4), nullable=False, server_default="1"),
        sa.Column("time_multiplier", sa.Numeric(6, 4), nullable=False, server_default="1"),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("gig_platform", sa.String(50), nullable=True),
        sa.Column("version_id", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("policy_id", "coverage_date", name="uq_coverage_records_policy_date"),
    )
    op.create_index("ix_coverage_records_policy_active", "coverage_records", ["policy_id", "is_active"], unique=False)

    op.create_table(
        "wallet_ledger",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("policy_id", sa.Integer, sa.ForeignKey("policies.id"), nullable=False),
        sa.Column("amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("entry_type", sa.Enum("CREDIT", "DEBIT", name="ledgertype"), nullable=False),
        sa.Column("reference", sa.String(64), nullable=False),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_wallet_ledger_reference", "wallet_ledger", ["reference"], unique=True)
    op.create_index("ix_wallet_ledger_policy_id_type", "wallet_ledger", ["policy_id", "entry_type"], unique=False)


def downgrade():
    op.drop_table("wallet_ledger")
    op.drop_table("coverage_records")
    op.drop_table("policies")
    op.drop_table("insurance_plans")
    op.execute("DROP TYPE IF EXISTS ledgertype")
    op.execute("DROP TYPE IF EXISTS coveragestatus")
    op.execute("DROP TYPE IF EXISTS policystatus")
