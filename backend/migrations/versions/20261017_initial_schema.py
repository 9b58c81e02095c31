"""Initial LeaseDesk schema: users, agreements, agents, activity logs, settings

Revision ID: 20261017_initial
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261017_initial"
down_revision = None
branch_labels = None
depends_on = None


def _money(name):
    return sa.Column(name, sa.Numeric(precision=14, scale=2), nullable=False, server_default="0")


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="user"),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sqlite_autoincrement=True,
    )

    op.create_table(
        "agreements",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("owner_name", sa.String(length=200), nullable=False),
        sa.Column("tenant_name", sa.String(length=200), nullable=True),
        sa.Column("owner_contact", sa.String(length=64), nullable=True),
        sa.Column("tenant_contact", sa.String(length=64), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("cc_email", sa.String(length=255), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("token_number", sa.String(length=64), nullable=False),
        sa.Column("agent_name", sa.String(length=128), nullable=True),
        sa.Column("agreement_status", sa.String(length=64), nullable=True),
        sa.Column("agreement_date", sa.Date(), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("reminder_date", sa.Date(), nullable=True),
        sa.Column("biometric_date", sa.Date(), nullable=True),
        _money("total_payment"),
        _money("payment_owner"),
        _money("payment_tenant"),
        _money("actual_cost"),
        _money("agent_commission"),
        _money("other_expenses"),
        _money("gross_profit"),
        _money("net_profit"),
        sa.Column("profit_margin", sa.Numeric(precision=9, scale=2), nullable=False, server_default="0"),
        _money("payment_due"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_agreements"),
        sa.UniqueConstraint("token_number", name="uq_agreements_token_number"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("agreements", schema=None) as batch_op:
        batch_op.create_index("ix_agreements_created_at", ["created_at"], unique=False)
        batch_op.create_index("ix_agreements_agent_name", ["agent_name"], unique=False)
        batch_op.create_index("ix_agreements_expiry_date", ["expiry_date"], unique=False)

    op.create_table(
        "agents",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_agents"),
        sa.UniqueConstraint("name", name="uq_agents_name"),
        sqlite_autoincrement=True,
    )

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_activity_logs"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("activity_logs", schema=None) as batch_op:
        batch_op.create_index("ix_activity_logs_created_at", ["created_at"], unique=False)
        batch_op.create_index("ix_activity_logs_username", ["username"], unique=False)

    op.create_table(
        "system_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("default_cc_email", sa.String(length=255), nullable=True),
        sa.Column("company_name", sa.String(length=200), nullable=True),
        sa.Column("reminder_days_before", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("date_format", sa.String(length=32), nullable=False, server_default="DD-MM-YYYY"),
        sa.Column("currency_symbol", sa.String(length=8), nullable=False),
        sa.Column("session_timeout", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("max_records_per_page", sa.Integer(), nullable=False, server_default="25"),
        sa.Column("updated_by", sa.String(length=64), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_system_settings"),
        sa.CheckConstraint("id = 1", name="ck_system_settings_singleton"),
    )


def downgrade():
    op.drop_table("system_settings")
    with op.batch_alter_table("activity_logs", schema=None) as batch_op:
        batch_op.drop_index("ix_activity_logs_username")
        batch_op.drop_index("ix_activity_logs_created_at")
    op.drop_table("activity_logs")
    op.drop_table("agents")
    with op.batch_alter_table("agreements", schema=None) as batch_op:
        batch_op.drop_index("ix_agreements_expiry_date")
        batch_op.drop_index("ix_agreements_agent_name")
        batch_op.drop_index("ix_agreements_created_at")
    op.drop_table("agreements")
    op.drop_table("users")
