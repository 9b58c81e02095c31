from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from leasedesk.time_utils import to_iso_date, to_utc_z, utcnow

MONEY = db.Numeric(14, 2)

# Client-supplied monetary inputs.
INPUT_AMOUNT_FIELDS = (
    "total_payment",
    "payment_owner",
    "payment_tenant",
    "actual_cost",
    "agent_commission",
    "other_expenses",
)

# Always recomputed server-side, never accepted from a client.
DERIVED_AMOUNT_FIELDS = (
    "gross_profit",
    "net_profit",
    "profit_margin",
    "payment_due",
)

DATE_FIELDS = ("agreement_date", "expiry_date", "reminder_date", "biometric_date")

TEXT_FIELDS = (
    "owner_name",
    "tenant_name",
    "location",
    "token_number",
    "owner_contact",
    "tenant_contact",
    "email",
    "cc_email",
    "agent_name",
    "agreement_status",
)


def _amount(value: Decimal | None) -> float:
    return float(value) if value is not None else 0.0


class Agreement(db.Model):
    """
    A rental/leasing agreement between an owner and a tenant.

    token_number is the externally assigned business key and is unique
    across all agreements (enforced by the database, not only the service).
    Derived amounts are a pure function of the inputs on every write.
    agreement_status is a free-form workflow label (Drafted, Signed, ...).
    """
    __tablename__ = "agreements"
    __table_args__ = (
        db.UniqueConstraint("token_number", name="uq_agreements_token_number"),
        db.Index("ix_agreements_created_at", "created_at"),
        db.Index("ix_agreements_agent_name", "agent_name"),
        db.Index("ix_agreements_expiry_date", "expiry_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # Parties
    owner_name = db.Column(db.String(200), nullable=False)
    tenant_name = db.Column(db.String(200), nullable=True)
    owner_contact = db.Column(db.String(64), nullable=True)
    tenant_contact = db.Column(db.String(64), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    cc_email = db.Column(db.String(255), nullable=True)

    location = db.Column(db.String(255), nullable=False)
    token_number = db.Column(db.String(64), nullable=False)
    agent_name = db.Column(db.String(128), nullable=True)
    agreement_status = db.Column(db.String(64), nullable=True)

    agreement_date = db.Column(db.Date, nullable=True)
    expiry_date = db.Column(db.Date, nullable=True)
    reminder_date = db.Column(db.Date, nullable=True)
    biometric_date = db.Column(db.Date, nullable=True)

    # Inputs
    total_payment = db.Column(MONEY, nullable=False, default=0)
    payment_owner = db.Column(MONEY, nullable=False, default=0)
    payment_tenant = db.Column(MONEY, nullable=False, default=0)
    actual_cost = db.Column(MONEY, nullable=False, default=0)
    agent_commission = db.Column(MONEY, nullable=False, default=0)
    other_expenses = db.Column(MONEY, nullable=False, default=0)

    # Derived
    gross_profit = db.Column(MONEY, nullable=False, default=0)
    net_profit = db.Column(MONEY, nullable=False, default=0)
    profit_margin = db.Column(db.Numeric(9, 2), nullable=False, default=0)
    payment_due = db.Column(MONEY, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "owner_name": self.owner_name,
            "tenant_name": self.tenant_name,
            "owner_contact": self.owner_contact,
            "tenant_contact": self.tenant_contact,
            "email": self.email,
            "cc_email": self.cc_email,
            "location": self.location,
            "token_number": self.token_number,
            "agent_name": self.agent_name,
            "agreement_status": self.agreement_status,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
        for field in DATE_FIELDS:
            data[field] = to_iso_date(getattr(self, field))
        for field in INPUT_AMOUNT_FIELDS + DERIVED_AMOUNT_FIELDS:
            data[field] = _amount(getattr(self, field))
        return data


class Agent(db.Model):
    """Staff/agent names offered to the client when filling agreements."""
    __tablename__ = "agents"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_agents_name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}
