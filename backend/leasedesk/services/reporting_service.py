# Overview: Service-layer operations for reporting; read-only views over agreements.

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import func

from ..models import Agreement
from ..validation import PENDING_GREATER, PENDING_LESS, ProfitReportFilter, ReportFilter
from .settings_service import SettingsService


class AgreementQuery:
    """
    Composable filter over the agreements table.

    Each method adds one predicate; values are always bound parameters.
    Date ranges are inclusive at both ends and either bound may be omitted.
    """

    def __init__(self):
        self._clauses = []

    @property
    def clauses(self) -> list:
        return list(self._clauses)

    def equals(self, column, value) -> "AgreementQuery":
        if value is not None:
            self._clauses.append(column == value)
        return self

    def between(self, column, start: date | None, end: date | None) -> "AgreementQuery":
        if start is not None:
            self._clauses.append(column >= start)
        if end is not None:
            self._clauses.append(column <= end)
        return self

    def sign(self, column, direction: str | None) -> "AgreementQuery":
        """Strict comparison with zero: 'greater' -> > 0, 'less' -> < 0."""
        if direction == PENDING_GREATER:
            self._clauses.append(column > 0)
        elif direction == PENDING_LESS:
            self._clauses.append(column < 0)
        return self

    def apply(self, query):
        if self._clauses:
            query = query.filter(*self._clauses)
        return query


def _money(value) -> float:
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(Decimal("0.01")))


def top_agent(rows) -> str:
    """
    Agent with the highest total net profit.

    Rows are consumed in the order given; among agents tied on the maximum,
    the one encountered first wins. Rows without an agent name are ignored.
    """
    totals: dict[str, Decimal] = {}
    for row in rows:
        if not row.agent_name:
            continue
        totals[row.agent_name] = totals.get(row.agent_name, Decimal("0")) + Decimal(str(row.net_profit or 0))

    best_name, best_total = None, None
    for name, total in totals.items():
        if best_total is None or total > best_total:
            best_name, best_total = name, total
    return best_name or "-"


class ReportService:
    def __init__(self, session, settings: SettingsService):
        self.session = session
        self.settings = settings

    def agreements_report(self, filters: ReportFilter) -> list[dict]:
        """Agreements matching agent/owner name, expiry range and due sign."""
        builder = (
            AgreementQuery()
            .equals(Agreement.agent_name, filters.agent_name)
            .equals(Agreement.owner_name, filters.owner_name)
            .between(Agreement.expiry_date, filters.expiry_from, filters.expiry_to)
            .sign(Agreement.payment_due, filters.pending)
        )
        query = builder.apply(self.session.query(Agreement)).order_by(
            Agreement.created_at.desc(), Agreement.id.desc()
        )
        return [a.to_dict() for a in query.all()]

    def profit_report(self, filters: ProfitReportFilter) -> dict:
        builder = (
            AgreementQuery()
            .between(Agreement.agreement_date, filters.from_date, filters.to_date)
            .equals(Agreement.agent_name, filters.agent_name)
        )

        details_query = builder.apply(
            self.session.query(
                Agreement.agent_name,
                Agreement.owner_name,
                Agreement.token_number,
                Agreement.total_payment,
                Agreement.actual_cost,
                Agreement.agent_commission,
                Agreement.other_expenses,
                Agreement.net_profit,
                Agreement.profit_margin,
            )
        ).order_by(Agreement.created_at.asc(), Agreement.id.asc())
        rows = details_query.all()

        summary = builder.apply(
            self.session.query(
                func.count(Agreement.id).label("agreement_count"),
                func.coalesce(func.sum(Agreement.total_payment), 0).label("total_revenue"),
                func.coalesce(func.sum(Agreement.net_profit), 0).label("total_profit"),
                func.coalesce(func.avg(Agreement.profit_margin), 0).label("average_margin"),
            )
        ).one()

        return {
            "details": [
                {
                    "agent_name": row.agent_name,
                    "owner_name": row.owner_name,
                    "token_number": row.token_number,
                    "total_payment": _money(row.total_payment),
                    "actual_cost": _money(row.actual_cost),
                    "agent_commission": _money(row.agent_commission),
                    "other_expenses": _money(row.other_expenses),
                    "net_profit": _money(row.net_profit),
                    "profit_margin": _money(row.profit_margin),
                }
                for row in rows
            ],
            "summary": {
                "agreement_count": int(summary.agreement_count or 0),
                "total_revenue": _money(summary.total_revenue),
                "total_profit": _money(summary.total_profit),
                "average_margin": _money(summary.average_margin),
            },
            "topAgent": top_agent(rows),
        }

    def expiring(self, *, days: int | None = None, as_of: date | None = None) -> dict:
        """Agreements expiring within [as_of, as_of + days], soonest first."""
        days = days if days is not None else self.settings.reminder_days()
        start = as_of or date.today()
        end = start + timedelta(days=days)
        query = (
            AgreementQuery()
            .between(Agreement.expiry_date, start, end)
            .apply(self.session.query(Agreement))
            .order_by(Agreement.expiry_date.asc(), Agreement.id.asc())
        )
        agreements = query.all()
        return {
            "from": start.isoformat(),
            "to": end.isoformat(),
            "days": days,
            "agreements": [a.to_dict() for a in agreements],
            "count": len(agreements),
        }
