from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from .errors import ValidationError
from .services.financials import to_amount
from leasedesk.time_utils import parse_iso_date

# Client payloads use camelCase; to_dict()/backups use snake_case.
# Both spellings are accepted for every field.
AGREEMENT_TEXT_KEYS = {
    "owner_name": ("ownerName", 200),
    "tenant_name": ("tenantName", 200),
    "location": ("location", 255),
    "token_number": ("tokenNumber", 64),
    "owner_contact": ("ownerContact", 64),
    "tenant_contact": ("tenantContact", 64),
    "email": ("email", 255),
    "cc_email": ("ccEmail", 255),
    "agent_name": ("agentName", 128),
    "agreement_status": ("agreementStatus", 64),
}

AGREEMENT_DATE_KEYS = {
    "agreement_date": "agreementDate",
    "expiry_date": "expiryDate",
    "reminder_date": "reminderDate",
    "biometric_date": "biometricDate",
}

AGREEMENT_AMOUNT_KEYS = {
    "total_payment": "totalPayment",
    "payment_owner": "paymentOwner",
    "payment_tenant": "paymentTenant",
    "actual_cost": "actualCost",
    "agent_commission": "agentCommission",
    "other_expenses": "otherExpenses",
}

AGREEMENT_REQUIRED = ("owner_name", "location", "token_number")


def _pick(payload: dict, snake: str, camel: str | None = None) -> Any:
    if camel and camel in payload:
        return payload[camel]
    return payload.get(snake)


def _to_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def _to_date(value: Any, name: str) -> date | None:
    try:
        return parse_iso_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")


def _to_money(value: Any, name: str) -> Decimal:
    try:
        return to_amount(value)
    except ValidationError:
        raise ValidationError(f"{name} is out of range")


def _to_positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a positive integer")
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a positive integer")
    if number <= 0:
        raise ValidationError(f"{name} must be a positive integer")
    return number


def _require_dict(payload: Any) -> dict:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    return payload


@dataclass(frozen=True)
class AgreementInput:
    """
    Validated agreement payload.

    Derived amounts (gross/net profit, margin, payment due) are not part of
    the input and are dropped if a client sends them.
    """
    text: dict[str, str | None]
    dates: dict[str, date | None]
    amounts: dict[str, Decimal]

    @property
    def token_number(self) -> str:
        return self.text["token_number"]

    def columns(self) -> dict[str, Any]:
        return {**self.text, **self.dates, **self.amounts}

    @classmethod
    def from_payload(cls, payload: Any) -> "AgreementInput":
        payload = _require_dict(payload)

        text: dict[str, str | None] = {}
        for key, (camel, max_len) in AGREEMENT_TEXT_KEYS.items():
            value = _to_text(_pick(payload, key, camel))
            if value is not None and len(value) > max_len:
                raise ValidationError(f"{camel} exceeds max length {max_len}")
            text[key] = value

        missing = [AGREEMENT_TEXT_KEYS[k][0] for k in AGREEMENT_REQUIRED if not text[k]]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        dates = {
            key: _to_date(_pick(payload, key, camel), camel)
            for key, camel in AGREEMENT_DATE_KEYS.items()
        }
        amounts = {
            key: _to_money(_pick(payload, key, camel), camel)
            for key, camel in AGREEMENT_AMOUNT_KEYS.items()
        }
        return cls(text=text, dates=dates, amounts=amounts)


@dataclass(frozen=True)
class LoginInput:
    username: str
    password: str

    @classmethod
    def from_payload(cls, payload: Any) -> "LoginInput":
        payload = _require_dict(payload)
        username = payload.get("username")
        password = payload.get("password")
        if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
            raise ValidationError("username and password required")
        return cls(username=username, password=password)


@dataclass(frozen=True)
class PasswordChangeInput:
    current_password: str
    new_password: str

    @classmethod
    def from_payload(cls, payload: Any) -> "PasswordChangeInput":
        payload = _require_dict(payload)
        current = _pick(payload, "current_password", "currentPassword")
        new = _pick(payload, "new_password", "newPassword")
        if not isinstance(current, str) or not isinstance(new, str) or not current or not new:
            raise ValidationError("currentPassword and newPassword required")
        return cls(current_password=current, new_password=new)


@dataclass(frozen=True)
class UserInput:
    username: str
    password: str
    role: str

    @classmethod
    def from_payload(cls, payload: Any, *, roles: tuple[str, ...]) -> "UserInput":
        payload = _require_dict(payload)
        username = _to_text(payload.get("username"))
        password = payload.get("password")
        role = _to_text(payload.get("role")) or "user"
        if not username or not isinstance(password, str) or not password:
            raise ValidationError("username and password required")
        if len(username) > 64:
            raise ValidationError("username exceeds max length 64")
        if role not in roles:
            raise ValidationError(f"role must be one of: {', '.join(roles)}")
        return cls(username=username, password=password, role=role)


SETTINGS_KEYS = {
    "default_cc_email": "defaultCCEmail",
    "company_name": "companyName",
    "reminder_days_before": "reminderDaysBefore",
    "date_format": "dateFormat",
    "currency_symbol": "currencySymbol",
    "session_timeout": "sessionTimeout",
    "max_records_per_page": "maxRecordsPerPage",
}
SETTINGS_INT_KEYS = {"reminder_days_before", "session_timeout", "max_records_per_page"}


@dataclass(frozen=True)
class SettingsInput:
    """Partial update: only keys present in the payload are applied."""
    values: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "SettingsInput":
        payload = _require_dict(payload)
        values: dict[str, Any] = {}
        for key, camel in SETTINGS_KEYS.items():
            if camel not in payload and key not in payload:
                continue
            raw = _pick(payload, key, camel)
            if key in SETTINGS_INT_KEYS:
                values[key] = _to_positive_int(raw, camel)
            else:
                values[key] = _to_text(raw)
        if values.get("date_format") is None and "date_format" in values:
            raise ValidationError("dateFormat cannot be blank")
        if values.get("currency_symbol") is None and "currency_symbol" in values:
            raise ValidationError("currencySymbol cannot be blank")
        return cls(values=values)


PENDING_GREATER = "greater"
PENDING_LESS = "less"


@dataclass(frozen=True)
class ReportFilter:
    """Filters for the agreement report. Date bounds are inclusive."""
    agent_name: str | None = None
    owner_name: str | None = None
    expiry_from: date | None = None
    expiry_to: date | None = None
    pending: str | None = None  # "greater" -> due > 0, "less" -> due < 0

    @classmethod
    def from_args(cls, args) -> "ReportFilter":
        pending = _to_text(args.get("pendingAmount"))
        if pending is not None and pending not in (PENDING_GREATER, PENDING_LESS):
            raise ValidationError("pendingAmount must be 'greater' or 'less'")
        return cls(
            agent_name=_to_text(args.get("agentName")),
            owner_name=_to_text(args.get("ownerName")),
            expiry_from=_to_date(args.get("expiryFromDate"), "expiryFromDate"),
            expiry_to=_to_date(args.get("expiryToDate"), "expiryToDate"),
            pending=pending,
        )


@dataclass(frozen=True)
class ProfitReportFilter:
    """Filters for the profit report (agreement date range, agent)."""
    from_date: date | None = None
    to_date: date | None = None
    agent_name: str | None = None

    @classmethod
    def from_args(cls, args) -> "ProfitReportFilter":
        return cls(
            from_date=_to_date(args.get("fromDate"), "fromDate"),
            to_date=_to_date(args.get("toDate"), "toDate"),
            agent_name=_to_text(args.get("agentName")),
        )
