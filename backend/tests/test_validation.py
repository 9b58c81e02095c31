"""Input struct tests: camelCase/snake_case payloads, required fields, filters."""

from datetime import date
from decimal import Decimal

import pytest

from leasedesk.errors import ValidationError
from leasedesk.validation import (
    AgreementInput,
    LoginInput,
    PasswordChangeInput,
    ReportFilter,
    SettingsInput,
    UserInput,
)

ROLES = ("admin", "manager", "executive", "agent", "user")


class TestAgreementInput:
    def test_camel_case(self):
        data = AgreementInput.from_payload({
            "ownerName": " Owner ",
            "location": "Pune",
            "tokenNumber": "T-1",
            "agreementDate": "2026-01-15",
            "totalPayment": "1,000",
        })
        assert data.text["owner_name"] == "Owner"
        assert data.token_number == "T-1"
        assert data.dates["agreement_date"] == date(2026, 1, 15)
        assert data.amounts["total_payment"] == Decimal("1000.00")
        assert data.amounts["actual_cost"] == Decimal("0")

    def test_snake_case(self):
        data = AgreementInput.from_payload({
            "owner_name": "Owner",
            "location": "Pune",
            "token_number": "T-2",
            "expiry_date": "2026-12-31T00:00:00Z",
        })
        assert data.token_number == "T-2"
        assert data.dates["expiry_date"] == date(2026, 12, 31)

    def test_missing_required(self):
        with pytest.raises(ValidationError) as exc:
            AgreementInput.from_payload({"ownerName": "Owner", "location": " "})
        assert "location" in exc.value.message
        assert "tokenNumber" in exc.value.message

    def test_derived_fields_are_dropped(self):
        data = AgreementInput.from_payload({
            "ownerName": "A",
            "location": "L",
            "tokenNumber": "T",
            "netProfit": 999999,
            "paymentDue": -1,
        })
        assert "net_profit" not in data.columns()
        assert "payment_due" not in data.columns()

    def test_bad_date(self):
        with pytest.raises(ValidationError):
            AgreementInput.from_payload({
                "ownerName": "A", "location": "L", "tokenNumber": "T", "expiryDate": "31/12/2026",
            })

    def test_non_object_payload(self):
        with pytest.raises(ValidationError):
            AgreementInput.from_payload(["not", "a", "dict"])


class TestAuthInputs:
    def test_login_requires_both(self):
        with pytest.raises(ValidationError):
            LoginInput.from_payload({"username": "admin"})
        with pytest.raises(ValidationError):
            LoginInput.from_payload(None)

    def test_password_change_accepts_both_spellings(self):
        a = PasswordChangeInput.from_payload({"currentPassword": "a", "newPassword": "b"})
        b = PasswordChangeInput.from_payload({"current_password": "a", "new_password": "b"})
        assert a == b

    def test_user_role_defaults_to_user(self):
        data = UserInput.from_payload({"username": "carol", "password": "secret1"}, roles=ROLES)
        assert data.role == "user"

    def test_user_unknown_role(self):
        with pytest.raises(ValidationError):
            UserInput.from_payload({"username": "carol", "password": "secret1", "role": "root"}, roles=ROLES)


class TestSettingsInput:
    def test_partial(self):
        data = SettingsInput.from_payload({"companyName": "Acme", "maxRecordsPerPage": "50"})
        assert data.values == {"company_name": "Acme", "max_records_per_page": 50}

    @pytest.mark.parametrize("value", [0, -5, "abc", True])
    def test_positive_int_required(self, value):
        with pytest.raises(ValidationError):
            SettingsInput.from_payload({"reminderDaysBefore": value})

    def test_blank_currency_rejected(self):
        with pytest.raises(ValidationError):
            SettingsInput.from_payload({"currencySymbol": " "})


class TestReportFilter:
    def test_parses_args(self):
        f = ReportFilter.from_args({
            "agentName": "Agent 1",
            "expiryFromDate": "2026-01-01",
            "pendingAmount": "greater",
        })
        assert f.agent_name == "Agent 1"
        assert f.expiry_from == date(2026, 1, 1)
        assert f.expiry_to is None
        assert f.pending == "greater"

    def test_bad_pending(self):
        with pytest.raises(ValidationError):
            ReportFilter.from_args({"pendingAmount": "equal"})
