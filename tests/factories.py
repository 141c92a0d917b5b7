"""Builders for ledger entries used across tests."""

from datetime import date
from decimal import Decimal

from design_ledger.models import Charge, Payment, SecurityLog, SecurityStatus


def make_charge(id: str = "1", amount: int = 300, **overrides) -> Charge:
    values = dict(
        id=id,
        type="Retouch",
        amount=Decimal(amount),
        entry_date=date(2024, 1, 1),
        added_by="Sanjaya",
    )
    values.update(overrides)
    return Charge(**values)


def make_payment(id: str = "p1", amount: int = 500, **overrides) -> Payment:
    values = dict(
        id=id,
        method="Bank Transfer",
        amount=Decimal(amount),
        entry_date=date(2024, 1, 2),
        added_by="Ravi",
        note="First instalment",
    )
    values.update(overrides)
    return Payment(**values)


def make_security_log(id: str, status: SecurityStatus = SecurityStatus.WRONG_PASSWORD) -> SecurityLog:
    return SecurityLog(
        id=id,
        attempted_email=f"intruder{id}@example.com",
        timestamp=1700000000000 + int(id),
        date="2023-11-14 22:13:20",
        status=status,
    )
