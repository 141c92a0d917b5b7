"""
Ledger Reports

Deterministic read-only views over a LedgerState: totals, the recent
activity feed, and the plain-text report users download and share.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from design_ledger.models import LedgerState, LedgerTotals


class ActivityItem(BaseModel):
    """One line of the combined charge/payment feed."""

    kind: str  # "charge" or "payment"
    id: str
    label: str
    amount: Decimal
    entry_date: str
    added_by: str
    detail: str
    timestamp: Optional[int] = None

    @property
    def signed_amount(self) -> Decimal:
        """Charges count against the balance, payments towards it."""
        return -self.amount if self.kind == "charge" else self.amount


def compute_totals(state: LedgerState) -> LedgerTotals:
    """Sum charges and payments."""
    return LedgerTotals(
        costs=sum((charge.amount for charge in state.charges), Decimal("0")),
        paid=sum((payment.amount for payment in state.payments), Decimal("0")),
    )


def recent_activity(state: LedgerState, limit: int = 10) -> list[ActivityItem]:
    """
    Charges and payments merged, newest first.

    Entries without a timestamp (e.g. imported from an older device) sort
    after all timestamped ones, keeping their insertion order.
    """
    items = [
        ActivityItem(
            kind="charge",
            id=charge.id,
            label=charge.type,
            amount=charge.amount,
            entry_date=charge.entry_date.isoformat(),
            added_by=charge.added_by,
            detail=charge.description or "",
            timestamp=charge.timestamp,
        )
        for charge in state.charges
    ] + [
        ActivityItem(
            kind="payment",
            id=payment.id,
            label=payment.method,
            amount=payment.amount,
            entry_date=payment.entry_date.isoformat(),
            added_by=payment.added_by,
            detail=payment.note,
            timestamp=payment.timestamp,
        )
        for payment in state.payments
    ]

    # sorted() is stable, so untimestamped entries keep their order
    items = sorted(
        items,
        key=lambda item: (item.timestamp is not None, item.timestamp or 0),
        reverse=True,
    )
    return items[:limit]


def _money(amount: Decimal) -> str:
    return f"{amount:,}"


def render_text_report(
    totals: LedgerTotals,
    generated_at: Optional[datetime] = None,
    currency_label: str = "Rs.",
) -> str:
    """The downloadable plain-text ledger report."""
    generated_at = generated_at or datetime.now()
    return (
        "DESIGN LEDGER REPORT\n"
        f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}\n"
        f"Total Costs: {currency_label} {_money(totals.costs)}\n"
        f"Total Paid: {currency_label} {_money(totals.paid)}\n"
        f"Net Balance: {currency_label} {_money(totals.balance)}\n"
    )


def report_filename(generated_at: Optional[datetime] = None) -> str:
    """File name for a downloaded report, unique per millisecond."""
    generated_at = generated_at or datetime.now()
    return f"Ledger_Report_{int(generated_at.timestamp() * 1000)}.txt"
