"""Tests for totals, the activity feed and the text report."""

from datetime import datetime
from decimal import Decimal

from design_ledger.ledger import (
    compute_totals,
    recent_activity,
    render_text_report,
    report_filename,
)
from design_ledger.models import LedgerState, LedgerTotals

from factories import make_charge, make_payment


class TestTotals:
    """Tests for compute_totals."""

    def test_empty_ledger(self):
        """Test that an empty ledger totals to zero."""
        totals = compute_totals(LedgerState.seeded())
        assert totals.costs == totals.paid == totals.balance == Decimal("0")

    def test_sums_and_balance(self):
        """Test costs, paid and balance for a small ledger."""
        state = LedgerState(
            charges=[make_charge("1", amount=300), make_charge("2", amount=500)],
            payments=[make_payment("p1", amount=600)],
        )
        totals = compute_totals(state)
        assert totals.costs == Decimal("800")
        assert totals.paid == Decimal("600")
        assert totals.balance == Decimal("-200")

    def test_decimal_amounts_add_exactly(self):
        """Test that cents do not pick up float error."""
        state = LedgerState(charges=[
            make_charge("1", amount=Decimal("0.1")),
            make_charge("2", amount=Decimal("0.2")),
        ])
        assert compute_totals(state).costs == Decimal("0.3")


class TestRecentActivity:
    """Tests for the merged activity feed."""

    def test_newest_first(self):
        """Test that charges and payments are merged by timestamp."""
        state = LedgerState(
            charges=[make_charge("1", timestamp=100), make_charge("2", timestamp=300)],
            payments=[make_payment("p1", timestamp=200)],
        )
        assert [item.id for item in recent_activity(state)] == ["2", "p1", "1"]

    def test_untimestamped_entries_last_in_order(self):
        """Test entries without timestamps keep their relative order at the end."""
        state = LedgerState(
            charges=[make_charge("old1"), make_charge("new", timestamp=5), make_charge("old2")],
        )
        assert [item.id for item in recent_activity(state)] == ["new", "old1", "old2"]

    def test_limit(self):
        """Test that the feed is truncated."""
        state = LedgerState(charges=[make_charge(str(i), timestamp=i) for i in range(15)])
        items = recent_activity(state, limit=10)
        assert len(items) == 10
        assert items[0].id == "14"

    def test_item_fields(self):
        """Test how charges and payments appear in the feed."""
        state = LedgerState(
            charges=[make_charge(description="Sky swap", timestamp=2)],
            payments=[make_payment(timestamp=1)],
        )
        charge_item, payment_item = recent_activity(state)
        assert charge_item.kind == "charge"
        assert charge_item.label == "Retouch"
        assert charge_item.detail == "Sky swap"
        assert charge_item.signed_amount == Decimal("-300")
        assert payment_item.kind == "payment"
        assert payment_item.label == "Bank Transfer"
        assert payment_item.detail == "First instalment"
        assert payment_item.signed_amount == Decimal("500")
        assert payment_item.entry_date == "2024-01-02"


class TestTextReport:
    """Tests for the downloadable report."""

    def test_report_layout(self):
        """Test the exact report text."""
        totals = LedgerTotals(costs=Decimal("12500"), paid=Decimal("10000"))
        report = render_text_report(totals, generated_at=datetime(2024, 3, 5, 14, 30, 0))
        assert report == (
            "DESIGN LEDGER REPORT\n"
            "Generated: 2024-03-05 14:30:00\n"
            "Total Costs: Rs. 12,500\n"
            "Total Paid: Rs. 10,000\n"
            "Net Balance: Rs. -2,500\n"
        )

    def test_currency_label(self):
        """Test a different currency prefix."""
        report = render_text_report(LedgerTotals(), currency_label="LKR")
        assert "Total Costs: LKR 0\n" in report

    def test_filename(self):
        """Test that the file name carries the generation time."""
        generated_at = datetime(2024, 3, 5, 14, 30, 0)
        expected = int(generated_at.timestamp() * 1000)
        assert report_filename(generated_at) == f"Ledger_Report_{expected}.txt"
