"""
Tests for Design Ledger models

Test strategy:
1. Unit tests for individual components (models, codec, store)
2. Flow tests for sessions and sync (with in-memory storage)
3. No real API calls in tests (Gemini and Google Sheets are mocked)
"""

import json
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from design_ledger.models import (
    AuditSeverity,
    Charge,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
    LedgerState,
    LedgerTotals,
    Payment,
    PriceTemplate,
    Role,
    SecurityLog,
    SecurityStatus,
    default_templates,
    generate_entry_id,
)

from factories import make_charge, make_payment


class TestLedgerEntries:
    """Tests for charge, payment and template models."""

    def test_charge_creation(self):
        """Test Charge model creation by field name."""
        charge = make_charge()
        assert charge.type == "Retouch"
        assert charge.amount == Decimal("300")
        assert charge.entry_date == date(2024, 1, 1)
        assert charge.added_by == "Sanjaya"
        assert charge.description is None

    def test_charge_accepts_wire_names(self):
        """Test that camelCase wire names populate the model."""
        charge = Charge.model_validate({
            "id": "1",
            "type": "Retouch",
            "amount": 300,
            "date": "2024-01-01",
            "addedBy": "Sanjaya",
        })
        assert charge.added_by == "Sanjaya"
        assert charge.entry_date == date(2024, 1, 1)

    def test_charge_serializes_camel_case(self):
        """Test that the persisted shape uses camelCase keys."""
        dumped = make_charge().model_dump(mode="json", by_alias=True)
        assert dumped["addedBy"] == "Sanjaya"
        assert dumped["date"] == "2024-01-01"
        assert "added_by" not in dumped

    def test_charge_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            make_charge(amount=-1)

    def test_charge_rejects_unknown_fields(self):
        """Test that unexpected fields fail validation rather than being dropped."""
        with pytest.raises(ValidationError):
            Charge.model_validate({
                "id": "1",
                "type": "Retouch",
                "amount": 300,
                "date": "2024-01-01",
                "addedBy": "Sanjaya",
                "discount": 50,
            })

    def test_charge_is_immutable(self):
        """Test that a charge cannot be edited after creation."""
        charge = make_charge()
        with pytest.raises(ValidationError):
            charge.amount = Decimal("1")

    def test_payment_defaults(self):
        """Test Payment note defaults to empty."""
        payment = Payment(
            method="Cash",
            amount=Decimal("100"),
            entry_date=date(2024, 2, 1),
            added_by="Ravi",
        )
        assert payment.note == ""
        assert payment.id

    def test_payment_is_immutable(self):
        """Test that a payment cannot be edited after creation."""
        payment = make_payment()
        with pytest.raises(ValidationError):
            payment.note = "edited"

    def test_security_log_keeps_raw_email(self):
        """Test that the attempted email is stored exactly as typed."""
        log = SecurityLog(
            attempted_email="  Someone@Example.com ",
            status=SecurityStatus.UNAUTHORIZED_EMAIL,
        )
        assert log.attempted_email == "  Someone@Example.com "
        assert log.model_dump(by_alias=True)["attemptedEmail"] == "  Someone@Example.com "

    def test_default_templates(self):
        """Test the seeded price list."""
        templates = default_templates()
        assert [(t.id, t.name, t.amount) for t in templates] == [
            ("1", "Background Change", Decimal("500")),
            ("2", "Photo Retouch", Decimal("300")),
            ("3", "Album Basic", Decimal("6000")),
            ("4", "Album Premium", Decimal("9000")),
        ]

    def test_role_values(self):
        """Test role string values."""
        assert Role("DESIGNER") is Role.DESIGNER
        assert Role.JOB_GIVER.value == "JOB_GIVER"


class TestEntryIds:
    """Tests for time-derived id generation."""

    def test_ids_are_unique_and_increasing(self):
        """Test that ids created back to back never collide."""
        ids = [generate_entry_id() for _ in range(500)]
        assert len(set(ids)) == 500
        assert [int(i) for i in ids] == sorted(int(i) for i in ids)

    def test_ids_are_numeric_strings(self):
        """Test that ids look like epoch milliseconds."""
        assert generate_entry_id().isdigit()


class TestLedgerState:
    """Tests for the aggregate ledger document."""

    def test_seeded_state(self):
        """Test that a new ledger is empty apart from the default templates."""
        state = LedgerState.seeded()
        assert state.charges == []
        assert state.payments == []
        assert state.security_logs == []
        assert len(state.templates) == 4

    def test_document_round_trip(self):
        """Test persisting and reloading a ledger document."""
        state = LedgerState(
            charges=[make_charge()],
            payments=[make_payment()],
            templates=[PriceTemplate(id="t", name="Logo", amount=Decimal("1500"))],
        )
        restored = LedgerState.from_document(state.to_document())
        assert restored == state

    def test_document_shape(self):
        """Test the top-level keys of the persisted document."""
        document = json.loads(LedgerState.seeded().to_document())
        assert set(document) == {"charges", "payments", "templates", "securityLogs"}

    def test_duplicate_ids_rejected(self):
        """Test that ids must be unique within a collection."""
        with pytest.raises(ValidationError, match="Duplicate ids in charges"):
            LedgerState(charges=[make_charge("1"), make_charge("1")])

    def test_same_id_in_different_collections_allowed(self):
        """Test that uniqueness is per collection."""
        state = LedgerState(charges=[make_charge("1")], payments=[make_payment("1")])
        assert len(state.charges) == len(state.payments) == 1


class TestLedgerTotals:
    """Tests for the totals model."""

    def test_balance_is_paid_minus_costs(self):
        """Test balance sign convention."""
        totals = LedgerTotals(costs=Decimal("800"), paid=Decimal("500"))
        assert totals.balance == Decimal("-300")

    def test_empty_totals(self):
        """Test that totals default to zero."""
        assert LedgerTotals().balance == Decimal("0")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_ledger_event_creation(self):
        """Test LedgerEvent model creation."""
        event = LedgerEvent(
            event_type=LedgerEventType.CHARGE_ADDED,
            description="Charge added",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_ledger_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = LedgerEventBuilder.charge_added("42", "Retouch", "300", "Sanjaya")
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "charge_added"
        assert log_dict["entity_id"] == "42"
        assert log_dict["details"]["added_by"] == "Sanjaya"

    def test_import_rejected_is_warning(self):
        """Test that rejected imports are logged as warnings with a reason."""
        event = LedgerEventBuilder.import_rejected("not base64")
        assert event.event_type == LedgerEventType.BRIDGE_IMPORT_REJECTED
        assert event.severity == AuditSeverity.WARNING
        assert event.error_message == "not base64"

    def test_summary_unavailable_is_error(self):
        """Test external service errors."""
        event = LedgerEventBuilder.summary_unavailable("gemini", "timeout")
        assert event.severity == AuditSeverity.ERROR
        assert event.details == {"service": "gemini"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
