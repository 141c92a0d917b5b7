"""
Audit Models for Design Ledger

Every change to the ledger, every rejected import and every outage of an
external collaborator is described by a LedgerEvent before it is logged.

DESIGN DECISION: Events are append-only records. They describe what
happened; they are never used to rebuild ledger state.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class LedgerEventType(str, Enum):
    """Types of events we audit."""
    # Ledger mutations
    CHARGE_ADDED = "charge_added"
    PAYMENT_ADDED = "payment_added"
    TEMPLATES_SAVED = "templates_saved"
    SECURITY_LOG_ADDED = "security_log_added"
    SECURITY_LOGS_CLEARED = "security_logs_cleared"

    # Bridge transfer
    LEDGER_EXPORTED = "ledger_exported"
    LEDGER_IMPORTED = "ledger_imported"
    BRIDGE_IMPORT_REJECTED = "bridge_import_rejected"

    # Sync
    SUBSCRIBER_FAILED = "subscriber_failed"

    # External services
    SUMMARY_UNAVAILABLE = "summary_unavailable"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    event_type: LedgerEventType
    severity: AuditSeverity = Field(default=AuditSeverity.INFO)

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'charge', 'payment', 'ledger')"
    )
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class LedgerEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = LedgerEventBuilder.charge_added(charge_id, "Retouch", "300", "Sanjaya")
        event = LedgerEventBuilder.import_rejected("not valid base64")
    """

    @staticmethod
    def charge_added(
        charge_id: str,
        charge_type: str,
        amount: str,
        added_by: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.CHARGE_ADDED,
            entity_type="charge",
            entity_id=charge_id,
            description=f"Charge added: {charge_type} - {amount}",
            details={
                "type": charge_type,
                "amount": amount,
                "added_by": added_by,
            },
        )

    @staticmethod
    def payment_added(
        payment_id: str,
        method: str,
        amount: str,
        added_by: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.PAYMENT_ADDED,
            entity_type="payment",
            entity_id=payment_id,
            description=f"Payment added: {method} - {amount}",
            details={
                "method": method,
                "amount": amount,
                "added_by": added_by,
            },
        )

    @staticmethod
    def templates_saved(count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TEMPLATES_SAVED,
            entity_type="templates",
            description=f"Price list saved with {count} templates",
            details={"template_count": count},
        )

    @staticmethod
    def security_log_added(
        log_id: str,
        attempted_email: str,
        status: str,
        evicted: int,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SECURITY_LOG_ADDED,
            severity=AuditSeverity.WARNING,
            entity_type="security_log",
            entity_id=log_id,
            description=f"Refused login recorded: {status}",
            details={
                "attempted_email": attempted_email,
                "status": status,
                "evicted": evicted,
            },
        )

    @staticmethod
    def security_logs_cleared(cleared: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SECURITY_LOGS_CLEARED,
            entity_type="security_log",
            description=f"Security logs cleared ({cleared} removed)",
            details={"cleared": cleared},
        )

    @staticmethod
    def ledger_exported(charges: int, payments: int, length: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_EXPORTED,
            entity_type="ledger",
            description="Ledger exported as bridge blob",
            details={
                "charges": charges,
                "payments": payments,
                "blob_length": length,
            },
        )

    @staticmethod
    def ledger_imported(charges: int, payments: int, templates: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_IMPORTED,
            entity_type="ledger",
            description=(
                f"Ledger replaced from bridge blob: "
                f"{charges} charges, {payments} payments"
            ),
            details={
                "charges": charges,
                "payments": payments,
                "templates": templates,
            },
        )

    @staticmethod
    def import_rejected(reason: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.BRIDGE_IMPORT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            description="Bridge blob rejected; ledger left untouched",
            error_message=reason,
        )

    @staticmethod
    def subscriber_failed(error_message: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SUBSCRIBER_FAILED,
            severity=AuditSeverity.ERROR,
            description="Change subscriber raised while handling an update",
            error_message=error_message,
        )

    @staticmethod
    def summary_unavailable(service: str, error_message: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SUMMARY_UNAVAILABLE,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={"service": service},
        )
