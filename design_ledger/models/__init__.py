"""
Data Models Package

This package contains all Pydantic models used in Design Ledger.
All data stored, broadcast or transferred must conform to these schemas.
"""

from design_ledger.models.ledger import (
    Charge,
    LedgerState,
    LedgerTotals,
    Payment,
    PriceTemplate,
    Role,
    SecurityLog,
    SecurityStatus,
    default_templates,
    generate_entry_id,
    now_millis,
)
from design_ledger.models.audit import (
    AuditSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)

__all__ = [
    # Ledger models
    "Charge",
    "LedgerState",
    "LedgerTotals",
    "Payment",
    "PriceTemplate",
    "Role",
    "SecurityLog",
    "SecurityStatus",
    "default_templates",
    "generate_entry_id",
    "now_millis",
    # Audit models
    "AuditSeverity",
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
]
