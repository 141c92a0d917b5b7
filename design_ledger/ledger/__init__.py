"""Ledger core: the store and read-only reports over its state."""

from design_ledger.ledger.reports import (
    ActivityItem,
    compute_totals,
    recent_activity,
    render_text_report,
    report_filename,
)
from design_ledger.ledger.store import (
    DEFAULT_SECURITY_LOG_LIMIT,
    DEFAULT_STORAGE_KEY,
    LedgerStore,
)

__all__ = [
    "ActivityItem",
    "DEFAULT_SECURITY_LOG_LIMIT",
    "DEFAULT_STORAGE_KEY",
    "LedgerStore",
    "compute_totals",
    "recent_activity",
    "render_text_report",
    "report_filename",
]
