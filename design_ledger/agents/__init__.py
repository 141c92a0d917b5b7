"""AI Agents package."""

from design_ledger.agents.summary_agent import (
    EMPTY_LEDGER_MESSAGE,
    UNAVAILABLE_MESSAGE,
    LedgerSummary,
    LedgerSummaryAgent,
)

__all__ = [
    "EMPTY_LEDGER_MESSAGE",
    "UNAVAILABLE_MESSAGE",
    "LedgerSummary",
    "LedgerSummaryAgent",
]
