"""Audit logging package."""

from design_ledger.audit.logger import LedgerEventLogger

__all__ = ["LedgerEventLogger"]
