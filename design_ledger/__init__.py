"""
Design Ledger - Source Package

A shared ledger between a designer and a job giver: charges on one side,
payments on the other, kept in sync across windows and carried between
devices as a shareable link.

DESIGN PRINCIPLES:
1. History is append-only
2. The whole ledger is one document; every change rewrites it
3. Consumers re-read full state, never patch deltas
4. Bad input is rejected, never half-applied
5. Storage and sync transport are swappable
"""

__version__ = "1.0.0"
__author__ = "Design Ledger Team"
