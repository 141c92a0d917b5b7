"""
Ledger Store

Owns the canonical ledger. Every mutation is the same three steps:
1. Read the whole document from storage
2. Change it in memory
3. Write the whole document back, then notify subscribers

DESIGN DECISION: No partial updates. The document is small (two people,
one project) and rewriting it whole keeps persistence trivially consistent.
Between processes, the last write wins at document granularity.

The store trusts its caller: attribution (addedBy) and roles are checked by
the session layer, not here. What the store does guarantee:
- charges and payments are only ever appended
- entry ids are unique within their collection
- at most `security_log_limit` security logs are kept, oldest evicted first
- a bad bridge blob never changes the ledger
"""

import threading
from typing import Callable, Iterable, Optional

from pydantic import ValidationError

from design_ledger.audit import LedgerEventLogger
from design_ledger.bridge import DecodeError, decode, encode
from design_ledger.models import (
    Charge,
    LedgerState,
    Payment,
    PriceTemplate,
    SecurityLog,
)
from design_ledger.services.storage import (
    CorruptStateError,
    DuplicateEntryError,
    StateStorageInterface,
)
from design_ledger.sync import ChangeNotifier, ChangeTransport

DEFAULT_STORAGE_KEY = "design_ledger_db"
DEFAULT_SECURITY_LOG_LIMIT = 20


class LedgerStore:
    """Durable, observable ledger state."""

    def __init__(
        self,
        storage: StateStorageInterface,
        transport: Optional[ChangeTransport] = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
        security_log_limit: int = DEFAULT_SECURITY_LOG_LIMIT,
        audit_logger: Optional[LedgerEventLogger] = None,
    ):
        """
        Args:
            storage: Backend holding the ledger document
            transport: Carries change signals to other stores sharing the
                      same storage. None means this store is alone.
            storage_key: Key the document is stored under
            security_log_limit: Cap on retained security logs
            audit_logger: Receives one event per mutation
        """
        if security_log_limit < 1:
            raise ValueError("security_log_limit must be at least 1")

        self._storage = storage
        self._storage_key = storage_key
        self._security_log_limit = security_log_limit
        self._audit_logger = audit_logger or LedgerEventLogger()
        self._lock = threading.RLock()
        self._notifier = ChangeNotifier(
            read_state=self.read,
            transport=transport,
            audit_logger=self._audit_logger,
        )

    @property
    def audit_logger(self) -> LedgerEventLogger:
        return self._audit_logger

    @property
    def security_log_limit(self) -> int:
        return self._security_log_limit

    # -------------------------------------------------------------------------
    # Reading and writing the document
    # -------------------------------------------------------------------------

    def read(self) -> LedgerState:
        """
        Current durable state.

        Returns a freshly seeded ledger if nothing has been persisted yet.

        Raises:
            CorruptStateError: If a persisted document exists but is unreadable
            StorageError: If the backend itself fails
        """
        document = self._storage.load(self._storage_key)
        if document is None:
            return LedgerState.seeded()
        try:
            return LedgerState.from_document(document)
        except ValidationError as e:
            raise CorruptStateError(
                f"Stored ledger under {self._storage_key!r} is unreadable: "
                f"{e.error_count()} errors"
            )

    def _write(self, state: LedgerState) -> None:
        self._storage.save(self._storage_key, state.to_document())
        self._notifier.notify()

    def _mutate(self, change: Callable[[LedgerState], None]) -> LedgerState:
        with self._lock:
            state = self.read()
            change(state)
            self._write(state)
            return state

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_charge(self, charge: Charge) -> None:
        """
        Append a charge.

        Raises:
            DuplicateEntryError: If a charge with the same id exists
        """
        def change(state: LedgerState) -> None:
            if any(existing.id == charge.id for existing in state.charges):
                raise DuplicateEntryError(f"Charge id already used: {charge.id}")
            state.charges.append(charge)

        self._mutate(change)
        self._audit_logger.log_charge_added(
            charge.id, charge.type, str(charge.amount), charge.added_by
        )

    def add_payment(self, payment: Payment) -> None:
        """
        Append a payment.

        Raises:
            DuplicateEntryError: If a payment with the same id exists
        """
        def change(state: LedgerState) -> None:
            if any(existing.id == payment.id for existing in state.payments):
                raise DuplicateEntryError(f"Payment id already used: {payment.id}")
            state.payments.append(payment)

        self._mutate(change)
        self._audit_logger.log_payment_added(
            payment.id, payment.method, str(payment.amount), payment.added_by
        )

    def save_templates(self, templates: Iterable[PriceTemplate]) -> None:
        """
        Replace the whole price list.

        Raises:
            DuplicateEntryError: If two templates share an id
        """
        templates = list(templates)
        ids = [template.id for template in templates]
        if len(ids) != len(set(ids)):
            raise DuplicateEntryError("Template ids must be unique")

        def change(state: LedgerState) -> None:
            state.templates = templates

        self._mutate(change)
        self._audit_logger.log_templates_saved(len(templates))

    def add_security_log(self, log: SecurityLog) -> None:
        """Append a security log, evicting the oldest entries beyond the cap."""
        evicted = 0

        def change(state: LedgerState) -> None:
            nonlocal evicted
            state.security_logs.append(log)
            overflow = len(state.security_logs) - self._security_log_limit
            if overflow > 0:
                del state.security_logs[:overflow]
                evicted = overflow

        self._mutate(change)
        self._audit_logger.log_security_log_added(
            log.id, log.attempted_email, log.status.value, evicted
        )

    def clear_security_logs(self) -> None:
        """Forget every security log."""
        cleared = 0

        def change(state: LedgerState) -> None:
            nonlocal cleared
            cleared = len(state.security_logs)
            state.security_logs = []

        self._mutate(change)
        self._audit_logger.log_security_logs_cleared(cleared)

    # -------------------------------------------------------------------------
    # Bridge transfer
    # -------------------------------------------------------------------------

    def export_data(self) -> str:
        """Encode the current ledger (without security logs) as a bridge blob."""
        state = self.read()
        blob = encode(state)
        self._audit_logger.log_exported(len(state.charges), len(state.payments), len(blob))
        return blob

    def import_data(self, blob: str) -> bool:
        """
        Replace the whole ledger with the content of a bridge blob.

        Never raises for bad input. Returns False, and leaves the ledger
        untouched, if the blob cannot be decoded or has neither charges nor
        payments. Security logs are replaced too; exported blobs carry none,
        so a successful import clears them.
        """
        try:
            incoming = decode(blob)
        except DecodeError as e:
            self._audit_logger.log_import_rejected(str(e))
            return False

        with self._lock:
            self._write(incoming)

        self._audit_logger.log_imported(
            len(incoming.charges), len(incoming.payments), len(incoming.templates)
        )
        return True

    # -------------------------------------------------------------------------
    # Notification
    # -------------------------------------------------------------------------

    def subscribe(self, callback: Callable[[LedgerState], None]) -> Callable[[], None]:
        """
        Be told about every change, local or from another store.

        The callback fires immediately with the current state.

        Returns:
            A function that unsubscribes the callback
        """
        return self._notifier.subscribe(callback)

    def close(self) -> None:
        """Drop subscribers and disconnect from the transport."""
        self._notifier.close()
