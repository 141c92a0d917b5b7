"""
Change Notifier

Owned by a single LedgerStore. Tells every subscriber "the ledger changed,
here is the current state" whenever:
- the owning store mutates the ledger, or
- another store on the same transport announces a change.

Subscribers always receive a full, freshly read LedgerState, never a delta.
A callback may therefore be invoked more than once for the same state;
callbacks are expected to be idempotent (re-render from what they get).
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from design_ledger.audit import LedgerEventLogger
from design_ledger.models import LedgerState
from design_ledger.sync.transport import ChangeTransport

Subscriber = Callable[[LedgerState], None]


class ChangeNotifier:
    """Observer registry with an injected cross-store transport."""

    def __init__(
        self,
        read_state: Callable[[], LedgerState],
        transport: Optional[ChangeTransport] = None,
        audit_logger: Optional[LedgerEventLogger] = None,
    ):
        """
        Args:
            read_state: Returns the current durable ledger state
            transport: Carries change signals to/from other stores.
                      If None, only in-process subscribers of this
                      notifier are told about changes.
            audit_logger: Receives subscriber failures
        """
        self._read_state = read_state
        self._transport = transport
        self._audit_logger = audit_logger or LedgerEventLogger()
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()
        self._unlisten = transport.listen(self._on_remote_change) if transport else None

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback.

        The callback fires immediately with the current state, so a new
        subscriber is never left blank.

        Returns:
            A function that unsubscribes the callback
        """
        with self._lock:
            self._subscribers.append(callback)

        self._deliver(callback, self._read_state())

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def notify(self) -> None:
        """Announce a local change to local subscribers and to other stores."""
        self._broadcast()
        if self._transport is not None:
            self._transport.publish()

    def _on_remote_change(self) -> None:
        self._broadcast()

    def _broadcast(self) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        if not subscribers:
            return

        state = self._read_state()
        for callback in subscribers:
            self._deliver(callback, state.model_copy(deep=True))

    def _deliver(self, callback: Subscriber, state: LedgerState) -> None:
        try:
            callback(state)
        except Exception as e:
            # One broken view must not starve the others
            self._audit_logger.log_subscriber_failed(f"{type(e).__name__}: {e}")

    def close(self) -> None:
        """Drop all subscribers and disconnect from the transport."""
        with self._lock:
            self._subscribers.clear()
        if self._unlisten is not None:
            self._unlisten()
            self._unlisten = None
        if self._transport is not None:
            self._transport.close()
