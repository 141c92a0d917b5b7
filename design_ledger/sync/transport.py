"""
Change Transports

A transport carries a bare "something changed" signal between ledger
stores that share the same persisted document. It never carries state:
whoever hears the signal re-reads the whole ledger.

Two implementations:
- LocalChannel: stores living in the same process (tests, several windows
  of one app). Modelled on the browser BroadcastChannel: a channel does not
  hear its own broadcasts.
- FileChannel: stores living in different processes that share a data
  directory. A signal file is rewritten on every publish and polled by the
  others, either explicitly via poll() or from a background thread.
"""

from __future__ import annotations

import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional
from uuid import uuid4

import structlog

logger = structlog.get_logger(__name__)

Listener = Callable[[], None]


class ChangeTransport(ABC):
    """Pub/sub contract for change signals."""

    def __init__(self):
        self._listeners: list[Listener] = []
        self._listeners_lock = threading.Lock()

    def listen(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for signals from OTHER participants.

        Returns:
            A function that removes the listener
        """
        with self._listeners_lock:
            self._listeners.append(listener)

        def unlisten() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unlisten

    def _fire(self) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener()

    @abstractmethod
    def publish(self) -> None:
        """Tell every other participant that the ledger changed."""
        pass

    def close(self) -> None:
        """Stop sending and receiving signals."""
        with self._listeners_lock:
            self._listeners.clear()


class LocalChannel(ChangeTransport):
    """In-process channel; all instances with the same name are connected."""

    _registry: dict[str, list[LocalChannel]] = {}
    _registry_lock = threading.Lock()

    def __init__(self, name: str):
        super().__init__()
        self.name = name
        with LocalChannel._registry_lock:
            LocalChannel._registry.setdefault(name, []).append(self)

    def publish(self) -> None:
        with LocalChannel._registry_lock:
            peers = [
                channel for channel in LocalChannel._registry.get(self.name, [])
                if channel is not self
            ]
        for peer in peers:
            peer._fire()

    def close(self) -> None:
        with LocalChannel._registry_lock:
            members = LocalChannel._registry.get(self.name, [])
            if self in members:
                members.remove(self)
            if not members:
                LocalChannel._registry.pop(self.name, None)
        super().close()


class FileChannel(ChangeTransport):
    """Cross-process channel backed by a signal file.

    Each publish writes a fresh random token. A participant fires its
    listeners when the token differs from the last one it saw, so several
    publishes between two polls collapse into one signal.
    """

    def __init__(self, signal_path: Path, poll_interval: float = 1.0):
        super().__init__()
        self.signal_path = Path(signal_path)
        self.poll_interval = poll_interval
        self._last_seen = self._read_token()
        self._state_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _read_token(self) -> Optional[str]:
        try:
            return self.signal_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def _write_token(self, token: str) -> None:
        self.signal_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.signal_path.parent, prefix=f".{self.signal_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(token)
            os.replace(tmp_name, self.signal_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def publish(self) -> None:
        token = uuid4().hex
        with self._state_lock:
            self._write_token(token)
            self._last_seen = token

    def poll(self) -> bool:
        """Check the signal file once.

        Returns:
            True if a change from another participant was seen
        """
        token = self._read_token()
        with self._state_lock:
            if token is None or token == self._last_seen:
                return False
            self._last_seen = token
        self._fire()
        return True

    def start(self) -> None:
        """Poll from a background daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name=f"ledger-sync-{self.signal_path.name}", daemon=True
        )
        self._thread.start()

    def _run(self) -> None:
        while not self._stop.wait(self.poll_interval):
            try:
                self.poll()
            except OSError as e:
                logger.warning("sync_poll_failed", path=str(self.signal_path), error=str(e))
            except Exception as e:
                # The signal is consumed; the next publish is still heard
                logger.error(
                    "sync_listener_failed",
                    path=str(self.signal_path),
                    error=f"{type(e).__name__}: {e}",
                )

    def stop(self) -> None:
        """Stop the background poller if it is running."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.poll_interval * 2)
            self._thread = None

    def close(self) -> None:
        self.stop()
        super().close()
