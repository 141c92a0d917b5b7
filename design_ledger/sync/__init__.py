"""Change notification package."""

from design_ledger.sync.notifier import ChangeNotifier
from design_ledger.sync.transport import ChangeTransport, FileChannel, LocalChannel

__all__ = [
    "ChangeNotifier",
    "ChangeTransport",
    "FileChannel",
    "LocalChannel",
]
