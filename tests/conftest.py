"""Shared fixtures for Design Ledger tests."""

from uuid import uuid4

import pytest

from design_ledger.audit import LedgerEventLogger
from design_ledger.config import get_settings
from design_ledger.ledger import LedgerStore
from design_ledger.services.storage import InMemoryStateStorage
from design_ledger.sync import LocalChannel


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached; make every test read the environment anew."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def storage():
    return InMemoryStateStorage()


@pytest.fixture
def audit_logger():
    return LedgerEventLogger()


@pytest.fixture
def store(storage, audit_logger):
    ledger = LedgerStore(storage, audit_logger=audit_logger)
    yield ledger
    ledger.close()


@pytest.fixture
def channel_name():
    """A LocalChannel name no other test uses."""
    return f"test-channel-{uuid4().hex}"


@pytest.fixture
def make_store(storage, channel_name):
    """Build stores sharing one storage and one in-process channel."""
    created = []

    def factory(**kwargs):
        ledger = LedgerStore(storage, transport=LocalChannel(channel_name), **kwargs)
        created.append(ledger)
        return ledger

    yield factory
    for ledger in created:
        ledger.close()
