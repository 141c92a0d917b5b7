"""Tests for the static allowlist login."""

import json

import pytest

from design_ledger.auth import (
    AccessDeniedError,
    AccessGate,
    UnauthorizedEmailError,
    UserProfile,
    WrongPasswordError,
)
from design_ledger.config import AuthorizedUser
from design_ledger.ledger import LedgerStore
from design_ledger.models import Role, SecurityStatus


USERS = [
    AuthorizedUser(email="designer@studio.lk", name="Sanjaya", role="DESIGNER", password="retouch"),
    AuthorizedUser(email="client@company.lk", name="Ravi", role="JOB_GIVER", password="invoice"),
]


@pytest.fixture
def gate(store):
    return AccessGate(store, USERS)


class TestLogin:
    """Tests for successful logins."""

    def test_designer_login(self, gate):
        """Test that a designer gets a DESIGNER profile."""
        profile = gate.login("designer@studio.lk", "retouch")
        assert profile == UserProfile(email="designer@studio.lk", name="Sanjaya", role=Role.DESIGNER)

    def test_job_giver_login(self, gate):
        """Test that a job giver gets a JOB_GIVER profile."""
        assert gate.login("client@company.lk", "invoice").role == Role.JOB_GIVER

    def test_email_is_case_and_space_insensitive(self, gate):
        """Test that the email match ignores case and surrounding spaces."""
        assert gate.login("  Designer@Studio.LK ", "retouch").name == "Sanjaya"

    def test_profile_has_no_password(self, gate):
        """Test that the password never leaves the gate."""
        profile = gate.login("designer@studio.lk", "retouch")
        assert "password" not in profile.model_dump()

    def test_success_records_nothing(self, gate, store):
        """Test that a successful login leaves the security log alone."""
        gate.login("designer@studio.lk", "retouch")
        assert store.read().security_logs == []


class TestRefusedLogin:
    """Tests for refused logins and the security log."""

    def test_unknown_email(self, gate, store):
        """Test that an unknown email is refused and recorded as typed."""
        with pytest.raises(UnauthorizedEmailError) as exc_info:
            gate.login("Intruder@Example.com ", "whatever")

        assert exc_info.value.status == SecurityStatus.UNAUTHORIZED_EMAIL
        logs = store.read().security_logs
        assert len(logs) == 1
        assert logs[0].attempted_email == "Intruder@Example.com "
        assert logs[0].status == SecurityStatus.UNAUTHORIZED_EMAIL
        assert logs[0].date

    def test_wrong_password(self, gate, store):
        """Test that a wrong password is refused and recorded."""
        with pytest.raises(WrongPasswordError):
            gate.login("designer@studio.lk", "guess")
        assert store.read().security_logs[0].status == SecurityStatus.WRONG_PASSWORD

    def test_missing_password(self, gate):
        """Test that no password is a wrong password."""
        with pytest.raises(WrongPasswordError):
            gate.login("client@company.lk", None)

    def test_refusals_share_a_base_class(self, gate):
        """Test that callers can catch every refusal at once."""
        with pytest.raises(AccessDeniedError):
            gate.login("nobody@example.com", "x")

    def test_repeated_refusals_are_capped(self, storage):
        """Test that the security log stays bounded under repeated attempts."""
        ledger = LedgerStore(storage, security_log_limit=5)
        gate = AccessGate(ledger, USERS)
        for i in range(8):
            with pytest.raises(AccessDeniedError):
                gate.login(f"bot{i}@example.com", "x")
        logs = ledger.read().security_logs
        assert [log.attempted_email for log in logs] == [f"bot{i}@example.com" for i in range(3, 8)]


class TestAllowlistFromSettings:
    """Tests for reading the allowlist from the environment."""

    def test_users_from_env(self, store, monkeypatch):
        """Test LEDGER_AUTH_USERS as a JSON list."""
        monkeypatch.setenv("LEDGER_AUTH_USERS", json.dumps([
            {"email": "a@b.c", "name": "Ann", "role": "DESIGNER", "password": "pw"},
        ]))
        gate = AccessGate(store)
        assert gate.login("a@b.c", "pw").name == "Ann"

    def test_empty_allowlist_refuses_everyone(self, store, monkeypatch):
        """Test that no configured users means no logins."""
        monkeypatch.delenv("LEDGER_AUTH_USERS", raising=False)
        with pytest.raises(UnauthorizedEmailError):
            AccessGate(store).login("designer@studio.lk", "retouch")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
