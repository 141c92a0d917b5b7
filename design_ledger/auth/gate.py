"""
Access Gate

A static allowlist login. This is NOT authentication in any security
sense: the credentials live in configuration and nothing is hashed.
Its only jobs are to tell the app who is using it (name and role, for
attribution) and to record refused attempts in the ledger's security log.
"""

from datetime import datetime
from typing import Iterable, Optional

from pydantic import BaseModel

from design_ledger.config import AuthorizedUser, get_settings
from design_ledger.ledger import LedgerStore
from design_ledger.models import Role, SecurityLog, SecurityStatus, now_millis


class UserProfile(BaseModel):
    """Who is logged in. Never carries the password."""

    email: str
    name: str
    role: Role


class AccessDeniedError(Exception):
    """A login attempt was refused and recorded."""

    def __init__(self, message: str, status: SecurityStatus):
        super().__init__(message)
        self.status = status


class UnauthorizedEmailError(AccessDeniedError):
    """The email is not on the allowlist."""

    def __init__(self, email: str):
        super().__init__(
            f"Unauthorized access attempt recorded for {email!r}",
            SecurityStatus.UNAUTHORIZED_EMAIL,
        )


class WrongPasswordError(AccessDeniedError):
    """The email is known but the password does not match."""

    def __init__(self, email: str):
        super().__init__(
            f"Incorrect password for {email!r}",
            SecurityStatus.WRONG_PASSWORD,
        )


def _normalize(email: str) -> str:
    return email.strip().lower()


class AccessGate:
    """Checks logins against the allowlist and records refusals."""

    def __init__(
        self,
        store: LedgerStore,
        users: Optional[Iterable[AuthorizedUser]] = None,
    ):
        """
        Args:
            store: Ledger whose security log receives refused attempts
            users: Allowlist. Defaults to LEDGER_AUTH_USERS.
        """
        if users is None:
            users = get_settings().auth.users
        self._store = store
        self._users = {_normalize(user.email): user for user in users}

    def login(self, email: str, password: Optional[str]) -> UserProfile:
        """
        Log a user in.

        Raises:
            UnauthorizedEmailError: Unknown email (attempt recorded)
            WrongPasswordError: Known email, wrong password (attempt recorded)
        """
        user = self._users.get(_normalize(email))
        if user is None:
            self._record(email, SecurityStatus.UNAUTHORIZED_EMAIL)
            raise UnauthorizedEmailError(email)
        if password != user.password:
            self._record(email, SecurityStatus.WRONG_PASSWORD)
            raise WrongPasswordError(email)

        return UserProfile(email=user.email, name=user.name, role=Role(user.role))

    def _record(self, attempted_email: str, status: SecurityStatus) -> None:
        timestamp = now_millis()
        self._store.add_security_log(
            SecurityLog(
                attempted_email=attempted_email,
                timestamp=timestamp,
                date=datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d %H:%M:%S"),
                status=status,
            )
        )
