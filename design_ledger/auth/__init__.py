"""Static allowlist login."""

from design_ledger.auth.gate import (
    AccessDeniedError,
    AccessGate,
    UnauthorizedEmailError,
    UserProfile,
    WrongPasswordError,
)

__all__ = [
    "AccessDeniedError",
    "AccessGate",
    "UnauthorizedEmailError",
    "UserProfile",
    "WrongPasswordError",
]
