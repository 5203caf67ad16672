from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from ..core.constants import DEFAULT_SESSION_DAYS


@dataclass(frozen=True)
class AuthSettings:
    """Secrets and lifetimes for session verification, built once at startup."""

    secret_key: str
    token_salt: str = "academic-planning-session"
    session_days: int = DEFAULT_SESSION_DAYS

    @property
    def lifetime(self) -> timedelta:
        return timedelta(days=int(self.session_days))

    @classmethod
    def from_settings(cls, settings) -> "AuthSettings":
        return cls(
            secret_key=str(getattr(settings, "SECRET_KEY")),
            token_salt=str(getattr(settings, "TOKEN_SALT", "academic-planning-session")),
            session_days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)),
        )
