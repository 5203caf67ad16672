from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def update_profile(self, user_id: int, *, name: str, password_hash: Optional[str] = None) -> None:
        """Rename the user; the password hash changes only when one is given."""

        raise NotImplementedError


class PreferencesRepository(Protocol):
    def get(self, user_id: int) -> Optional[Dict[str, Any]]:
        """Stored preferences, or None when the user never saved any."""

        raise NotImplementedError

    def save(self, user_id: int, preferences: Dict[str, Any]) -> None:
        raise NotImplementedError
