from __future__ import annotations

import copy
from typing import Any, Dict, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.constants import DEFAULT_PREFERENCES
from ..core.exceptions import NotFoundError, ValidationError
from .model import Identity
from .repository import PreferencesRepository, UserRepository


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def password_matches(password_hash: Optional[str], password: str) -> bool:
    if not password_hash or not password:
        return False
    try:
        return check_password_hash(password_hash, password)
    except (TypeError, ValueError):
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False


class AuthService:
    """Use case: verify an email/password pair (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> Optional[Identity]:
        """Identity on success, None on any failure.

        Unknown email, inactive account, missing hash and wrong password all
        look the same to the caller.
        """
        email = (email or "").strip()
        if not email or not password:
            return None

        user = self._users.get_by_email(email)
        if not user or not user.is_active or not password_matches(user.password_hash, password):
            return None

        return Identity(user_id=user.user_id, email=user.email, name=user.name, role=user.role)


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


class PreferenceService:
    def __init__(self, preferences: PreferencesRepository):
        self._preferences = preferences

    def get_preferences(self, *, user_id: int) -> Dict[str, Any]:
        stored = self._preferences.get(int(user_id)) or {}
        return _merge(DEFAULT_PREFERENCES, stored)

    def save_preferences(self, *, user_id: int, preferences: Any) -> Dict[str, Any]:
        if not isinstance(preferences, dict):
            raise ValidationError("Préférences requises")
        self._preferences.save(int(user_id), preferences)
        return _merge(DEFAULT_PREFERENCES, preferences)


class ProfileService:
    """Use case: the signed-in user renames the account or changes its password."""

    def __init__(self, users: UserRepository):
        self._users = users

    def update_profile(
        self,
        *,
        user_id: int,
        name: Any,
        current_password: Any = None,
        new_password: Any = None,
    ) -> Dict[str, Any]:
        name = name.strip() if isinstance(name, str) else ""
        if not name:
            raise ValidationError("Le nom est requis")

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Utilisateur non trouvé")

        password_hash = None
        if new_password:
            if not current_password:
                raise ValidationError("Le mot de passe actuel est requis")
            if not password_matches(user.password_hash, str(current_password)):
                raise ValidationError("Mot de passe actuel incorrect")
            password_hash = hash_password(str(new_password))

        self._users.update_profile(user.user_id, name=name, password_hash=password_hash)
        return {"id": user.user_id, "name": name, "email": user.email}
