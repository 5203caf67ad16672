from __future__ import annotations

import json
from typing import Any, Dict, Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import PreferencesRepository, UserRepository

_USER_COLUMNS = "user_id, email, name, password_hash, role, created_at, is_active"


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        name=row.get("name") or "",
        password_hash=row.get("password_hash"),
        role=Role(row["role"]),
        created_at=row.get("created_at"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE LOWER(email)=%s", (email.lower(),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def update_profile(self, user_id: int, *, name: str, password_hash: Optional[str] = None) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            if password_hash is None:
                cur.execute("UPDATE users SET name=%s WHERE user_id=%s", (name, int(user_id)))
            else:
                cur.execute(
                    "UPDATE users SET name=%s, password_hash=%s WHERE user_id=%s",
                    (name, password_hash, int(user_id)),
                )


class MySQLPreferencesRepository(PreferencesRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, user_id: int) -> Optional[Dict[str, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT preferences_json FROM user_preferences WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            if not row or not row.get("preferences_json"):
                return None
            return json.loads(row["preferences_json"])

    def save(self, user_id: int, preferences: Dict[str, Any]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO user_preferences(user_id, preferences_json)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE preferences_json=VALUES(preferences_json)
                """,
                (int(user_id), json.dumps(preferences, ensure_ascii=False)),
            )
