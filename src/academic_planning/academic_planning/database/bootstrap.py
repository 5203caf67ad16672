from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from ..core.enums import Role
from ..users.service import hash_password
from .connection import CHARSET, COLLATION, DBConfig, DatabaseConnection

DEMO_USERS = (
    ("Administrateur", "admin@bem.sn", "admin123", Role.ADMIN),
    ("Coordinateur Pédagogique", "coordinateur@bem.sn", "coord123", Role.COORDINATOR),
    ("Enseignant Démo", "enseignant@bem.sn", "teacher123", Role.TEACHER),
)


def _factory(db_config: dict) -> DatabaseConnection:
    return DatabaseConnection(DBConfig.from_mapping(db_config))


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql stays usable whatever the configured database name is.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Splits on ';' outside of quoted strings.
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql_file(db_config: dict, path: str | Path) -> None:
    sql = _strip_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))
    conn = _factory(db_config).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET {CHARSET} COLLATE {COLLATION}"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _exec_sql_file(db_config, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _exec_sql_file(db_config, seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Create or refresh the demo accounts (idempotent)."""
    conn = _factory(db_config).connect()
    try:
        cur = conn.cursor(dictionary=True)

        for name, email, password, role in DEMO_USERS:
            password_hash = hash_password(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    "UPDATE users SET name=%s, password_hash=%s, role=%s, is_active=1 WHERE email=%s",
                    (name, password_hash, role.value, email),
                )
            else:
                cur.execute(
                    "INSERT INTO users (email, name, password_hash, role) VALUES (%s, %s, %s, %s)",
                    (email, name, password_hash, role.value),
                )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _factory(db_config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
