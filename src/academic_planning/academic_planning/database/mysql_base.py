from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction: commit on normal exit, rollback on error."""
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def set_clause(changes: Mapping[str, Any], allowed: Iterable[str]) -> Tuple[str, list]:
    """``col=%s, ...`` and its parameters, for whitelisted columns only."""
    unknown = set(changes) - set(allowed)
    if unknown:
        raise KeyError(f"Unsupported columns: {sorted(unknown)}")
    cols = list(changes)
    return ", ".join(f"{c}=%s" for c in cols), [changes[c] for c in cols]


def int_or_none(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


def float_or_none(value: Any) -> Optional[float]:
    # DECIMAL columns arrive as Decimal
    return float(value) if value is not None else None


def to_time(value: Any) -> Optional[time]:
    """TIME columns arrive as ``timedelta`` (sometimes ``str`` or ``time``)."""
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return (datetime.min + timedelta(seconds=seconds)).time()
    if isinstance(value, str):
        return time.fromisoformat(value.strip())
    raise TypeError(f"Unsupported TIME value: {value!r}")
