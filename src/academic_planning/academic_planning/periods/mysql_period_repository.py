from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Set

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, set_clause
from .model import NewPeriod, Period
from .repository import PeriodRepository, PeriodWriter

_PERIOD_COLUMNS = (
    "period_id, name, year, s1_start, s1_end, s2_start, s2_end, "
    "christmas_start, christmas_end, easter_start, easter_end, active, created_at"
)

_UPDATABLE = (
    "name",
    "year",
    "s1_start",
    "s1_end",
    "s2_start",
    "s2_end",
    "christmas_start",
    "christmas_end",
    "easter_start",
    "easter_end",
    "active",
)


def _to_period(r: Dict[str, Any]) -> Period:
    return Period(
        period_id=int(r["period_id"]),
        name=r["name"],
        year=r["year"],
        s1_start=r["s1_start"],
        s1_end=r["s1_end"],
        s2_start=r["s2_start"],
        s2_end=r["s2_end"],
        christmas_start=r["christmas_start"],
        christmas_end=r["christmas_end"],
        easter_start=r.get("easter_start"),
        easter_end=r.get("easter_end"),
        active=bool(r.get("active")),
        created_at=r.get("created_at"),
    )


class _MySQLPeriodWriter(PeriodWriter):
    def __init__(self, cur):
        self._cur = cur

    def lock(self, period_id: int) -> bool:
        self._cur.execute("SELECT period_id FROM academic_periods WHERE period_id=%s FOR UPDATE", (int(period_id),))
        return fetchone(self._cur) is not None

    def lock_all(self) -> Set[int]:
        self._cur.execute("SELECT period_id FROM academic_periods ORDER BY period_id FOR UPDATE")
        return {int(r["period_id"]) for r in fetchall(self._cur)}

    def deactivate_others(self, *, keep_id: Optional[int] = None) -> int:
        if keep_id is None:
            self._cur.execute("UPDATE academic_periods SET active=0 WHERE active=1")
        else:
            self._cur.execute(
                "UPDATE academic_periods SET active=0 WHERE active=1 AND period_id<>%s",
                (int(keep_id),),
            )
        return int(self._cur.rowcount or 0)

    def insert(self, draft: NewPeriod) -> int:
        self._cur.execute(
            """
            INSERT INTO academic_periods(
                name, year, s1_start, s1_end, s2_start, s2_end,
                christmas_start, christmas_end, easter_start, easter_end, active
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
            """,
            (
                draft.name,
                draft.year,
                draft.s1_start,
                draft.s1_end,
                draft.s2_start,
                draft.s2_end,
                draft.christmas_start,
                draft.christmas_end,
                draft.easter_start,
                draft.easter_end,
                1 if draft.active else 0,
            ),
        )
        return int(self._cur.lastrowid)

    def update(self, period_id: int, changes: Mapping[str, Any]) -> None:
        if not changes:
            return
        values = dict(changes)
        if "active" in values:
            values["active"] = 1 if values["active"] else 0
        sql, params = set_clause(values, _UPDATABLE)
        self._cur.execute(f"UPDATE academic_periods SET {sql} WHERE period_id=%s", tuple(params + [int(period_id)]))


class MySQLPeriodRepository(PeriodRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Period]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PERIOD_COLUMNS} FROM academic_periods ORDER BY year DESC, period_id DESC")
            return [_to_period(r) for r in fetchall(cur)]

    def get_by_id(self, period_id: int) -> Optional[Period]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PERIOD_COLUMNS} FROM academic_periods WHERE period_id=%s", (int(period_id),))
            r = fetchone(cur)
            return _to_period(r) if r else None

    def get_active(self) -> Optional[Period]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PERIOD_COLUMNS} FROM academic_periods WHERE active=1 LIMIT 1")
            r = fetchone(cur)
            return _to_period(r) if r else None

    @contextmanager
    def transaction(self) -> Iterator[PeriodWriter]:
        with db_cursor(self._conn_factory) as (_, cur):
            yield _MySQLPeriodWriter(cur)

    def delete(self, period_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM academic_periods WHERE period_id=%s", (int(period_id),))
            return cur.rowcount > 0
