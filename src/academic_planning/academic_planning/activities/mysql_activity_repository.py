from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, set_clause
from .model import Activity, NewActivity
from .repository import ActivityRepository

_UPDATABLE = ("name", "description", "type", "planned_date", "actual_date")


def _to_activity(r: Dict[str, Any]) -> Activity:
    return Activity(
        activity_id=int(r["activity_id"]),
        name=r["name"],
        description=r.get("description"),
        type=r["type"],
        planned_date=r.get("planned_date"),
        actual_date=r.get("actual_date"),
        program_id=int(r["program_id"]),
        period_id=int(r["period_id"]),
        created_at=r.get("created_at"),
    )


class MySQLActivityRepository(ActivityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_rows(
        self,
        *,
        program_id: Optional[int] = None,
        period_id: Optional[int] = None,
    ) -> Sequence[dict]:
        clauses = ["1=1"]
        params: list[object] = []

        if program_id is not None:
            clauses.append("a.program_id=%s")
            params.append(int(program_id))
        if period_id is not None:
            clauses.append("a.period_id=%s")
            params.append(int(period_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.activity_id, a.name, a.description, a.type, a.planned_date, a.actual_date,
                       a.program_id, a.period_id, a.created_at,
                       p.name AS program_name, p.code AS program_code,
                       ap.name AS period_name, ap.year AS period_year
                FROM academic_activities a
                JOIN programs p ON p.program_id = a.program_id
                JOIN academic_periods ap ON ap.period_id = a.period_id
                WHERE {where}
                ORDER BY a.planned_date IS NULL, a.planned_date ASC, a.activity_id ASC
                """,
                tuple(params),
            )
            out: list[dict] = []
            for r in fetchall(cur):
                row = _to_activity(r).to_dict()
                row["programme"] = {"name": r["program_name"], "code": r["program_code"]}
                row["periode"] = {"nom": r["period_name"], "annee": r["period_year"]}
                out.append(row)
            return out

    def get_by_id(self, activity_id: int) -> Optional[Activity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT activity_id, name, description, type, planned_date, actual_date,
                       program_id, period_id, created_at
                FROM academic_activities
                WHERE activity_id=%s
                """,
                (int(activity_id),),
            )
            r = fetchone(cur)
            return _to_activity(r) if r else None

    def create(self, draft: NewActivity) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO academic_activities(name, description, type, planned_date, actual_date,
                                                program_id, period_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    draft.name,
                    draft.description,
                    draft.type,
                    draft.planned_date,
                    draft.actual_date,
                    int(draft.program_id),
                    int(draft.period_id),
                ),
            )
            return int(cur.lastrowid)

    def update(self, activity_id: int, changes: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT activity_id FROM academic_activities WHERE activity_id=%s FOR UPDATE",
                (int(activity_id),),
            )
            if not fetchone(cur):
                return False
            if changes:
                sql, params = set_clause(changes, _UPDATABLE)
                cur.execute(
                    f"UPDATE academic_activities SET {sql} WHERE activity_id=%s",
                    tuple(params + [int(activity_id)]),
                )
            return True

    def delete(self, activity_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM academic_activities WHERE activity_id=%s", (int(activity_id),))
            return cur.rowcount > 0
