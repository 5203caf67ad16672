from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..core.constants import DEFAULT_INDICATOR_UNIT
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, float_or_none, int_or_none, set_clause
from .model import Indicator, NewIndicator
from .repository import IndicatorRepository

_COLUMNS = """
    i.indicator_id, i.name, i.description, i.target_value, i.actual_value, i.periodicity,
    i.calculation_method, i.unit, i.type, i.program_id, i.period_id, i.owner_id,
    i.collection_date, i.created_at
"""

_UPDATABLE = (
    "name",
    "description",
    "target_value",
    "actual_value",
    "periodicity",
    "calculation_method",
    "unit",
    "type",
    "owner_id",
    "collection_date",
)


def _to_indicator(r: Dict[str, Any]) -> Indicator:
    return Indicator(
        indicator_id=int(r["indicator_id"]),
        name=r["name"],
        description=r.get("description"),
        target_value=float_or_none(r.get("target_value")),
        actual_value=float_or_none(r.get("actual_value")),
        periodicity=r["periodicity"],
        calculation_method=r.get("calculation_method"),
        unit=r.get("unit") or DEFAULT_INDICATOR_UNIT,
        type=r["type"],
        program_id=int(r["program_id"]),
        period_id=int(r["period_id"]),
        owner_id=int_or_none(r.get("owner_id")),
        collection_date=r.get("collection_date"),
        created_at=r.get("created_at"),
    )


class MySQLIndicatorRepository(IndicatorRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_rows(
        self,
        *,
        program_id: Optional[int] = None,
        period_id: Optional[int] = None,
        type: Optional[str] = None,
    ) -> Sequence[dict]:
        clauses = ["1=1"]
        params: list[object] = []

        if program_id is not None:
            clauses.append("i.program_id=%s")
            params.append(int(program_id))
        if period_id is not None:
            clauses.append("i.period_id=%s")
            params.append(int(period_id))
        if type:
            clauses.append("i.type=%s")
            params.append(type)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS},
                       p.name AS program_name, p.code AS program_code,
                       ap.name AS period_name, ap.year AS period_year,
                       u.name AS owner_name, u.email AS owner_email
                FROM academic_indicators i
                JOIN programs p ON p.program_id = i.program_id
                JOIN academic_periods ap ON ap.period_id = i.period_id
                LEFT JOIN users u ON u.user_id = i.owner_id
                WHERE {where}
                ORDER BY i.created_at DESC, i.indicator_id DESC
                """,
                tuple(params),
            )
            out: list[dict] = []
            for r in fetchall(cur):
                row = _to_indicator(r).to_dict()
                row["programme"] = {"name": r["program_name"], "code": r["program_code"]}
                row["periode"] = {"nom": r["period_name"], "annee": r["period_year"]}
                row["responsable"] = (
                    {"name": r["owner_name"], "email": r["owner_email"]} if r.get("owner_id") is not None else None
                )
                out.append(row)
            return out

    def get_by_id(self, indicator_id: int) -> Optional[Indicator]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM academic_indicators i WHERE i.indicator_id=%s",
                (int(indicator_id),),
            )
            r = fetchone(cur)
            return _to_indicator(r) if r else None

    def create(self, draft: NewIndicator) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO academic_indicators(name, description, target_value, actual_value, periodicity,
                                                calculation_method, unit, type, program_id, period_id,
                                                owner_id, collection_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    draft.name,
                    draft.description,
                    draft.target_value,
                    draft.actual_value,
                    draft.periodicity,
                    draft.calculation_method,
                    draft.unit,
                    draft.type,
                    int(draft.program_id),
                    int(draft.period_id),
                    draft.owner_id,
                    draft.collection_date,
                ),
            )
            return int(cur.lastrowid)

    def update(self, indicator_id: int, changes: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT indicator_id FROM academic_indicators WHERE indicator_id=%s FOR UPDATE",
                (int(indicator_id),),
            )
            if not fetchone(cur):
                return False
            if changes:
                sql, params = set_clause(changes, _UPDATABLE)
                cur.execute(
                    f"UPDATE academic_indicators SET {sql} WHERE indicator_id=%s",
                    tuple(params + [int(indicator_id)]),
                )
            return True

    def delete(self, indicator_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM academic_indicators WHERE indicator_id=%s", (int(indicator_id),))
            return cur.rowcount > 0
