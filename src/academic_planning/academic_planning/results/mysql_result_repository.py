from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, float_or_none, set_clause
from .model import NewStudentResult, StudentResult
from .repository import ResultRepository, ResultWriter

_COLUMNS = """
    r.result_id, r.student_number, r.last_name, r.first_name, r.email, r.module_id,
    r.cc_score, r.exam_score, r.final_score, r.status, r.mention, r.hours_done,
    r.progress_pct, r.presences, r.absences, r.attendance_percentage, r.created_at
"""

_UPDATABLE = (
    "cc_score",
    "exam_score",
    "final_score",
    "status",
    "mention",
    "hours_done",
    "progress_pct",
    "presences",
    "absences",
    "attendance_percentage",
)


def _to_result(r: Dict[str, Any]) -> StudentResult:
    return StudentResult(
        result_id=int(r["result_id"]),
        student_number=r["student_number"],
        last_name=r["last_name"],
        first_name=r["first_name"],
        email=r.get("email"),
        module_id=int(r["module_id"]),
        cc_score=float_or_none(r.get("cc_score")),
        exam_score=float_or_none(r.get("exam_score")),
        final_score=float_or_none(r.get("final_score")),
        status=r["status"],
        mention=r.get("mention"),
        hours_done=int(r.get("hours_done") or 0),
        progress_pct=float(r.get("progress_pct") or 0),
        presences=int(r.get("presences") or 0),
        absences=int(r.get("absences") or 0),
        attendance_percentage=float(r.get("attendance_percentage") or 0),
        created_at=r.get("created_at"),
    )


class _MySQLResultWriter(ResultWriter):
    def __init__(self, cur):
        self._cur = cur

    def lock(self, result_id: int) -> Optional[StudentResult]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM student_results r WHERE r.result_id=%s FOR UPDATE",
            (int(result_id),),
        )
        r = fetchone(self._cur)
        return _to_result(r) if r else None

    def update(self, result_id: int, changes: Mapping[str, Any]) -> None:
        if not changes:
            return
        sql, params = set_clause(changes, _UPDATABLE)
        self._cur.execute(
            f"UPDATE student_results SET {sql} WHERE result_id=%s",
            tuple(params + [int(result_id)]),
        )


class MySQLResultRepository(ResultRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_rows(
        self,
        *,
        module_id: Optional[int] = None,
        student_number: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Sequence[dict]:
        clauses = ["1=1"]
        params: list[object] = []

        if module_id is not None:
            clauses.append("r.module_id=%s")
            params.append(int(module_id))
        if student_number:
            clauses.append("r.student_number=%s")
            params.append(student_number)
        if status:
            clauses.append("r.status=%s")
            params.append(status)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS},
                       m.name AS module_name, m.code AS module_code,
                       p.name AS program_name, p.code AS program_code
                FROM student_results r
                JOIN modules m ON m.module_id = r.module_id
                JOIN programs p ON p.program_id = m.program_id
                WHERE {where}
                ORDER BY m.name ASC, r.last_name ASC, r.result_id ASC
                """,
                tuple(params),
            )
            out: list[dict] = []
            for r in fetchall(cur):
                row = _to_result(r).to_dict()
                row["module"] = {
                    "name": r["module_name"],
                    "code": r["module_code"],
                    "programme": {"name": r["program_name"], "code": r["program_code"]},
                }
                out.append(row)
            return out

    def get_by_id(self, result_id: int) -> Optional[StudentResult]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM student_results r WHERE r.result_id=%s", (int(result_id),))
            r = fetchone(cur)
            return _to_result(r) if r else None

    def create(self, draft: NewStudentResult) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO student_results(student_number, last_name, first_name, email, module_id,
                                            cc_score, exam_score, final_score, status, mention,
                                            hours_done, progress_pct, presences, absences,
                                            attendance_percentage)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    draft.student_number,
                    draft.last_name,
                    draft.first_name,
                    draft.email,
                    int(draft.module_id),
                    draft.cc_score,
                    draft.exam_score,
                    draft.final_score,
                    draft.status,
                    draft.mention,
                    int(draft.hours_done),
                    float(draft.progress_pct),
                    int(draft.presences),
                    int(draft.absences),
                    float(draft.attendance_percentage),
                ),
            )
            return int(cur.lastrowid)

    @contextmanager
    def transaction(self) -> Iterator[ResultWriter]:
        with db_cursor(self._conn_factory) as (_, cur):
            yield _MySQLResultWriter(cur)

    def delete(self, result_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM student_results WHERE result_id=%s", (int(result_id),))
            return cur.rowcount > 0
