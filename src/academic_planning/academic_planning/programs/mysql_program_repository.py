from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import ProgramStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, int_or_none, to_time
from .model import ClassSession, Instructor, Module, NewModule, NewProgram, Program
from .repository import ProgramRepository

_MODULE_COLUMNS = "module_id, program_id, code, name, cm, td, tp, tpe, coefficient, credits, instructor_id, status"

_PROGRAM_COLUMNS = (
    "program_id, code, name, description, semester, level, start_date, end_date, status, user_id, created_at"
)


def _to_program(r: Dict[str, Any]) -> Program:
    return Program(
        program_id=int(r["program_id"]),
        code=r["code"],
        name=r["name"],
        description=r.get("description"),
        semester=r.get("semester"),
        level=r.get("level"),
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=ProgramStatus(r["status"]),
        user_id=int(r["user_id"]),
        created_at=r.get("created_at"),
    )


def _to_module(r: Dict[str, Any]) -> Module:
    return Module(
        module_id=int(r["module_id"]),
        program_id=int(r["program_id"]),
        code=r["code"],
        name=r["name"],
        cm=int(r.get("cm") or 0),
        td=int(r.get("td") or 0),
        tp=int(r.get("tp") or 0),
        tpe=int(r.get("tpe") or 0),
        coefficient=float(r["coefficient"]) if r.get("coefficient") is not None else 1.0,
        credits=int(r.get("credits") or 0),
        instructor_id=int_or_none(r.get("instructor_id")),
        status=r.get("status"),
    )


def _insert_program(cur, draft: NewProgram) -> int:
    cur.execute(
        """
        INSERT INTO programs(code, name, description, semester, level,
                             start_date, end_date, status, user_id)
        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
        """,
        (
            draft.code,
            draft.name,
            draft.description,
            draft.semester,
            draft.level,
            draft.start_date,
            draft.end_date,
            draft.status.value,
            int(draft.user_id),
        ),
    )
    return int(cur.lastrowid)


class MySQLProgramRepository(ProgramRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(
        self,
        *,
        user_id: int,
        search: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Sequence[Program]:
        clauses = ["user_id=%s"]
        params: list[object] = [int(user_id)]

        if search:
            clauses.append("(LOWER(name) LIKE %s OR LOWER(code) LIKE %s)")
            needle = f"%{search.lower()}%"
            params.extend([needle, needle])
        if status:
            clauses.append("status=%s")
            params.append(status)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PROGRAM_COLUMNS} FROM programs WHERE {where} ORDER BY created_at DESC",
                tuple(params),
            )
            return [_to_program(r) for r in fetchall(cur)]

    def get_by_id(self, program_id: int) -> Optional[Program]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PROGRAM_COLUMNS} FROM programs WHERE program_id=%s", (int(program_id),))
            r = fetchone(cur)
            return _to_program(r) if r else None

    def list_modules(self, *, program_id: int) -> Sequence[Module]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_MODULE_COLUMNS} FROM modules WHERE program_id=%s ORDER BY code ASC",
                (int(program_id),),
            )
            return [_to_module(r) for r in fetchall(cur)]

    def get_module(self, module_id: int) -> Optional[Module]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_MODULE_COLUMNS} FROM modules WHERE module_id=%s", (int(module_id),))
            r = fetchone(cur)
            return _to_module(r) if r else None

    def get_instructor(self, instructor_id: int) -> Optional[Instructor]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT instructor_id, title, first_name, last_name, email
                FROM instructors
                WHERE instructor_id=%s
                """,
                (int(instructor_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Instructor(
                instructor_id=int(r["instructor_id"]),
                title=r.get("title"),
                first_name=r["first_name"],
                last_name=r["last_name"],
                email=r.get("email"),
            )

    def list_sessions(self, *, module_id: int) -> Sequence[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_id, module_id, instructor_id, session_date, start_time, end_time,
                       session_type, room, status
                FROM class_sessions
                WHERE module_id=%s
                ORDER BY session_date ASC, start_time ASC
                """,
                (int(module_id),),
            )
            return [
                ClassSession(
                    session_id=int(r["session_id"]),
                    module_id=int(r["module_id"]),
                    instructor_id=int_or_none(r.get("instructor_id")),
                    session_date=r["session_date"],
                    start_time=to_time(r.get("start_time")),
                    end_time=to_time(r.get("end_time")),
                    session_type=r.get("session_type"),
                    room=r.get("room"),
                    status=r.get("status"),
                )
                for r in fetchall(cur)
            ]

    def create(self, draft: NewProgram) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return _insert_program(cur, draft)

    def code_exists(self, code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 FROM programs WHERE code=%s LIMIT 1", (code,))
            return fetchone(cur) is not None

    def create_with_modules(self, draft: NewProgram, modules: Sequence[NewModule]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            program_id = _insert_program(cur, draft)
            cur.executemany(
                """
                INSERT INTO modules(program_id, code, name, cm, td, tp, tpe, coefficient, credits)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                [
                    (program_id, m.code, m.name, m.cm, m.td, m.tp, m.tpe, m.coefficient, m.credits)
                    for m in modules
                ],
            )
            return program_id

    def delete(self, program_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM programs WHERE program_id=%s", (int(program_id),))
            return cur.rowcount > 0
