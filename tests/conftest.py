from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import asdict, replace
from datetime import date, datetime, time, timedelta
from types import SimpleNamespace

import pytest
from werkzeug.security import generate_password_hash

from academic_planning.activities.model import Activity
from academic_planning.auth.settings import AuthSettings
from academic_planning.container import wire_container
from academic_planning.core.enums import ProgramStatus, Role
from academic_planning.indicators.model import Indicator
from academic_planning.main import create_app
from academic_planning.periods.model import NewPeriod, Period
from academic_planning.programs.model import ClassSession, Instructor, Module, Program
from academic_planning.results.model import StudentResult
from academic_planning.users.model import Identity, User

BASE_CREATED_AT = datetime(2024, 9, 1, 8, 0, 0)


class Recorder:
    """Keeps the name of every repository call, to prove a request never reached storage."""

    def __init__(self):
        self.calls: list[str] = []

    def _hit(self, name: str) -> None:
        self.calls.append(name)


# -------- users --------
class FakeUsersRepo(Recorder):
    def __init__(self, users=()):
        super().__init__()
        self._users = {u.user_id: u for u in users}

    def get_by_id(self, user_id):
        self._hit("get_by_id")
        return self._users.get(int(user_id))

    def get_by_email(self, email):
        self._hit("get_by_email")
        for u in self._users.values():
            if u.email.lower() == email.lower():
                return u
        return None

    def update_profile(self, user_id, *, name, password_hash=None):
        self._hit("update_profile")
        user = self._users[int(user_id)]
        changes = {"name": name}
        if password_hash is not None:
            changes["password_hash"] = password_hash
        self._users[int(user_id)] = replace(user, **changes)


class FakePreferencesRepo(Recorder):
    def __init__(self):
        super().__init__()
        self.saved: dict[int, dict] = {}

    def get(self, user_id):
        self._hit("get")
        return self.saved.get(int(user_id))

    def save(self, user_id, preferences):
        self._hit("save")
        self.saved[int(user_id)] = dict(preferences)


# -------- periods --------
class _FakePeriodWriter:
    def __init__(self, rows: dict, next_id: int, lock_log: list):
        self.rows = rows
        self.next_id = next_id
        self.lock_log = lock_log

    def lock(self, period_id):
        self.lock_log.append(("row", int(period_id)))
        return int(period_id) in self.rows

    def lock_all(self):
        self.lock_log.append(("all", None))
        return set(self.rows)

    def deactivate_others(self, *, keep_id=None):
        switched = 0
        for pid, p in list(self.rows.items()):
            if p.active and pid != keep_id:
                self.rows[pid] = replace(p, active=False)
                switched += 1
        return switched

    def insert(self, draft: NewPeriod):
        pid = self.next_id
        self.next_id += 1
        self.rows[pid] = Period(period_id=pid, created_at=BASE_CREATED_AT + timedelta(minutes=pid), **asdict(draft))
        return pid

    def update(self, period_id, changes):
        if changes:
            self.rows[int(period_id)] = replace(self.rows[int(period_id)], **changes)


class FakePeriodsRepo(Recorder):
    """Transactions run one at a time and publish their rows only on commit."""

    def __init__(self, periods=()):
        super().__init__()
        self._rows = {p.period_id: p for p in periods}
        self._next_id = max(self._rows, default=0) + 1
        self._tx_lock = threading.Lock()
        # Row locks taken by each transaction, in order.
        self.lock_logs: list[list] = []

    def seed(self, *periods):
        for p in periods:
            self._rows[p.period_id] = p
        self._next_id = max(self._rows, default=0) + 1

    @property
    def rows(self):
        return dict(self._rows)

    def list_all(self):
        self._hit("list_all")
        return sorted(self._rows.values(), key=lambda p: (p.year, p.period_id), reverse=True)

    def get_by_id(self, period_id):
        self._hit("get_by_id")
        return self._rows.get(int(period_id))

    def get_active(self):
        self._hit("get_active")
        return next((p for p in self._rows.values() if p.active), None)

    @contextmanager
    def transaction(self):
        self._hit("transaction")
        with self._tx_lock:
            log: list = []
            self.lock_logs.append(log)
            writer = _FakePeriodWriter(dict(self._rows), self._next_id, log)
            yield writer
            self._rows = writer.rows
            self._next_id = writer.next_id

    def delete(self, period_id):
        self._hit("delete")
        return self._rows.pop(int(period_id), None) is not None


# -------- programs --------
class FakeProgramsRepo(Recorder):
    def __init__(self, programs=(), modules=(), instructors=(), sessions=()):
        super().__init__()
        self.programs = {p.program_id: p for p in programs}
        self.modules = {m.module_id: m for m in modules}
        self.instructors = {i.instructor_id: i for i in instructors}
        self.sessions = list(sessions)
        self._next_id = max(self.programs, default=0) + 1

    def list_for_user(self, *, user_id, search=None, status=None):
        self._hit("list_for_user")
        out = [p for p in self.programs.values() if p.user_id == int(user_id)]
        if search:
            needle = search.lower()
            out = [p for p in out if needle in p.name.lower() or needle in p.code.lower()]
        if status:
            out = [p for p in out if p.status.value == status]
        return sorted(out, key=lambda p: p.created_at or BASE_CREATED_AT, reverse=True)

    def get_by_id(self, program_id):
        self._hit("get_by_id")
        return self.programs.get(int(program_id))

    def list_modules(self, *, program_id):
        self._hit("list_modules")
        return sorted((m for m in self.modules.values() if m.program_id == int(program_id)), key=lambda m: m.code)

    def get_module(self, module_id):
        self._hit("get_module")
        return self.modules.get(int(module_id))

    def get_instructor(self, instructor_id):
        self._hit("get_instructor")
        return self.instructors.get(int(instructor_id))

    def list_sessions(self, *, module_id):
        self._hit("list_sessions")
        return [s for s in self.sessions if s.module_id == int(module_id)]

    def create(self, draft):
        self._hit("create")
        pid = self._next_id
        self._next_id += 1
        self.programs[pid] = Program(program_id=pid, created_at=BASE_CREATED_AT + timedelta(days=pid), **asdict(draft))
        return pid

    def code_exists(self, code):
        self._hit("code_exists")
        return any(p.code == code for p in self.programs.values())

    def create_with_modules(self, draft, modules):
        self._hit("create_with_modules")
        pid = self._next_id
        self._next_id += 1
        self.programs[pid] = Program(program_id=pid, created_at=BASE_CREATED_AT + timedelta(days=pid), **asdict(draft))
        next_module_id = max(self.modules, default=0) + 1
        for offset, m in enumerate(modules):
            mid = next_module_id + offset
            self.modules[mid] = Module(module_id=mid, program_id=pid, status="PLANIFIE", **asdict(m))
        return pid

    def delete(self, program_id):
        self._hit("delete")
        return self.programs.pop(int(program_id), None) is not None


# -------- activities / indicators --------
class FakeActivitiesRepo(Recorder):
    def __init__(self, programs: FakeProgramsRepo, periods: FakePeriodsRepo, activities=()):
        super().__init__()
        self._programs = programs
        self._periods = periods
        self.rows = {a.activity_id: a for a in activities}
        self._next_id = max(self.rows, default=0) + 1

    def list_rows(self, *, program_id=None, period_id=None):
        self._hit("list_rows")
        items = [
            a
            for a in self.rows.values()
            if (program_id is None or a.program_id == program_id) and (period_id is None or a.period_id == period_id)
        ]
        items.sort(key=lambda a: (a.planned_date is None, a.planned_date or date.min, a.activity_id))
        out = []
        for a in items:
            row = a.to_dict()
            program = self._programs.programs[a.program_id]
            period = self._periods.rows[a.period_id]
            row["programme"] = {"name": program.name, "code": program.code}
            row["periode"] = {"nom": period.name, "annee": period.year}
            out.append(row)
        return out

    def get_by_id(self, activity_id):
        self._hit("get_by_id")
        return self.rows.get(int(activity_id))

    def create(self, draft):
        self._hit("create")
        aid = self._next_id
        self._next_id += 1
        self.rows[aid] = Activity(activity_id=aid, created_at=BASE_CREATED_AT, **asdict(draft))
        return aid

    def update(self, activity_id, changes):
        self._hit("update")
        if int(activity_id) not in self.rows:
            return False
        self.rows[int(activity_id)] = replace(self.rows[int(activity_id)], **changes)
        return True

    def delete(self, activity_id):
        self._hit("delete")
        return self.rows.pop(int(activity_id), None) is not None


class FakeIndicatorsRepo(Recorder):
    def __init__(self, programs: FakeProgramsRepo, periods: FakePeriodsRepo, users: FakeUsersRepo, indicators=()):
        super().__init__()
        self._programs = programs
        self._periods = periods
        self._users = users
        self.rows = {i.indicator_id: i for i in indicators}
        self._next_id = max(self.rows, default=0) + 1

    def list_rows(self, *, program_id=None, period_id=None, type=None):
        self._hit("list_rows")
        items = [
            i
            for i in self.rows.values()
            if (program_id is None or i.program_id == program_id)
            and (period_id is None or i.period_id == period_id)
            and (type is None or i.type == type)
        ]
        items.sort(key=lambda i: (i.created_at, i.indicator_id), reverse=True)
        out = []
        for i in items:
            row = i.to_dict()
            program = self._programs.programs[i.program_id]
            period = self._periods.rows[i.period_id]
            owner = self._users._users.get(i.owner_id) if i.owner_id is not None else None
            row["programme"] = {"name": program.name, "code": program.code}
            row["periode"] = {"nom": period.name, "annee": period.year}
            row["responsable"] = {"name": owner.name, "email": owner.email} if owner else None
            out.append(row)
        return out

    def get_by_id(self, indicator_id):
        self._hit("get_by_id")
        return self.rows.get(int(indicator_id))

    def create(self, draft):
        self._hit("create")
        iid = self._next_id
        self._next_id += 1
        self.rows[iid] = Indicator(indicator_id=iid, created_at=BASE_CREATED_AT + timedelta(hours=iid), **asdict(draft))
        return iid

    def update(self, indicator_id, changes):
        self._hit("update")
        if int(indicator_id) not in self.rows:
            return False
        self.rows[int(indicator_id)] = replace(self.rows[int(indicator_id)], **changes)
        return True

    def delete(self, indicator_id):
        self._hit("delete")
        return self.rows.pop(int(indicator_id), None) is not None


# -------- results --------
class _FakeResultWriter:
    def __init__(self, rows: dict):
        self.rows = rows

    def lock(self, result_id):
        return self.rows.get(int(result_id))

    def update(self, result_id, changes):
        if changes:
            self.rows[int(result_id)] = replace(self.rows[int(result_id)], **changes)


class FakeResultsRepo(Recorder):
    def __init__(self, programs: FakeProgramsRepo, results=()):
        super().__init__()
        self._programs = programs
        self.rows = {r.result_id: r for r in results}
        self._next_id = max(self.rows, default=0) + 1
        self._tx_lock = threading.Lock()

    def list_rows(self, *, module_id=None, student_number=None, status=None):
        self._hit("list_rows")
        items = [
            r
            for r in self.rows.values()
            if (module_id is None or r.module_id == module_id)
            and (student_number is None or r.student_number == student_number)
            and (status is None or r.status == status)
        ]
        modules = self._programs.modules
        items.sort(key=lambda r: (modules[r.module_id].name, r.last_name, r.result_id))
        out = []
        for r in items:
            module = modules[r.module_id]
            program = self._programs.programs[module.program_id]
            row = r.to_dict()
            row["module"] = {
                "name": module.name,
                "code": module.code,
                "programme": {"name": program.name, "code": program.code},
            }
            out.append(row)
        return out

    def get_by_id(self, result_id):
        self._hit("get_by_id")
        return self.rows.get(int(result_id))

    def create(self, draft):
        self._hit("create")
        rid = self._next_id
        self._next_id += 1
        self.rows[rid] = StudentResult(result_id=rid, created_at=BASE_CREATED_AT, **asdict(draft))
        return rid

    @contextmanager
    def transaction(self):
        self._hit("transaction")
        with self._tx_lock:
            writer = _FakeResultWriter(dict(self.rows))
            yield writer
            self.rows = writer.rows

    def delete(self, result_id):
        self._hit("delete")
        return self.rows.pop(int(result_id), None) is not None


# -------- sample data --------
def make_period(period_id: int, *, year: str = "2024-2025", active: bool = False, name: str | None = None) -> Period:
    start = int(year[:4])
    return Period(
        period_id=period_id,
        name=name or f"Année {year}",
        year=year,
        s1_start=date(start, 10, 1),
        s1_end=date(start + 1, 2, 15),
        s2_start=date(start + 1, 2, 24),
        s2_end=date(start + 1, 7, 15),
        christmas_start=date(start, 12, 21),
        christmas_end=date(start + 1, 1, 5),
        easter_start=date(start + 1, 4, 12),
        easter_end=date(start + 1, 4, 27),
        active=active,
        created_at=BASE_CREATED_AT,
    )


COORDINATOR_PASSWORD = "coord123"


@pytest.fixture
def coordinator() -> User:
    return User(
        user_id=1,
        email="coordinateur@bem.sn",
        name="Coordinateur Pédagogique",
        password_hash=generate_password_hash(COORDINATOR_PASSWORD),
        role=Role.COORDINATOR,
        created_at=datetime(2024, 1, 15, 9, 0, 0),
    )


@pytest.fixture
def repos(coordinator):
    users = FakeUsersRepo(
        [
            coordinator,
            User(
                user_id=2,
                email="ancien@bem.sn",
                name="Ancien Compte",
                password_hash=generate_password_hash("old123"),
                role=Role.TEACHER,
                is_active=False,
            ),
        ]
    )
    periods = FakePeriodsRepo()
    programs = FakeProgramsRepo(
        programs=[
            Program(
                program_id=1,
                code="L3-INFO-2024",
                name="Licence 3 Informatique",
                description="Programme de Licence 3 en Informatique",
                semester="SEMESTRE_1",
                level="L3",
                start_date=date(2024, 10, 1),
                end_date=date(2025, 2, 28),
                status=ProgramStatus.EN_COURS,
                user_id=1,
                created_at=BASE_CREATED_AT,
            )
        ],
        modules=[
            Module(module_id=10, program_id=1, code="INF301", name="Programmation Orientée Objet", instructor_id=5),
            Module(module_id=11, program_id=1, code="INF302", name="Bases de Données Avancées"),
        ],
        instructors=[
            Instructor(instructor_id=5, title="M.", first_name="Moussa", last_name="Diop", email="moussa.diop@bem.sn")
        ],
        sessions=[
            ClassSession(
                session_id=100,
                module_id=10,
                instructor_id=5,
                session_date=date(2024, 10, 7),
                start_time=time(8, 30),
                end_time=time(10, 30),
                session_type="CM",
                room="Salle A1",
                status="PLANIFIE",
            )
        ],
    )
    return SimpleNamespace(
        users=users,
        preferences=FakePreferencesRepo(),
        periods=periods,
        programs=programs,
        activities=FakeActivitiesRepo(programs, periods),
        indicators=FakeIndicatorsRepo(programs, periods, users),
        results=FakeResultsRepo(programs),
    )


@pytest.fixture
def auth_settings() -> AuthSettings:
    return AuthSettings(secret_key="test-secret", token_salt="academic-planning-test")


@pytest.fixture
def container(repos, auth_settings):
    return wire_container(
        users_repo=repos.users,
        preferences_repo=repos.preferences,
        periods_repo=repos.periods,
        programs_repo=repos.programs,
        activities_repo=repos.activities,
        indicators_repo=repos.indicators,
        results_repo=repos.results,
        auth_settings=auth_settings,
    )


@pytest.fixture
def app(container):
    return create_app(container=container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(container, coordinator):
    identity = Identity(
        user_id=coordinator.user_id,
        email=coordinator.email,
        name=coordinator.name,
        role=coordinator.role,
    )
    token = container.token_issuer.issue(identity).token
    return {"Authorization": f"Bearer {token}"}


def all_calls(repos) -> list[str]:
    return [call for repo in vars(repos).values() for call in repo.calls]
