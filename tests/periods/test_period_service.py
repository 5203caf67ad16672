from __future__ import annotations

import threading
from datetime import date

import pytest

from academic_planning.core.exceptions import NotFoundError, ValidationError
from academic_planning.periods.service import PeriodService

from conftest import FakePeriodsRepo, _FakePeriodWriter, make_period


def _payload(**overrides):
    payload = {
        "nom": "Année 2025-2026",
        "annee": "2025-2026",
        "debutS1": "2025-10-01",
        "finS1": "2026-02-15",
        "debutS2": "2026-02-23",
        "finS2": "2026-07-15",
        "vacancesNoel": "2025-12-20",
        "finVacancesNoel": "2026-01-04",
    }
    payload.update(overrides)
    return payload


def _active_ids(repo: FakePeriodsRepo) -> list[int]:
    return sorted(pid for pid, p in repo.rows.items() if p.active)


def test_create_requires_every_mandatory_field_and_creates_nothing():
    repo = FakePeriodsRepo()
    svc = PeriodService(repo)

    payload = _payload()
    del payload["finVacancesNoel"]

    with pytest.raises(ValidationError) as exc:
        svc.create_period(payload)

    assert str(exc.value) == (
        "Champs requis: nom, annee, debutS1, finS1, debutS2, finS2, vacancesNoel, finVacancesNoel"
    )
    assert repo.rows == {}


def test_create_parses_dates_and_leaves_optional_holidays_empty():
    svc = PeriodService(FakePeriodsRepo())

    out = svc.create_period(_payload())

    assert out["debutS1"] == "2025-10-01"
    assert out["vacancesPaques"] is None
    assert out["active"] is False


def test_create_rejects_malformed_date():
    svc = PeriodService(FakePeriodsRepo())

    with pytest.raises(ValidationError) as exc:
        svc.create_period(_payload(finS2="15/07/2026"))

    assert "finS2" in str(exc.value)


def test_create_active_switches_off_the_previous_active_period():
    repo = FakePeriodsRepo([make_period(1, year="2024-2025", active=True)])
    svc = PeriodService(repo)

    out = svc.create_period(_payload(active=True))

    assert out["active"] is True
    assert _active_ids(repo) == [out["id"]]


def test_create_inactive_never_touches_the_active_period():
    repo = FakePeriodsRepo([make_period(1, active=True)])
    svc = PeriodService(repo)

    svc.create_period(_payload(active=False))

    assert _active_ids(repo) == [1]


def test_activating_b_deactivates_a_and_changes_nothing_else():
    a = make_period(1, year="2023-2024", active=True)
    b = make_period(2, year="2024-2025")
    repo = FakePeriodsRepo([a, b])
    svc = PeriodService(repo)

    out = svc.update_period(2, {"active": True})

    assert out["active"] is True
    assert _active_ids(repo) == [2]
    # Only the active flag moved on both rows.
    assert repo.rows[1].to_dict() == {**a.to_dict(), "active": False}
    assert repo.rows[2].to_dict() == {**b.to_dict(), "active": True}


def test_update_active_false_does_not_sweep():
    repo = FakePeriodsRepo([make_period(1, active=True), make_period(2, year="2025-2026")])
    svc = PeriodService(repo)

    svc.update_period(2, {"active": False, "nom": "Renommée"})

    assert _active_ids(repo) == [1]
    assert repo.rows[2].name == "Renommée"


def test_partial_update_keeps_omitted_fields_and_clears_empty_optional_dates():
    original = make_period(1)
    repo = FakePeriodsRepo([original])
    svc = PeriodService(repo)

    out = svc.update_period(1, {"finS1": "2025-02-20", "vacancesPaques": ""})

    assert out["finS1"] == "2025-02-20"
    assert out["vacancesPaques"] is None
    assert out["finVacancesPaques"] == original.easter_end.isoformat()
    assert out["nom"] == original.name
    assert out["debutS2"] == original.s2_start.isoformat()


def test_update_ignores_empty_required_fields():
    original = make_period(1)
    repo = FakePeriodsRepo([original])
    svc = PeriodService(repo)

    out = svc.update_period(1, {"nom": "", "debutS1": None, "champInconnu": "x"})

    assert out["nom"] == original.name
    assert repo.rows[1].s1_start == date(2024, 10, 1)


def test_update_unknown_period_is_not_found():
    svc = PeriodService(FakePeriodsRepo())

    with pytest.raises(NotFoundError):
        svc.update_period(99, {"active": True})


def test_failed_update_rolls_back_the_sweep(monkeypatch):
    repo = FakePeriodsRepo([make_period(1, active=True), make_period(2, year="2025-2026")])
    svc = PeriodService(repo)

    def broken_update(self, period_id, changes):
        raise RuntimeError("write failed")

    monkeypatch.setattr(_FakePeriodWriter, "update", broken_update)

    with pytest.raises(RuntimeError):
        svc.update_period(2, {"active": True})

    assert _active_ids(repo) == [1]


def test_delete_unknown_period_is_not_found():
    with pytest.raises(NotFoundError):
        PeriodService(FakePeriodsRepo()).delete_period(42)


def test_get_active_without_any_active_period():
    with pytest.raises(NotFoundError) as exc:
        PeriodService(FakePeriodsRepo([make_period(1)])).get_active_period()

    assert str(exc.value) == "Aucune période active"


def test_list_is_most_recent_year_first():
    repo = FakePeriodsRepo([make_period(1, year="2022-2023"), make_period(2, year="2024-2025")])

    years = [p["annee"] for p in PeriodService(repo).list_periods()]

    assert years == ["2024-2025", "2022-2023"]


def test_concurrent_activations_leave_exactly_one_active_period():
    repo = FakePeriodsRepo([make_period(i, year=f"{2000 + i}-{2001 + i}") for i in range(1, 9)])
    svc = PeriodService(repo)
    seen_more_than_one = threading.Event()
    stop = threading.Event()

    def watch():
        while not stop.is_set():
            if len(_active_ids(repo)) > 1:
                seen_more_than_one.set()

    def activate(pid):
        for _ in range(20):
            svc.update_period(pid, {"active": True})

    watcher = threading.Thread(target=watch)
    watcher.start()
    workers = [threading.Thread(target=activate, args=(pid,)) for pid in repo.rows]
    for t in workers:
        t.start()
    for t in workers:
        t.join()
    stop.set()
    watcher.join()

    assert len(_active_ids(repo)) == 1
    assert not seen_more_than_one.is_set()


def test_activation_locks_all_rows_before_anything_else():
    repo = FakePeriodsRepo([make_period(1, active=True), make_period(2, year="2025-2026")])
    svc = PeriodService(repo)

    svc.update_period(2, {"active": True})
    svc.create_period(_payload(active=True))

    assert repo.lock_logs == [[("all", None)], [("all", None)]]


def test_activation_of_unknown_period_checks_inside_the_table_lock():
    repo = FakePeriodsRepo([make_period(1, active=True)])

    with pytest.raises(NotFoundError):
        PeriodService(repo).update_period(99, {"active": True})

    assert repo.lock_logs == [[("all", None)]]
    assert _active_ids(repo) == [1]


def test_plain_update_locks_only_its_row():
    repo = FakePeriodsRepo([make_period(1, active=True), make_period(2, year="2025-2026")])

    PeriodService(repo).update_period(2, {"nom": "Renommée", "active": False})

    assert repo.lock_logs == [[("row", 2)]]
    assert _active_ids(repo) == [1]
