from __future__ import annotations

from datetime import date

import pytest

from academic_planning.core.exceptions import NotFoundError, ValidationError

from conftest import make_period


@pytest.fixture
def svc(container, repos):
    repos.periods.seed(make_period(1, active=True), make_period(2, year="2025-2026"))
    return container.activity_service


def _create(svc, **overrides):
    payload = {"nom": "Conseil pédagogique", "type": "CONSEIL", "programmeId": 1, "periodeId": 1}
    payload.update(overrides)
    return svc.create_activity(payload)


def test_create_requires_fields_and_stores_nothing(svc, repos):
    with pytest.raises(ValidationError) as exc:
        svc.create_activity({"nom": "Sans type", "programmeId": 1, "periodeId": 1})

    assert str(exc.value) == "Champs requis: nom, type, programmeId, periodeId"
    assert repos.activities.rows == {}


def test_create_returns_activity_with_program_and_period(svc):
    out = _create(svc, datePrevue="2024-12-10", dateReelle="")

    assert out["datePrevue"] == "2024-12-10"
    assert out["dateReelle"] is None
    assert out["programme"]["code"] == "L3-INFO-2024"
    assert out["periode"]["annee"] == "2024-2025"


def test_list_orders_by_planned_date_with_undated_last(svc):
    _create(svc, nom="Sans date")
    _create(svc, nom="Jury", datePrevue="2025-02-20")
    _create(svc, nom="Rentrée", datePrevue="2024-10-01")

    names = [a["nom"] for a in svc.list_activities()]

    assert names == ["Rentrée", "Jury", "Sans date"]


def test_list_filters_and_projects_related_entities(svc):
    _create(svc, nom="Période 1")
    _create(svc, nom="Période 2", periodeId=2)

    rows = svc.list_activities(period_id=2)

    assert [a["nom"] for a in rows] == ["Période 2"]
    assert rows[0]["programme"] == {"name": "Licence 3 Informatique", "code": "L3-INFO-2024"}
    assert rows[0]["periode"] == {"nom": "Année 2025-2026", "annee": "2025-2026"}


def test_update_is_partial_and_clears_empty_dates(svc, repos):
    created = _create(svc, description="Bilan", datePrevue="2024-12-10", dateReelle="2024-12-11")

    out = svc.update_activity(created["id"], {"dateReelle": "", "type": ""})

    assert out["dateReelle"] is None
    assert out["datePrevue"] == "2024-12-10"
    assert out["type"] == "CONSEIL"
    assert out["description"] == "Bilan"
    assert repos.activities.rows[created["id"]].planned_date == date(2024, 12, 10)


def test_update_and_delete_unknown_activity(svc):
    with pytest.raises(NotFoundError):
        svc.update_activity(99, {"nom": "x"})
    with pytest.raises(NotFoundError):
        svc.delete_activity(99)


def test_http_create_list_and_filter(client, repos, auth_headers):
    repos.periods.seed(make_period(1))
    body = {"nom": "Soutenances", "type": "EXAMEN", "programmeId": 1, "periodeId": 1}

    created = client.post("/activities", json=body, headers=auth_headers)
    listed = client.get("/activities?programId=1&periodId=1", headers=auth_headers)
    other = client.get("/activities?periodId=7", headers=auth_headers)

    assert created.status_code == 201
    assert [a["nom"] for a in listed.get_json()] == ["Soutenances"]
    assert other.get_json() == []


def test_http_missing_fields_and_unknown_id(client, auth_headers):
    missing = client.post("/activities", json={"nom": "x"}, headers=auth_headers)

    assert missing.status_code == 400
    assert missing.get_json() == {"error": "Champs requis: nom, type, programmeId, periodeId"}
    assert client.get("/activities/12", headers=auth_headers).status_code == 404
