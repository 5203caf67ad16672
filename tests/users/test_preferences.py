from __future__ import annotations


def test_defaults_when_nothing_saved(client, auth_headers):
    resp = client.get("/user/preferences", headers=auth_headers)

    prefs = resp.get_json()["preferences"]
    assert prefs["language"] == "fr"
    assert prefs["timezone"] == "Europe/Paris"
    assert prefs["notifications"]["desktop"] is False


def test_saved_preferences_are_merged_over_defaults(client, repos, auth_headers):
    resp = client.put(
        "/user/preferences",
        json={"preferences": {"theme": "dark", "notifications": {"desktop": True}}},
        headers=auth_headers,
    )

    assert resp.status_code == 200
    assert repos.preferences.saved[1] == {"theme": "dark", "notifications": {"desktop": True}}

    prefs = client.get("/user/preferences", headers=auth_headers).get_json()["preferences"]
    assert prefs["theme"] == "dark"
    assert prefs["notifications"]["desktop"] is True
    assert prefs["notifications"]["email"] is True


def test_missing_preferences_is_400(client, repos, auth_headers):
    for body in ({}, {"preferences": None}, {"preferences": "dark"}):
        resp = client.put("/user/preferences", json=body, headers=auth_headers)
        assert resp.status_code == 400

    assert repos.preferences.saved == {}


def test_empty_preferences_object_is_saved(client, repos, auth_headers):
    resp = client.put("/user/preferences", json={"preferences": {}}, headers=auth_headers)

    assert resp.status_code == 200
    assert repos.preferences.saved[1] == {}
    assert resp.get_json()["preferences"]["theme"] == "light"
