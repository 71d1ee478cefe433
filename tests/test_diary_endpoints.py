"""Tests for diary and lab value endpoints."""

from datetime import date

from tests.conftest import ALICE, TODAY, auth_headers

APPLE = {"name": "Apple", "weight": 150, "phe": 6, "kcal": 78, "emoji": "🍎"}


def test_health_needs_no_auth(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_missing_bearer_rejected(client) -> None:
    response = client.get("/api/diary/days")

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "message": "Missing or invalid authorization header",
    }


def test_unknown_token_rejected(client) -> None:
    response = client.get("/api/diary/days", headers=auth_headers("expired"))

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


def test_create_and_list_days(client) -> None:
    created = client.post(
        "/api/diary/days",
        json={"date": "2026-03-01", "phe": 250, "kcal": 1800},
        headers=auth_headers(),
    )
    listed = client.get("/api/diary/days", headers=auth_headers())

    assert created.status_code == 200
    key = created.json()["key"]
    days = listed.json()["days"]
    assert listed.json()["success"] is True
    assert days[0]["key"] == key
    assert days[0]["date"] == "2026-03-01"
    assert days[0]["log"][0]["name"] == "Manual Entry"
    assert days[0]["phe"] == 250


def test_days_are_private_per_user(client) -> None:
    client.post(
        "/api/diary/days",
        json={"date": "2026-03-01", "phe": 1, "kcal": 1},
        headers=auth_headers(),
    )

    response = client.get("/api/diary/days", headers=auth_headers("bob-token"))

    assert response.json()["days"] == []


def test_duplicate_day_conflicts(client) -> None:
    body = {"date": "2026-03-01", "phe": 10, "kcal": 10}
    client.post("/api/diary/days", json=body, headers=auth_headers())

    response = client.post("/api/diary/days", json=body, headers=auth_headers())

    assert response.status_code == 409
    assert response.json()["success"] is False


def test_validation_error_shape(client) -> None:
    response = client.post(
        "/api/diary/days",
        json={"date": "not-a-date", "phe": -1, "kcal": 10},
        headers=auth_headers(),
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"].startswith("Validation failed: ")
    assert {error["path"] for error in payload["errors"]} == {"date", "phe"}


def test_free_tier_limit_returns_403(client, diary_repository) -> None:
    diary_repository.seed(ALICE, *(date(2026, 1, day) for day in range(1, 15)))

    response = client.post(
        "/api/diary/days",
        json={"date": "2026-02-01", "phe": 1, "kcal": 1},
        headers=auth_headers(),
    )

    assert response.status_code == 403
    assert response.json() == {
        "success": False,
        "message": "Diary limit reached. Upgrade to premium for unlimited entries.",
    }


def test_food_item_lifecycle(client) -> None:
    added = client.post("/api/diary/food-items", json=APPLE, headers=auth_headers())
    again = client.post(
        "/api/diary/food-items",
        json={**APPLE, "date": TODAY.isoformat(), "phe": 4, "kcal": 20},
        headers=auth_headers(),
    )

    assert added.json()["updated"] is False
    assert again.json()["updated"] is True
    key = added.json()["key"]
    assert again.json()["key"] == key

    edited = client.put(
        f"/api/diary/food-items/{key}",
        json={"logIndex": 1, "entry": {**APPLE, "phe": 2, "kcal": 10}},
        headers=auth_headers(),
    )
    assert edited.status_code == 200

    deleted = client.request(
        "DELETE",
        f"/api/diary/food-items/{key}",
        json={"logIndex": 0},
        headers=auth_headers(),
    )
    assert deleted.json() == {"success": True, "key": key, "deletedLogIndex": 0}

    day = client.get("/api/diary/days", headers=auth_headers()).json()["days"][0]
    assert day["date"] == TODAY.isoformat()
    assert (day["phe"], day["kcal"]) == (2, 10)
    assert len(day["log"]) == 1


def test_food_item_index_out_of_range(client) -> None:
    key = client.post(
        "/api/diary/food-items", json=APPLE, headers=auth_headers()
    ).json()["key"]

    response = client.put(
        f"/api/diary/food-items/{key}",
        json={"logIndex": 3, "entry": APPLE},
        headers=auth_headers(),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Log index out of range"


def test_food_item_weight_validated(client) -> None:
    response = client.post(
        "/api/diary/food-items",
        json={**APPLE, "weight": 0},
        headers=auth_headers(),
    )

    assert response.status_code == 400


def test_update_and_delete_day(client) -> None:
    key = client.post(
        "/api/diary/days",
        json={"date": "2026-03-01", "phe": 100, "kcal": 500},
        headers=auth_headers(),
    ).json()["key"]

    updated = client.put(
        f"/api/diary/days/{key}",
        json={"date": "2026-03-02", "phe": 120, "kcal": 600},
        headers=auth_headers(),
    )
    assert updated.json() == {"success": True, "key": key, "updated": True}

    day = client.get("/api/diary/days", headers=auth_headers()).json()["days"][0]
    assert (day["date"], day["phe"], day["kcal"]) == ("2026-03-02", 120, 600)

    assert client.delete(f"/api/diary/days/{key}", headers=auth_headers()).json() == {
        "success": True,
        "key": key,
    }
    missing = client.delete(f"/api/diary/days/{key}", headers=auth_headers())
    assert missing.status_code == 404
    assert missing.json()["message"] == "Diary entry not found"


def test_lab_value_endpoints(client) -> None:
    created = client.post(
        "/api/lab-values",
        json={"date": "2026-02-14", "phe": 6.2},
        headers=auth_headers(),
    )
    key = created.json()["key"]

    duplicate = client.post(
        "/api/lab-values",
        json={"date": "2026-02-14", "tyrosine": 1.1},
        headers=auth_headers(),
    )
    assert duplicate.status_code == 409

    updated = client.put(
        f"/api/lab-values/{key}",
        json={"date": "2026-02-15", "phe": 5.8, "tyrosine": 1.0},
        headers=auth_headers(),
    )
    assert updated.status_code == 200

    values = client.get("/api/lab-values", headers=auth_headers()).json()["labValues"]
    assert values == [
        {"key": key, "date": "2026-02-15", "phe": 5.8, "tyrosine": 1.0}
    ]

    assert client.delete(f"/api/lab-values/{key}", headers=auth_headers()).status_code == 200


def test_lab_value_needs_a_measurement(client) -> None:
    response = client.post(
        "/api/lab-values", json={"date": "2026-02-14"}, headers=auth_headers()
    )

    assert response.status_code == 400
    assert "Either Phe or Tyrosine must be provided" in response.json()["message"]


def test_keys_with_database_path_characters_rejected(client) -> None:
    responses = [
        client.put(
            "/api/diary/days/no.such%23key",
            json={"phe": 1, "kcal": 1},
            headers=auth_headers(),
        ),
        client.delete("/api/diary/days/bad%5Bkey%5D", headers=auth_headers()),
        client.put(
            "/api/diary/food-items/bad$key",
            json={"logIndex": 0, "entry": APPLE},
            headers=auth_headers(),
        ),
        client.delete("/api/lab-values/bad.key", headers=auth_headers()),
    ]

    for response in responses:
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["message"].startswith("Validation failed: key")


def test_food_item_community_key_must_be_a_plain_key(client) -> None:
    response = client.post(
        "/api/diary/food-items",
        json={**APPLE, "communityFoodKey": "-Nabc/voterIds"},
        headers=auth_headers(),
    )

    assert response.status_code == 400
    assert client.get("/api/diary/days", headers=auth_headers()).json()["days"] == []


def test_food_named_manual_entry_survives_total_edit(client) -> None:
    key = client.post(
        "/api/diary/food-items",
        json={**APPLE, "name": "Manual Entry"},
        headers=auth_headers(),
    ).json()["key"]

    client.put(
        f"/api/diary/days/{key}",
        json={"phe": 500, "kcal": 500},
        headers=auth_headers(),
    )

    day = client.get("/api/diary/days", headers=auth_headers()).json()["days"][0]
    assert day["log"][0]["manual"] is False
    assert day["log"][0]["weight"] == 150
    assert (day["phe"], day["kcal"]) == (6, 78)
