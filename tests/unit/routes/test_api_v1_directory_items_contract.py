from datetime import UTC, datetime, timedelta

import pytest

from directory_search.constants.directory import GroupVisibility


@pytest.mark.unit
def test_api_v1_directory_items_allows_anonymous(client, seed) -> None:
    seed.directory_item(seed.user("alice"), likes_received=3)

    response = client.get("/api/v1/directory_items?period=weekly")
    assert response.status_code == 200
    payload = response.get_json()
    assert isinstance(payload, dict)
    assert payload.get("success") is True

    items = payload["data"]["directory_items"]
    assert len(items) == 1
    assert items[0]["user"]["username"] == "alice"
    assert items[0]["likes_received"] == 3

    meta = payload["meta"]
    assert meta["total_rows_directory_items"] == 1
    assert meta["last_updated_at"] == "2025-01-01T12:00:00+00:00"
    assert meta["load_more_directory_items"].startswith("/api/v1/directory_items?period=weekly")


@pytest.mark.unit
@pytest.mark.parametrize(
    ("query", "message_code"),
    [
        ("", "INVALID_PERIOD"),
        ("period=fortnightly", "INVALID_PERIOD"),
        ("period=weekly&limit=999", "INVALID_PAGINATION"),
        ("period=weekly&page=-1", "INVALID_PAGINATION"),
        ("period=weekly&group=ghosts", "GROUP_NOT_FOUND"),
    ],
)
def test_api_v1_directory_items_rejects_invalid_parameters(client, app, query, message_code) -> None:
    response = client.get(f"/api/v1/directory_items?{query}")
    assert response.status_code == 400
    payload = response.get_json()
    assert isinstance(payload, dict)
    assert payload.get("message_code") == message_code


@pytest.mark.unit
def test_api_v1_directory_items_forbidden_cases(app, client, seed) -> None:
    seed.group("hidden", members_visibility=GroupVisibility.OWNERS)

    response = client.get("/api/v1/directory_items?period=weekly&group=hidden")
    assert response.status_code == 403
    assert response.get_json().get("message_code") == "GROUP_NOT_VISIBLE"

    app.config["ENABLE_USER_DIRECTORY"] = False
    response = client.get("/api/v1/directory_items?period=weekly")
    assert response.status_code == 403
    assert response.get_json().get("message_code") == "USER_DIRECTORY_DISABLED"


@pytest.mark.unit
def test_api_v1_directory_items_pins_authenticated_viewer(auth_client, viewer, seed) -> None:
    base = datetime(2024, 1, 1, tzinfo=UTC)
    for index in range(3):
        seed.directory_item(seed.user(f"user{index}", last_seen_at=base + timedelta(days=index)))
    viewer.last_seen_at = base + timedelta(days=30)
    seed.directory_item(viewer)

    response = auth_client.get("/api/v1/directory_items?period=weekly&limit=2")
    assert response.status_code == 200
    payload = response.get_json()
    usernames = [item["user"]["username"] for item in payload["data"]["directory_items"]]
    assert usernames == ["viewer", "user0", "user1"]
    assert payload["meta"]["total_rows_directory_items"] == 4
    assert "page=1" in payload["meta"]["load_more_directory_items"]


@pytest.mark.unit
def test_api_v1_openapi_lists_namespaces(client) -> None:
    response = client.get("/api/v1/openapi.json")
    assert response.status_code == 200
    paths = response.get_json()["paths"]
    assert "/user-search" in paths
    assert "/user-search/options" in paths
    assert "/directory_items" in paths


@pytest.mark.unit
def test_api_v1_root_lists_entry_points(client) -> None:
    response = client.get("/api/v1/")
    assert response.status_code == 200
    payload = response.get_json()
    assert isinstance(payload, dict)
    assert payload.get("success") is True
    assert payload["data"]["openapi_url"] == "/api/v1/openapi.json"
    assert payload["data"]["directory_items_url"] == "/api/v1/directory_items"
