"""
Tests for the board API endpoints
"""
import pytest
from fastapi.testclient import TestClient

from tierlist.main import app


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as test_client:
        yield test_client


def _ids(payload):
    return [item["id"] for tier in payload["tiers"] for item in tier["items"]]


def _board_with_items(client, *contents):
    response = client.post("/api/board/items", json={"items": [{"id": c.lower(), "content": c} for c in contents]})
    assert response.status_code == 200
    return response.json()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["catalog_items"] > 0


def test_templates(client):
    response = client.get("/api/templates/")

    assert response.status_code == 200
    templates = {template["name"]: template for template in response.json()}
    assert set(templates) == {"3rows", "5rows", "7rows"}
    assert templates["5rows"]["default"] is True
    assert [tier["id"] for tier in templates["3rows"]["tiers"]] == ["tier-s", "tier-a", "tier-b"]


def test_default_board(client):
    payload = client.get("/api/board").json()

    assert [tier["id"] for tier in payload["tiers"]] == ["tier-s", "tier-a", "tier-b", "tier-c", "tier-f"]
    assert payload["state"]
    assert payload["query"].startswith("state=")
    assert payload["undo_state"] is None


def test_bad_state_falls_back_to_default(client):
    response = client.get("/api/board", params={"state": "%%%%"})

    assert response.status_code == 200
    assert len(response.json()["tiers"]) == 5


def test_board_with_catalog_package(client):
    payload = client.get("/api/board", params={"package": "fruits", "images": ["apple.webp"]}).json()

    last = payload["tiers"][-1]
    assert [item["id"] for item in last["items"]] == ["fruits-apple.webp"]
    assert last["items"][0]["source"] == "catalog"


def test_unknown_package_is_404(client):
    assert client.get("/api/board", params={"package": "nope"}).status_code == 404


def test_add_items_dedups_and_round_trips(client):
    payload = _board_with_items(client, "Foo", "Bar")

    again = client.post(
        "/api/board/items",
        json={"state": payload["state"], "items": [{"id": "foo", "content": "x"}, {"content": "Bar"}]},
    ).json()

    assert _ids(again) == ["foo", "bar"]
    assert client.get("/api/board", params={"state": again["state"]}).json()["tiers"] == again["tiers"]


def test_add_items_assigns_ids(client):
    payload = client.post("/api/board/items", json={"items": [{"content": "No id"}]}).json()

    assert len(_ids(payload)) == 1
    assert _ids(payload)[0]


def test_template_change(client):
    payload = _board_with_items(client, "Foo")

    migrated = client.post("/api/board/template", json={"state": payload["state"], "template": "3rows"}).json()

    assert [tier["id"] for tier in migrated["tiers"]] == ["tier-s", "tier-a", "tier-b", "uncategorized"]
    assert _ids(migrated) == ["foo"]


def test_unknown_template_is_404(client):
    response = client.post("/api/board/template", json={"template": "99rows"})

    assert response.status_code == 404


def test_label_position(client):
    payload = client.post("/api/board/label-position", json={"label_position": "top"}).json()

    assert payload["label_position"] == "top"
    assert {tier["label_position"] for tier in payload["tiers"]} == {"top"}


def test_remove_items(client):
    payload = _board_with_items(client, "Foo", "Bar")

    removed = client.post("/api/board/items/remove", json={"state": payload["state"], "ids": ["foo"]}).json()

    assert _ids(removed) == ["bar"]


def test_reset_and_undo(client):
    payload = _board_with_items(client, "b", "A", "c")

    reset = client.post("/api/board/reset", json={"state": payload["state"]}).json()
    assert [item["content"] for item in reset["tiers"][-1]["items"]] == ["A", "b", "c"]
    assert reset["undo_state"]

    undone = client.post("/api/board/undo", json={"state": reset["state"], "undo_state": reset["undo_state"]}).json()
    assert [tier["id"] for tier in undone["tiers"]] == [tier["id"] for tier in payload["tiers"]]
    assert _ids(undone) == _ids(payload)
    assert undone["undo_state"] == reset["undo_state"]


def test_delete_all_and_undo(client):
    payload = _board_with_items(client, "Foo")

    deleted = client.post("/api/board/delete-all", json={"state": payload["state"]}).json()
    assert _ids(deleted) == []

    undone = client.post("/api/board/undo", json={"state": deleted["state"], "undo_state": deleted["undo_state"]}).json()
    assert _ids(undone) == ["foo"]


def test_undo_without_checkpoint_is_noop(client):
    payload = _board_with_items(client, "Foo")

    undone = client.post("/api/board/undo", json={"state": payload["state"]}).json()

    assert _ids(undone) == ["foo"]
    assert undone["undo_state"] is None


def test_og_image(client):
    response = client.get("/api/og-image", params={"url": "/images/fruits/apple.webp"})

    assert response.json() == {"url": "https://tiers.example.com/images/fruits/apple.png"}


def test_og_board(client):
    state = client.get("/api/board", params={"package": "fruits", "images": ["mango.webp"]}).json()["state"]

    payload = client.get("/api/og-board", params={"state": state}).json()

    assert payload["tiers"][-1]["gradient"] == "linear-gradient(to right, #f0f0f0, #f0f0f0)"
    assert payload["tiers"][-1]["items"][0]["image_url"] == "https://tiers.example.com/images/fruits/mango.png"
