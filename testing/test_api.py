"""
Tests for the HTTP API.
"""

import json

import pytest
from fastapi.testclient import TestClient

from lorechat_engine.api.app import app, app_state
from lorechat_engine.config import ImportConfig, SystemConfig
from lorechat_engine.db import get_db
from png_factory import card_png, make_png, text_chunk


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_import_png_card(client, shen_mo_card):
    data = card_png({"spec": "chara_card_v2", "data": shen_mo_card})

    response = client.post("/characters/import", files={"file": ("shen_mo.png", data, "image/png")})

    assert response.status_code == 201
    body = response.json()
    assert body["format"] == "chara_card_v2"
    assert body["contact"]["name"] == "沈墨"
    assert body["contact"]["avatar"].startswith("data:image/png;base64,")
    assert body["world_book"]["name"] == "沈墨的世界书 (导入)"
    assert body["world_book"]["entry_count"] == 1
    assert body["contact"]["world_book_id"] == body["world_book"]["id"]

    contact_id = body["contact"]["id"]
    messages = client.get(f"/contacts/{contact_id}/messages").json()
    assert [(m["role"], m["content"]) for m in messages] == [("assistant", "你好")]

    world_book = client.get("/worldbook").json()
    assert len(world_book) == 1
    assert world_book[0]["entries"][0]["keys"] == ["书房"]


def test_import_json_card(client):
    card = {"char_name": "A", "personality": "P", "greeting": "G"}

    response = client.post(
        "/characters/import",
        files={"file": ("a.json", json.dumps(card).encode("utf-8"), "application/json")},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["world_book"] is None
    assert body["contact"]["avatar"] == "🐱"
    assert body["contact"]["description"] == "P\n\n[Scenario]: "

    contacts = client.get("/contacts").json()
    assert [c["name"] for c in contacts] == ["A"]
    assert client.get(f"/contacts/{body['contact']['id']}").json()["first_message"] == "G"


def test_png_without_card_data(client):
    data = make_png(text_chunk("Software", b"paint"))

    response = client.post("/characters/import", files={"file": ("plain.png", data, "image/png")})

    assert response.status_code == 400
    assert client.get("/contacts").json() == []


def test_malformed_json_card(client):
    response = client.post("/characters/import", files={"file": ("list.json", b"[1, 2]", "application/json")})

    assert response.status_code == 400


def test_empty_upload(client):
    response = client.post("/characters/import", files={"file": ("empty.json", b"", "application/json")})

    assert response.status_code == 400


def test_upload_over_size_limit(client, monkeypatch):
    small = SystemConfig(import_=ImportConfig(max_upload_bytes=16))
    monkeypatch.setitem(app_state, "system_config", small)
    data = json.dumps({"name": "too big for the limit"}).encode("utf-8")

    response = client.post("/characters/import", files={"file": ("big.json", data, "application/json")})

    assert response.status_code == 413
    assert client.get("/contacts").json() == []


def test_upload_at_size_limit(client, monkeypatch):
    data = b'{"name": "Fits"}'
    limit = SystemConfig(import_=ImportConfig(max_upload_bytes=len(data)))
    monkeypatch.setitem(app_state, "system_config", limit)

    response = client.post("/characters/import", files={"file": ("fits.json", data, "application/json")})

    assert response.status_code == 201
    assert response.json()["contact"]["name"] == "Fits"


def test_unknown_contact(client):
    assert client.get("/contacts/missing").status_code == 404
    assert client.get("/contacts/missing/messages").status_code == 404
