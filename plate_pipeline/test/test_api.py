import pytest
from fastapi.testclient import TestClient

from plate_pipeline.api.main import app, get_site_repository, get_status_board
from plate_pipeline.domain.Interfaces.site_repository import ISiteRepository
from plate_pipeline.infrastructure.Notification.status_board import StatusBoard


class MemorySiteRepository(ISiteRepository):
    def __init__(self):
        self.value = ""

    def get_site_id(self):
        return self.value or "없음"

    def save_site_id(self, site_id):
        self.value = site_id.strip()


@pytest.fixture
def board():
    return StatusBoard()


@pytest.fixture
def client(board):
    repo = MemorySiteRepository()
    app.dependency_overrides[get_site_repository] = lambda: repo
    app.dependency_overrides[get_status_board] = lambda: board
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_status_reflects_board(client, board):
    assert client.get("/status").json()["last_plate"] is None

    board.plate_detected("12가3456")
    board.status("Envío exitoso")

    body = client.get("/status").json()
    assert body["last_plate"] == "12가3456"
    assert body["last_status"] == "Envío exitoso"
    assert body["last_plate_at"] is not None


def test_site_id_roundtrip(client):
    assert client.get("/site-id").json() == {"site_id": "없음"}

    r = client.put("/site-id", json={"site_id": " B-12 "})
    assert r.status_code == 200
    assert r.json() == {"site_id": "B-12"}
    assert client.get("/site-id").json() == {"site_id": "B-12"}


def test_site_id_requires_body(client):
    assert client.put("/site-id", json={}).status_code == 422


def test_status_board_forwards():
    seen = []

    class Sink:
        def plate_detected(self, plate):
            seen.append(("plate", plate))

        def status(self, message):
            seen.append(("status", message))

    board = StatusBoard(forward=Sink())
    board.plate_detected("12가3456")
    board.status("hola")
    assert seen == [("plate", "12가3456"), ("status", "hola")]


def test_site_repository_dependency_opens_once(monkeypatch):
    from plate_pipeline.api import main

    opened = []

    def fake_open():
        opened.append(1)
        return MemorySiteRepository()

    monkeypatch.setattr(main, "_open_site_repository", fake_open)
    main.get_site_repository.cache_clear()
    try:
        first = main.get_site_repository()
        second = main.get_site_repository()
    finally:
        main.get_site_repository.cache_clear()

    assert first is second
    assert len(opened) == 1
