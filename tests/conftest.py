import mongomock
import pytest
from fastapi.testclient import TestClient

import database
from main import app


@pytest.fixture
def db():
    database.disconnect()
    handle = database.connect(mongomock.MongoClient())
    yield handle
    database.disconnect()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "uploads"
    monkeypatch.setenv("UPLOAD_DIR", str(target))
    return target


@pytest.fixture
def client(db, upload_dir):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_customer(client):
    def _make(name="Jane Doe", email="jane@x.com", **extra):
        response = client.post("/api/customers", json={"name": name, "email": email, **extra})
        assert response.status_code == 201, response.json()
        return response.json()["data"]
    return _make


@pytest.fixture
def make_task(client):
    def _make(title="Pour foundation", **extra):
        response = client.post("/api/tasks", json={"title": title, **extra})
        assert response.status_code == 201, response.json()
        return response.json()["data"]
    return _make
