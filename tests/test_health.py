from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def test_health_db():
    r = client.get("/health/db")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "storage_table": True}


def test_health_migrations_basic():
    r = client.get("/health/migrations")
    assert r.status_code == 200
    b = r.json()
    assert b["code_heads"] == ["base_0001"]
    assert "db_version" in b


def test_health_storage_clean():
    r = client.get("/health/storage")
    assert r.json() == {"ok": True, "backend": "db", "count": 0, "load_error": None}
