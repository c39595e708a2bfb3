from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def _create(**kw):
    body = {"title": "Two Sum", "description": "find pair", "difficulty": "Easy", "topic": "Arrays"}
    body.update(kw)
    r = client.post("/questions", json=body)
    assert r.status_code == 201, r.text
    return r.json()


def test_health():
    r = client.get("/")
    assert r.status_code == 200
    assert r.json().get("ok") is True


def test_create_and_detail():
    q = _create(tags=["hash-table"], timeComplexity="O(n)")
    assert {"id", "createdAt", "title", "tags", "timeComplexity"}.issubset(q.keys())
    assert q["solution"] is None

    r = client.get(f"/questions/{q['id']}")
    assert r.status_code == 200
    assert r.json() == q


def test_get_question_detail_404():
    r = client.get("/questions/missing")
    assert r.status_code == 404
    assert r.json()["code"] == "NOT_FOUND"


def test_create_rejects_blank_required_fields():
    r = client.post(
        "/questions",
        json={"title": "  ", "description": "d", "difficulty": "Easy", "topic": "Arrays"},
    )
    assert r.status_code == 422
    assert client.get("/questions").json() == []


def test_create_rejects_unknown_difficulty():
    r = client.post(
        "/questions",
        json={"title": "t", "description": "d", "difficulty": "Trivial", "topic": "Arrays"},
    )
    assert r.status_code == 422


def test_list_filters():
    a = _create(tags=["hash-table"])
    b = _create(title="Merge Intervals", difficulty="Medium")
    c = _create(title="Word Ladder", difficulty="Hard", topic="Graphs")

    ids = lambda r: [q["id"] for q in r.json()]  # noqa: E731
    assert ids(client.get("/questions")) == [c["id"], b["id"], a["id"]]
    assert ids(client.get("/questions", params={"search": "HASH"})) == [a["id"]]
    assert ids(client.get("/questions", params={"difficulty": "Medium"})) == [b["id"]]
    assert ids(client.get("/questions", params={"topic": "Graphs"})) == [c["id"]]
    assert client.get("/questions", params={"difficulty": "Trivial"}).status_code == 422


def test_update_preserves_identity():
    q = _create()
    r = client.put(
        f"/questions/{q['id']}",
        json={"title": "Two Sum II", "description": "sorted", "difficulty": "Medium", "topic": "Arrays"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == q["id"] and body["createdAt"] == q["createdAt"]
    assert body["title"] == "Two Sum II"


def test_update_missing_404():
    r = client.put(
        "/questions/nope",
        json={"title": "t", "description": "d", "difficulty": "Easy", "topic": "Arrays"},
    )
    assert r.status_code == 404


def test_delete_needs_confirmation():
    q = _create()
    r = client.delete(f"/questions/{q['id']}")
    assert r.status_code == 409
    assert len(client.get("/questions").json()) == 1

    r = client.delete(f"/questions/{q['id']}", params={"confirm": "true"})
    assert r.status_code == 200 and r.json()["ok"] is True
    r = client.delete(f"/questions/{q['id']}", params={"confirm": "true"})
    assert r.status_code == 404


def test_topics_and_stats_scenario():
    a = _create(tags=["hash-table"])
    _create(title="Merge Intervals", difficulty="Medium")

    assert client.get("/topics").json() == ["Arrays"]
    assert [q["id"] for q in client.get("/questions", params={"search": "two"}).json()] == [a["id"]]
    assert client.get("/stats").json() == {
        "total": 2,
        "easyCount": 1,
        "mediumCount": 1,
        "hardCount": 0,
    }

    client.delete(f"/questions/{a['id']}", params={"confirm": "true"})
    assert client.get("/topics").json() == ["Arrays"]


def test_rejected_write_returns_503_and_keeps_collection(monkeypatch):
    from bank import get_bank
    from errors import PersistenceWriteError

    def reject(raw):
        raise PersistenceWriteError("quota exceeded")

    monkeypatch.setattr(get_bank().store, "write_raw", reject)
    r = client.post(
        "/questions",
        json={"title": "Two Sum", "description": "d", "difficulty": "Easy", "topic": "Arrays"},
    )
    assert r.status_code == 503
    assert r.json()["code"] == "STORAGE_WRITE"
    assert client.get("/questions").json() == []
    assert get_bank().list() == []
