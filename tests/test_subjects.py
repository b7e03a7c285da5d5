from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def test_health():
    r = client.get("/")
    assert r.status_code == 200
    assert r.json().get("ok") is True


def test_list_subjects():
    r = client.get("/subjects")
    assert r.status_code == 200
    data = r.json()
    assert [s["id"] for s in data] == ["science", "maths"]
    assert [s["name"] for s in data] == ["Science", "Maths"]
    assert all(len(s["questions"]) == 5 for s in data)


def test_subject_questions_in_bank_order():
    r = client.get("/subjects/maths/questions")
    assert r.status_code == 200
    qs = r.json()
    assert qs[0] == "What is the Pythagorean theorem?"
    assert qs[-1] == "Explain the concept of derivatives in calculus."


def test_subject_questions_case_insensitive_id():
    r = client.get("/subjects/Science/questions")
    assert r.status_code == 200


def test_subject_questions_404():
    r = client.get("/subjects/history/questions")
    assert r.status_code == 404


def test_health_knowledge():
    r = client.get("/health/knowledge")
    body = r.json()
    assert body["ok"] is True
    assert body["counts"] == {"science": 5, "maths": 5}


def test_health_search_unconfigured(monkeypatch):
    monkeypatch.setenv("SEARCH_PROVIDER", "google")
    monkeypatch.delenv("SEARCH_API_KEY", raising=False)
    r = client.get("/health/search")
    body = r.json()
    assert body["ok"] is False and body["provider"] == "google"


def test_health_search_configured(monkeypatch):
    monkeypatch.setenv("SEARCH_PROVIDER", "serpapi")
    monkeypatch.setenv("SEARCH_API_KEY", "secret")
    r = client.get("/health/search")
    assert r.json() == {"ok": True, "provider": "serpapi", "configured": True}
