import httpx
import pytest
from fastapi.testclient import TestClient

from deps.chat import get_fetcher
from fallback import NO_ANSWER_MESSAGE, SEARCH_ERROR_MESSAGE, FallbackFetcher, SerpApiProvider
from main import app
from resolver import SELECT_SUBJECT_FOR_RANDOM_MESSAGE, SELECT_SUBJECT_MESSAGE

client = TestClient(app)


@pytest.fixture
def search_results():
    """Route fallback searches to a mock SerpApi; tests set the JSON it returns."""
    state = {"body": {}, "calls": []}

    def handler(request):
        state["calls"].append(request)
        return httpx.Response(200, json=state["body"])

    app.dependency_overrides[get_fetcher] = lambda: FallbackFetcher(
        SerpApiProvider("test-key"), transport=httpx.MockTransport(handler)
    )
    yield state
    app.dependency_overrides.pop(get_fetcher, None)


def _new_session(subject=None):
    r = client.post("/sessions")
    assert r.status_code == 201
    sid = r.json()["session_id"]
    if subject:
        r = client.post(f"/sessions/{sid}/subject", json={"subject": subject})
        assert r.status_code == 200
    return sid


def test_create_session_starts_unselected():
    sid = _new_session()
    r = client.get(f"/sessions/{sid}")
    assert r.status_code == 200
    assert r.json() == {"session_id": sid, "subject": None}


def test_unknown_session_404():
    r = client.post("/sessions/missing/messages", json={"message": "hi"})
    assert r.status_code == 404


def test_select_subject_greets_with_questions():
    sid = _new_session()
    r = client.post(f"/sessions/{sid}/subject", json={"subject": "maths"})
    body = r.json()
    assert body["subject"] == "maths"
    assert body["reply"].startswith("You've selected Maths.")
    assert "What is the Pythagorean theorem?" in body["reply"]
    assert client.get(f"/sessions/{sid}").json()["subject"] == "maths"


def test_select_unknown_subject_rejected():
    sid = _new_session()
    r = client.post(f"/sessions/{sid}/subject", json={"subject": "history"})
    assert r.status_code == 422


def test_message_without_subject_prompts(search_results):
    sid = _new_session()
    r = client.post(f"/sessions/{sid}/messages", json={"message": "What is dark matter?"})
    body = r.json()
    assert body["reply"] == SELECT_SUBJECT_MESSAGE
    assert body["source"] == "prompt"
    assert search_results["calls"] == []


def test_exact_match_science_water():
    sid = _new_session("science")
    r = client.post(
        f"/sessions/{sid}/messages",
        json={"message": "  What is the chemical formula for water?  ", "request_id": "w1"},
    )
    body = r.json()
    assert r.status_code == 200
    assert body["request_id"] == "w1"
    assert body["source"] == "exact"
    assert "H₂O" in body["reply"]


def test_fuzzy_match_maths_pythagoras():
    sid = _new_session("maths")
    r = client.post(f"/sessions/{sid}/messages", json={"message": "pythagorean theorem"})
    body = r.json()
    assert body["source"] == "fuzzy"
    assert body["matched"] == "What is the Pythagorean theorem?"
    assert body["reply"].startswith("The Pythagorean theorem states")
    assert body["request_id"]


def test_unmatched_question_searches_online(search_results):
    search_results["body"] = {"organic_results": []}
    sid = _new_session("science")
    r = client.post(f"/sessions/{sid}/messages", json={"message": "What is dark matter?"})
    body = r.json()
    assert body["source"] == "online"
    assert body["reply"] == NO_ANSWER_MESSAGE
    assert len(search_results["calls"]) == 1
    assert search_results["calls"][0].url.params["q"] == "What is dark matter?"


def test_online_snippet_reply(search_results):
    search_results["body"] = {
        "organic_results": [{"snippet": "Mostly invisible mass.", "link": "https://example.org"}]
    }
    sid = _new_session("science")
    r = client.post(f"/sessions/{sid}/messages", json={"message": "What is dark matter?"})
    assert r.json()["reply"] == (
        "I found this information: Mostly invisible mass.\n\nSource: https://example.org"
    )


def test_search_misconfigured_still_replies(monkeypatch):
    monkeypatch.setenv("SEARCH_PROVIDER", "nope")
    sid = _new_session("maths")
    r = client.post(f"/sessions/{sid}/messages", json={"message": "What is a matrix?"})
    assert r.status_code == 200
    assert r.json()["reply"] == SEARCH_ERROR_MESSAGE
    assert r.json()["source"] == "unavailable"


@pytest.mark.parametrize("message", ["", "   ", "\n\t"])
def test_blank_message_rejected(message):
    sid = _new_session("science")
    r = client.post(f"/sessions/{sid}/messages", json={"message": message})
    assert r.status_code == 422


def test_random_requires_subject():
    sid = _new_session()
    r = client.get(f"/sessions/{sid}/random")
    assert r.json() == {"reply": SELECT_SUBJECT_FOR_RANDOM_MESSAGE, "question": None}


def test_random_question_from_selected_bank():
    sid = _new_session("science")
    subjects = client.get("/subjects").json()
    science = next(s for s in subjects if s["id"] == "science")["questions"]
    for _ in range(20):
        body = client.get(f"/sessions/{sid}/random").json()
        assert body["question"] in science
        assert body["reply"] == f"Here's a science question for you: {body['question']}"


def test_cancel_unknown_request():
    sid = _new_session("science")
    r = client.delete(f"/sessions/{sid}/requests/nothing")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "cancelled": False}


def test_switching_subject_keeps_latest():
    sid = _new_session("science")
    r = client.post(f"/sessions/{sid}/subject", json={"subject": "maths"})
    assert r.json()["cancelled"] == 0
    r = client.post(f"/sessions/{sid}/messages", json={"message": "area of a circle"})
    assert r.json()["subject"] == "maths"
    assert r.json()["source"] == "fuzzy"


def test_end_session_forgets_it():
    sid = _new_session("science")
    r = client.delete(f"/sessions/{sid}")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "cancelled": False}
    assert client.get(f"/sessions/{sid}").status_code == 404
    assert client.delete(f"/sessions/{sid}").status_code == 404
