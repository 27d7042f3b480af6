from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from assessment_app.core.question_exporter import build_csv_template
from assessment_app.server.api_server import create_api_app
from tests.conftest import make_question


@pytest.fixture
def client(manager) -> TestClient:
    return TestClient(create_api_app(manager))


def _sign_up(client: TestClient, email: str = "user@example.com") -> dict:
    response = client.post("/auth/signup", json={"email": email, "password": "secret1"})
    assert response.status_code == 201
    return response.json()


def test_user_page_and_health(client):
    assert "Assessment Portal" in client.get("/").text
    assert client.get("/healthz").json() == {"ok": True}


def test_session_routes_require_sign_in(client):
    assert client.get("/session").status_code == 401
    assert client.get("/auth/me").status_code == 401


def test_sign_in_flow(client):
    _sign_up(client)
    client.post("/auth/logout")
    assert client.get("/auth/me").status_code == 401

    bad = client.post("/auth/login", json={"email": "user@example.com", "password": "nope-nope"})
    assert bad.status_code == 401
    good = client.post("/auth/login", json={"email": "user@example.com", "password": "secret1"})
    assert good.status_code == 200
    assert client.get("/auth/me").json()["role"] == "user"


def test_duplicate_sign_up_is_rejected(client):
    _sign_up(client)
    response = client.post("/auth/signup", json={"email": "user@example.com", "password": "secret1"})
    assert response.status_code == 422


def test_taking_a_quiz_end_to_end(client, manager):
    manager.add_question(make_question("**Bold** question", score=2))
    manager.add_question(make_question("Second", recommendation="Read the *manual*"))
    _sign_up(client)

    state = client.post("/session", json={}).json()
    assert state["position"] == 0
    assert "<strong>Bold</strong>" in state["question"]["question_html"]
    assert "correct_option" not in state["question"]

    rejected = client.post("/session/next").json()
    assert rejected["accepted"] is False
    assert rejected["message"]

    assert client.post("/session/answer", json={"selected_option_index": 9}).status_code == 422
    client.post("/session/answer", json={"selected_option_index": 3})
    moved = client.post("/session/next").json()
    assert moved["accepted"] and moved["state"]["position"] == 1

    back = client.post("/session/back").json()
    assert back["state"]["selected_option_index"] == 3
    assert client.post("/session/jump", json={"index": 1}).json()["accepted"] is False
    assert client.post("/session/next").json()["state"]["position"] == 1
    client.post("/session/answer", json={"selected_option_index": 0})
    finished = client.post("/session/next").json()
    assert finished["state"]["finished"] is True

    result = client.get("/session/result").json()
    assert (result["score"], result["max_score"]) == (2, 3)
    assert "<em>manual</em>" in result["details"][1]["recommendation_html"]

    saved = client.post("/session/save")
    assert saved.status_code == 201
    assert saved.json()["total"] == 3
    assert client.get("/session").status_code == 404
    assert len(client.get("/profile/results").json()) == 1


def test_start_without_questions_is_not_found(client):
    _sign_up(client)
    response = client.post("/session", json={})
    assert response.status_code == 404
    assert response.json()["detail"] == "No questions found."


def test_save_before_finishing_conflicts(client, manager):
    manager.add_question(make_question())
    _sign_up(client)
    client.post("/session", json={})
    assert client.post("/session/save").status_code == 409


def test_failed_save_is_reported(client, manager, tmp_path):
    manager.add_question(make_question())
    _sign_up(client)
    client.post("/session", json={})
    client.post("/session/answer", json={"selected_option_index": 3})
    client.post("/session/next")
    (tmp_path / "results.jsonl").mkdir()

    assert client.post("/session/save").status_code == 503
    assert client.get("/session").json()["finished"] is True


def test_reset_and_abandon(client, manager):
    manager.add_question(make_question())
    _sign_up(client)
    client.post("/session", json={})
    client.post("/session/answer", json={"selected_option_index": 1})
    client.post("/session/next")

    state = client.post("/session/reset").json()
    assert state["finished"] is False
    assert state["answered"] == [False]

    client.delete("/session")
    assert client.get("/session").status_code == 404


def test_quiz_listing(client, manager):
    question = manager.add_question(make_question())
    quiz = manager.create_quiz("Safety")
    manager.toggle_quiz_question(quiz.id, question.id)
    _sign_up(client)

    listed = client.get("/quizzes").json()
    assert listed == [
        {"id": quiz.id, "name": "Safety", "description": "", "quiz_time_limit": None, "question_count": 1}
    ]
    assert client.post("/session", json={"quiz_id": quiz.id}).json()["quiz_id"] == quiz.id
    assert client.post("/session", json={"quiz_id": 999}).status_code == 404


def test_admin_routes_are_forbidden_for_users(client):
    _sign_up(client)
    assert client.get("/admin/questions").status_code == 403


def test_admin_manages_questions_and_quizzes(client):
    _sign_up(client, "admin@example.com")

    payload = {
        "category": "HSSE",
        "question": "What is PPE?",
        "options": ["Gloves", "Helmet", "Glasses", "All of these"],
        "correct_option": 3,
        "time_limit_seconds": 20,
    }
    created = client.post("/admin/questions", json=payload)
    assert created.status_code == 201
    question_id = created.json()["id"]

    invalid = client.post("/admin/questions", json={**payload, "options": ["a", "b"]})
    assert invalid.status_code == 422

    updated = client.put(f"/admin/questions/{question_id}", json={**payload, "score": 3})
    assert updated.json()["score"] == 3

    quiz = client.post("/admin/quizzes", json={"name": "Safety", "time_limit_seconds": 120}).json()
    assert quiz["quiz_time_limit"] == 120
    toggled = client.post(f"/admin/quizzes/{quiz['id']}/questions/{question_id}/toggle").json()
    assert toggled == {"added": True, "question_ids": [question_id]}
    moved = client.post(f"/admin/quizzes/{quiz['id']}/questions/{question_id}/move", json={"offset": 1})
    assert moved.json()["moved"] is False

    detail = client.get(f"/admin/quizzes/{quiz['id']}").json()
    assert [q["id"] for q in detail["questions"]] == [question_id]

    assert client.delete(f"/admin/questions/{question_id}").json() == {"ok": True}
    assert client.get(f"/admin/quizzes/{quiz['id']}").json()["question_ids"] == []
    assert client.delete("/admin/questions/12345").status_code == 404


def test_admin_csv_import_and_template(client, manager):
    _sign_up(client, "admin@example.com")

    template = client.get("/admin/questions/template")
    assert template.status_code == 200
    assert template.text == build_csv_template()

    imported = client.post(
        "/admin/questions/import",
        files={"file": ("bank.csv", template.text.encode("utf-8"), "text/csv")},
    )
    assert imported.json() == {"imported": 1}
    assert manager.get_question_count() == 1

    broken = client.post(
        "/admin/questions/import",
        files={"file": ("bank.csv", b"question\nQ\n", "text/csv")},
    )
    assert broken.status_code == 422


def test_admin_settings_and_results(client, manager):
    _sign_up(client, "admin@example.com")

    assert client.put("/admin/settings", json={"quiz_time_limit": 300}).json() == {"quiz_time_limit": 300}
    assert client.put("/admin/settings", json={"quiz_time_limit": -1}).status_code == 422
    assert client.get("/admin/settings").json() == {"quiz_time_limit": 300}

    manager.add_question(make_question())
    client.post("/session", json={})
    client.post("/session/answer", json={"selected_option_index": 3})
    client.post("/session/next")
    client.post("/session/save")

    rows = client.get("/admin/results").json()
    assert rows[0]["email"] == "admin@example.com"
    assert rows[0]["score"] == 1


def test_admin_image_upload_is_served(client):
    _sign_up(client, "admin@example.com")

    uploaded = client.post("/admin/images", files={"file": ("pic.png", b"\x89PNG data", "image/png")})
    assert uploaded.status_code == 201
    url = uploaded.json()["image_url"]
    assert client.get(url).content == b"\x89PNG data"

    rejected = client.post("/admin/images", files={"file": ("notes.txt", b"x", "text/plain")})
    assert rejected.status_code == 422


def test_result_is_hidden_until_attempt_finishes(client, manager):
    manager.add_question(make_question("First", correct=2))
    manager.add_question(make_question("Second", correct=1))
    _sign_up(client)
    client.post("/session", json={})

    response = client.get("/session/result")

    assert response.status_code == 409
    body = response.json()
    assert "details" not in body
    assert "correct" not in response.text
