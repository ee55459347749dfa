"""
Unit tests for the interview HTTP API.
"""
import os
import pytest
from unittest.mock import AsyncMock, Mock

from fastapi.testclient import TestClient

from resume_interviewer.core.errors import EvaluationFailed, QuestionGenerationFailed, StorageUnavailable, ValidationError
from resume_interviewer.models.session import Difficulty, Question
from resume_interviewer.routers import resume as resume_router
from resume_interviewer.server import create_app
from resume_interviewer.services.resume_service import ResumeService
from resume_interviewer.utils.session_store import SessionStore

RESUME_TEXT = b"Jane Doe\nPython developer\nBuilt REST APIs with FastAPI and MongoDB.\n"


@pytest.fixture
def client(app):
    return TestClient(app)


def upload(client, content=RESUME_TEXT, filename="resume.txt", content_type="text/plain"):
    return client.post("/api/resume/upload", files={"file": (filename, content, content_type)})


def create_ready_session(client):
    session_id = upload(client).json()["sessionId"]
    client.post("/api/interview/generate", json={"sessionId": session_id})
    return session_id


def replacement_question():
    return Question(id="z1", text="Explain the GIL.", difficulty=Difficulty.HARD, time_seconds=120)


class TestUpload:
    """Test resume upload."""

    def test_upload_creates_session(self, client, tmp_path):
        response = upload(client)

        assert response.status_code == 200
        body = response.json()
        assert body["candidate"]["name"] == "Jane Doe"
        assert body["resumeUrl"] == f"/resumes/{body['sessionId']}.txt"

        session = client.get(f"/api/interview/session/{body['sessionId']}").json()
        assert session["status"] == "uploaded"
        assert "FastAPI" in session["resumeText"]
        assert session["questions"] == []

    def test_temporary_file_removed(self, client, tmp_path):
        upload(client)
        upload(client, content=b"   ")

        assert os.listdir(tmp_path / "uploads") == []

    def test_oversized_upload_rejected(self, client, tmp_path):
        response = upload(client, content=b"x" * (65 * 1024))

        assert response.status_code == 400
        assert "limit" in response.json()["detail"]
        assert os.listdir(tmp_path / "uploads") == []

    def test_missing_file(self, client):
        response = client.post("/api/resume/upload")

        assert response.status_code == 400
        assert response.json() == {"detail": "No file uploaded"}

    def test_unsupported_type(self, client):
        response = upload(client, content=b"\x89PNG", filename="photo.png", content_type="image/png")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unsupported_type_closes_upload(self):
        file = Mock(filename="photo.png", content_type="image/png", close=AsyncMock())
        resume_service = Mock(spec=ResumeService)

        with pytest.raises(ValidationError):
            await resume_router.upload_resume.__wrapped__(Mock(), file=file, resume_service=resume_service)

        file.close.assert_awaited_once()
        resume_service.create_session.assert_not_called()

    def test_unreadable_resume(self, client):
        response = upload(client, content=b"not a zip", filename="resume.docx",
                          content_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document")

        assert response.status_code == 400
        assert client.get("/api/candidates").json() == []


class TestInterviewFlow:
    """Test the interview endpoints."""

    def test_end_to_end(self, client, fake_interview_service):
        session_id = upload(client).json()["sessionId"]

        response = client.patch("/api/interview/candidate", json={"sessionId": session_id, "email": "jane@example.com"})
        assert response.status_code == 200

        response = client.post("/api/interview/generate", json={"sessionId": session_id, "n": 6})
        assert response.status_code == 200
        questions = response.json()["questions"]
        assert len(questions) == 6
        assert questions[0]["maxScore"] == 10
        assert client.get(f"/api/interview/session/{session_id}").json()["status"] == "ready"

        for question in questions:
            response = client.post(
                "/api/interview/answer",
                json={"sessionId": session_id, "questionId": question["id"], "answer": f"Answer to {question['id']}"},
            )
            assert response.status_code == 200
        assert client.get(f"/api/interview/session/{session_id}").json()["status"] == "in_progress"

        response = client.post("/api/interview/finalize", json={"sessionId": session_id})
        assert response.status_code == 200
        assert response.json() == {"finalScore": 74, "summary": "Solid Python fundamentals."}

        session = client.get(f"/api/candidates/{session_id}").json()
        assert session["status"] == "completed"
        assert session["finalScore"] == 74
        assert session["candidate"] == {"name": "Jane Doe", "email": "jane@example.com", "phone": "+1 555 0100"}
        assert len(session["answers"]) == 6
        fake_interview_service.generate_questions.assert_awaited_once()

    def test_candidate_patch_merges(self, client):
        session_id = upload(client).json()["sessionId"]

        client.patch("/api/interview/candidate", json={"sessionId": session_id, "name": "", "extra": "ignored"})

        candidate = client.get(f"/api/interview/session/{session_id}").json()["candidate"]
        assert candidate["name"] == "Jane Doe"
        assert candidate["phone"] == "+1 555 0100"

    def test_answer_overwrites(self, client):
        session_id = create_ready_session(client)
        for text in ("first", "second"):
            client.post("/api/interview/answer", json={"sessionId": session_id, "questionId": "q1", "answer": text})

        answers = client.get(f"/api/interview/session/{session_id}").json()["answers"]
        assert list(answers) == ["q1"]
        assert answers["q1"]["answer"] == "second"
        assert answers["q1"]["questionText"] == "Question q1?"

    def test_generation_failure_stores_nothing(self, client, fake_interview_service):
        session_id = upload(client).json()["sessionId"]
        fake_interview_service.generate_questions.side_effect = QuestionGenerationFailed("unusable output")

        response = client.post("/api/interview/generate", json={"sessionId": session_id})

        assert response.status_code == 502
        assert response.json() == {"detail": "unusable output"}
        session = client.get(f"/api/interview/session/{session_id}").json()
        assert session["questions"] == []
        assert session["status"] == "uploaded"

    def test_evaluation_failure(self, client, fake_interview_service):
        session_id = create_ready_session(client)
        fake_interview_service.summarize_session.side_effect = EvaluationFailed("missing key(s): finalScore")

        response = client.post("/api/interview/finalize", json={"sessionId": session_id})

        assert response.status_code == 502
        assert client.get(f"/api/interview/session/{session_id}").json()["finalScore"] is None

    def test_status_never_regresses(self, client):
        session_id = create_ready_session(client)
        client.post("/api/interview/finalize", json={"sessionId": session_id})

        client.post("/api/interview/answer", json={"sessionId": session_id, "questionId": "q2", "answer": "late"})

        assert client.get(f"/api/interview/session/{session_id}").json()["status"] == "completed"

    def test_regenerate_before_answers(self, client, fake_interview_service):
        session_id = create_ready_session(client)
        fake_interview_service.generate_questions.return_value = [replacement_question()]

        response = client.post("/api/interview/generate", json={"sessionId": session_id})

        assert response.status_code == 200
        session = client.get(f"/api/interview/session/{session_id}").json()
        assert [q["id"] for q in session["questions"]] == ["z1"]
        assert session["status"] == "ready"

    def test_regenerate_after_answer_refused(self, client, fake_interview_service):
        session_id = create_ready_session(client)
        client.post("/api/interview/answer", json={"sessionId": session_id, "questionId": "q1", "answer": "A set."})
        fake_interview_service.generate_questions.reset_mock()
        fake_interview_service.generate_questions.return_value = [replacement_question()]

        response = client.post("/api/interview/generate", json={"sessionId": session_id})

        assert response.status_code == 400
        fake_interview_service.generate_questions.assert_not_awaited()
        session = client.get(f"/api/interview/session/{session_id}").json()
        assert set(session["answers"]) <= {q["id"] for q in session["questions"]}
        assert len(session["questions"]) == 6

    def test_regenerate_after_finalize_refused(self, client, fake_interview_service):
        session_id = create_ready_session(client)
        client.post("/api/interview/answer", json={"sessionId": session_id, "questionId": "q1", "answer": "A set."})
        client.post("/api/interview/finalize", json={"sessionId": session_id})
        fake_interview_service.generate_questions.return_value = [replacement_question()]

        response = client.post("/api/interview/generate", json={"sessionId": session_id})

        assert response.status_code == 400
        session = client.get(f"/api/interview/session/{session_id}").json()
        assert session["status"] == "completed"
        assert session["finalScore"] == 74
        assert "z1" not in {q["id"] for q in session["questions"]}


class TestErrors:
    """Test error responses."""

    @pytest.mark.parametrize("method,path,body", [
        ("patch", "/api/interview/candidate", {"name": "X"}),
        ("post", "/api/interview/generate", {}),
        ("post", "/api/interview/answer", {"questionId": "q1", "answer": "x"}),
        ("post", "/api/interview/finalize", {}),
    ])
    def test_missing_session_id(self, client, method, path, body):
        response = getattr(client, method)(path, json=body)

        assert response.status_code == 400
        assert response.json() == {"detail": "sessionId is required"}

    @pytest.mark.parametrize("method,path,body", [
        ("patch", "/api/interview/candidate", {"sessionId": "nope", "name": "X"}),
        ("post", "/api/interview/generate", {"sessionId": "nope"}),
        ("post", "/api/interview/answer", {"sessionId": "nope", "questionId": "q1"}),
        ("post", "/api/interview/finalize", {"sessionId": "nope"}),
    ])
    def test_unknown_session(self, client, method, path, body):
        response = getattr(client, method)(path, json=body)

        assert response.status_code == 404
        assert response.json() == {"detail": "session not found"}

    def test_unknown_session_reads(self, client):
        assert client.get("/api/interview/session/nope").status_code == 404
        assert client.get("/api/candidates/nope").status_code == 404
        assert client.delete("/api/candidates/nope").status_code == 404

    def test_unknown_question(self, client):
        session_id = create_ready_session(client)

        response = client.post("/api/interview/answer", json={"sessionId": session_id, "questionId": "q99"})

        assert response.status_code == 404

    def test_missing_question_id(self, client):
        session_id = create_ready_session(client)

        response = client.post("/api/interview/answer", json={"sessionId": session_id, "answer": "x"})

        assert response.status_code == 400

    def test_invalid_question_count(self, client):
        session_id = upload(client).json()["sessionId"]

        response = client.post("/api/interview/generate", json={"sessionId": session_id, "n": 0})

        assert response.status_code == 400
        assert "n" in response.json()["detail"]

    def test_store_unavailable(self, fake_interview_service):
        store = Mock(spec=SessionStore)
        store.backend_name = "mongodb"
        store.list.side_effect = StorageUnavailable("Cannot list sessions")
        store.ping.side_effect = StorageUnavailable("Cannot reach MongoDB")
        client = TestClient(create_app(store=store, interview_service=fake_interview_service))

        assert client.get("/api/candidates").status_code == 503
        assert client.get("/api/health").status_code == 503


class TestCandidates:
    """Test the interviewer endpoints."""

    def test_list_sorted_by_score(self, client, fake_interview_service):
        unscored = upload(client).json()["sessionId"]
        scored = create_ready_session(client)
        client.post("/api/interview/finalize", json={"sessionId": scored})

        rows = client.get("/api/candidates").json()

        assert [row["id"] for row in rows] == [scored, unscored]
        assert rows[0]["finalScore"] == 74
        assert rows[0]["status"] == "completed"
        assert rows[1]["finalScore"] is None
        assert rows[1]["email"] == ""

    def test_delete(self, client):
        session_id = upload(client).json()["sessionId"]

        response = client.delete(f"/api/candidates/{session_id}")

        assert response.status_code == 200
        assert client.get("/api/candidates").json() == []


class TestSystemEndpoints:
    """Test health and configuration endpoints."""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["store"] == "file"

    def test_ping(self, client):
        assert client.get("/api/ping").json() == {"message": "pong"}

    def test_system_config(self, client):
        body = client.get("/api/system-config").json()

        assert body["system_name"] == "Resume Interviewer"
        assert body["store_backend"] == "file"
        assert body["features"]["rate_limiting"] is False
