"""
Shared pytest configuration for Resume Interviewer tests.

Environment overrides are applied before any ``resume_interviewer`` module is
imported, so module-level configuration picks them up.
"""
import os
import tempfile

_TEST_DATA_DIR = tempfile.mkdtemp(prefix="resume-interviewer-tests-")

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SESSION_STORE_BACKEND"] = "file"
os.environ["SESSION_STORE_PATH"] = os.path.join(_TEST_DATA_DIR, "db.json")
os.environ["RESUME_STORAGE_DIR"] = os.path.join(_TEST_DATA_DIR, "resumes")
os.environ["UPLOAD_TMP_DIR"] = os.path.join(_TEST_DATA_DIR, "uploads")
os.environ["INTERVIEW_STATE_FILE"] = os.path.join(_TEST_DATA_DIR, "state.json")
os.environ["GOOGLE_API_KEY"] = ""

from unittest.mock import AsyncMock, Mock, patch  # noqa: E402

import pytest  # noqa: E402

from resume_interviewer.models.session import (  # noqa: E402
    CandidateInfo,
    Difficulty,
    Evaluation,
    Question,
    Session,
    SessionStatus,
)
from resume_interviewer.server import create_app  # noqa: E402
from resume_interviewer.services.interview_service import InterviewService  # noqa: E402
from resume_interviewer.services.resume_service import ResumeService  # noqa: E402
from resume_interviewer.utils.session_store import JsonFileSessionStore  # noqa: E402


def make_question(question_id: str, difficulty: Difficulty = Difficulty.MEDIUM, text: str = None) -> Question:
    return Question(
        id=question_id,
        text=text or f"Question {question_id}?",
        difficulty=difficulty,
        time_seconds=difficulty.seconds,
    )


@pytest.fixture
def questions():
    """Two easy, two medium and two hard questions."""
    return [
        make_question("q1", Difficulty.EASY),
        make_question("q2", Difficulty.EASY),
        make_question("q3", Difficulty.MEDIUM),
        make_question("q4", Difficulty.MEDIUM),
        make_question("q5", Difficulty.HARD),
        make_question("q6", Difficulty.HARD),
    ]


@pytest.fixture
def session(questions):
    """A session with questions generated and no answers yet."""
    return Session(
        id="session-1",
        candidate=CandidateInfo(name="Jane Doe", email="jane@example.com", phone="+1 555 0100"),
        resume_url="/resumes/session-1.pdf",
        resume_text="Jane Doe\njane@example.com\nPython developer with five years of FastAPI.",
        questions=questions,
        status=SessionStatus.READY,
    )


@pytest.fixture
def fake_interview_service(questions):
    """An InterviewService double with canned generation results."""
    service = Mock(spec=InterviewService)
    service.extract_candidate_fields = AsyncMock(return_value=CandidateInfo(name="Jane Doe", phone="+1 555 0100"))
    service.generate_questions = AsyncMock(return_value=questions)
    service.summarize_session = AsyncMock(return_value=Evaluation(final_score=74, summary="Solid Python fundamentals."))
    return service


@pytest.fixture
def app(tmp_path, fake_interview_service):
    """An API app backed by a temporary file store and the service double."""
    store = JsonFileSessionStore(str(tmp_path / "db.json"))
    resume_service = ResumeService(store, fake_interview_service, storage_dir=str(tmp_path / "resumes"))
    upload_config = {
        "storage_dir": str(tmp_path / "resumes"),
        "tmp_dir": str(tmp_path / "uploads"),
        "max_bytes": 64 * 1024,
    }
    with patch("resume_interviewer.routers.resume.get_upload_config", return_value=upload_config):
        yield create_app(store=store, interview_service=fake_interview_service, resume_service=resume_service)
