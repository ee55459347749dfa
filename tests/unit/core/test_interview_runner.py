"""
Unit tests for the InterviewController.
"""
import pytest
import asyncio
from unittest.mock import Mock, AsyncMock

from resume_interviewer.core import interview_state as sm
from resume_interviewer.core.errors import EvaluationFailed, ServiceUnavailable, StorageUnavailable, ValidationError
from resume_interviewer.core.interview_runner import InterviewController
from resume_interviewer.core.interview_state import InterviewState, InterviewStatus, MessageRole
from resume_interviewer.core.state_persistence import StateFileStore
from resume_interviewer.models.api import FinalizeResponse, UploadResponse
from resume_interviewer.models.session import CandidateInfo
from resume_interviewer.services.api_client import InterviewApiClient


def started(questions):
    state = sm.set_session(InterviewState(), CandidateInfo(name="Jane Doe"), "session-1")
    return sm.start_interview(sm.load_questions(state, questions))


@pytest.fixture
def mock_api():
    """Create a mock InterviewApiClient."""
    api = Mock(spec=InterviewApiClient)
    api.upload_resume = AsyncMock()
    api.update_candidate = AsyncMock(return_value="Candidate updated")
    api.generate_questions = AsyncMock()
    api.save_answer = AsyncMock(return_value=None)
    api.finalize = AsyncMock()
    return api


class TestSetup:
    """Test resume upload and interview start."""

    @pytest.mark.asyncio
    async def test_upload_resume_loads_questions(self, mock_api, questions):
        mock_api.upload_resume.return_value = UploadResponse(
            session_id="session-1",
            candidate=CandidateInfo(name="Jane Doe"),
            resume_url="/resumes/session-1.pdf",
        )
        mock_api.generate_questions.return_value = questions
        controller = InterviewController(mock_api)

        state = await controller.upload_resume("resume.pdf", 6)

        mock_api.upload_resume.assert_awaited_once_with("resume.pdf")
        mock_api.generate_questions.assert_awaited_once_with("session-1", 6)
        assert state.status == InterviewStatus.COLLECTING
        assert state.session_id == "session-1"
        assert len(state.questions) == 6

        state = controller.begin()
        assert state.status == InterviewStatus.IN_PROGRESS
        assert state.total_asked == 1

    @pytest.mark.asyncio
    async def test_update_candidate_saves_and_merges(self, mock_api):
        state = sm.set_session(InterviewState(), CandidateInfo(name="Jane Doe"), "session-1")
        controller = InterviewController(mock_api, state=state)

        state = await controller.update_candidate(CandidateInfo(email="jane@example.com"))

        mock_api.update_candidate.assert_awaited_once()
        assert state.candidate.name == "Jane Doe"
        assert state.candidate.email == "jane@example.com"

    @pytest.mark.asyncio
    async def test_update_candidate_requires_session(self, mock_api):
        controller = InterviewController(mock_api)

        with pytest.raises(ValidationError):
            await controller.update_candidate(CandidateInfo(name="Jane Doe"))
        mock_api.update_candidate.assert_not_awaited()

    def test_subscribers_see_each_change(self, mock_api, questions):
        controller = InterviewController(mock_api, state=started(questions))
        listener = Mock()
        controller.subscribe(listener)

        controller.pause()
        controller.pause()

        listener.assert_called_once()
        old, new = listener.call_args[0]
        assert old.status == InterviewStatus.IN_PROGRESS
        assert new.status == InterviewStatus.PAUSED


class TestSubmission:
    """Test answer submission and auto-submit."""

    @pytest.mark.asyncio
    async def test_submit_saves_and_advances(self, mock_api, questions):
        controller = InterviewController(mock_api, state=started(questions))

        accepted = await controller.submit_current_answer("I would use a dict.")

        assert accepted is True
        mock_api.save_answer.assert_awaited_once_with("session-1", "q1", "I would use a dict.")
        assert controller.state.current == 1
        assert controller.state.answers == {"q1": "I would use a dict."}

    @pytest.mark.asyncio
    async def test_failed_save_leaves_state_unchanged(self, mock_api, questions):
        mock_api.save_answer.side_effect = StorageUnavailable("store down")
        initial = started(questions)
        controller = InterviewController(mock_api, state=initial)

        with pytest.raises(StorageUnavailable):
            await controller.submit_answer("answer")

        assert controller.state is initial
        assert controller.state.current == 0
        assert [m.id for m in controller.state.messages] == ["q-q1"]

    @pytest.mark.asyncio
    async def test_manual_and_timeout_submit_advance_once(self, mock_api, questions):
        release = asyncio.Event()

        async def slow_save(*args):
            await release.wait()

        mock_api.save_answer.side_effect = slow_save
        state = started(questions).model_copy(update={"time_remaining": 1})
        controller = InterviewController(mock_api, state=state)

        manual = asyncio.create_task(controller.submit_answer("manual answer"))
        await asyncio.sleep(0)
        ticking = asyncio.create_task(controller.tick())
        await asyncio.sleep(0)
        release.set()
        accepted = await manual
        await ticking

        assert accepted is True
        assert mock_api.save_answer.await_count == 1
        assert controller.state.current == 1
        assert controller.state.total_asked == 2
        assert controller.state.answers == {"q1": "manual answer"}
        user_messages = [m for m in controller.state.messages if m.role == MessageRole.USER]
        assert len(user_messages) == 1

    @pytest.mark.asyncio
    async def test_stale_submission_is_ignored(self, mock_api, questions):
        controller = InterviewController(mock_api, state=started(questions))
        await controller.submit_answer("first", question_index=0)

        accepted = await controller.submit_answer("late", question_index=0)

        assert accepted is False
        assert mock_api.save_answer.await_count == 1
        assert controller.state.answers == {"q1": "first"}

    @pytest.mark.asyncio
    async def test_timeout_submits_draft(self, mock_api, questions):
        state = started(questions).model_copy(update={"time_remaining": 1})
        controller = InterviewController(mock_api, state=state)
        controller.draft = "partial thought"

        await controller.tick()

        mock_api.save_answer.assert_awaited_once_with("session-1", "q1", "partial thought")
        assert controller.state.current == 1
        assert controller.draft == ""

    @pytest.mark.asyncio
    async def test_failed_auto_submit_retries_on_next_tick(self, mock_api, questions):
        mock_api.save_answer.side_effect = [ServiceUnavailable("offline"), None]
        state = started(questions).model_copy(update={"time_remaining": 1})
        controller = InterviewController(mock_api, state=state)

        await controller.tick()
        assert controller.state.current == 0
        assert controller.state.time_remaining == 0

        await controller.tick()
        assert controller.state.current == 1
        assert mock_api.save_answer.await_count == 2

    @pytest.mark.asyncio
    async def test_run_timer_auto_submits_until_completed(self, mock_api, questions):
        controller = InterviewController(mock_api, state=started(questions[:2]))

        state = await controller.run_timer(interval=0)

        assert state.status == InterviewStatus.COMPLETED
        assert mock_api.save_answer.await_count == 2
        assert state.answers == {"q1": "", "q2": ""}


class TestEvaluation:
    """Test final scoring."""

    @pytest.fixture
    def completed(self, questions):
        state = started(questions[:1])
        return sm.next_question(sm.submit_answer(state, "q1", "answer"))

    @pytest.mark.asyncio
    async def test_evaluate_sets_result(self, mock_api, completed):
        mock_api.finalize.return_value = FinalizeResponse(final_score=81, summary="Strong.")
        controller = InterviewController(mock_api, state=completed)

        state = await controller.evaluate()

        assert state.status == InterviewStatus.COMPLETED
        assert state.final_score == 81
        assert state.summary == "Strong."
        assert state.evaluation_error is None

    @pytest.mark.asyncio
    async def test_failed_evaluation_can_be_retried(self, mock_api, completed):
        mock_api.finalize.side_effect = [
            EvaluationFailed("Evaluation returned unusable output"),
            FinalizeResponse(final_score=64, summary="Adequate."),
        ]
        controller = InterviewController(mock_api, state=completed)

        state = await controller.evaluate()
        assert state.status == InterviewStatus.COMPLETED
        assert state.evaluation_error == "Evaluation returned unusable output"
        assert state.final_score is None
        assert state.messages == completed.messages

        state = await controller.evaluate()
        assert state.evaluation_error is None
        assert state.final_score == 64

    @pytest.mark.asyncio
    async def test_evaluate_without_session_does_nothing(self, mock_api):
        controller = InterviewController(mock_api)

        await controller.evaluate()

        mock_api.finalize.assert_not_awaited()


class TestPersistence:
    """Test state persistence through the controller."""

    def test_every_change_is_persisted(self, mock_api, questions, tmp_path):
        store = StateFileStore(str(tmp_path / "state.json"))
        controller = InterviewController(mock_api, persistence=store, state=started(questions))

        controller.pause()

        assert store.load() == controller.state

    def test_restore_brings_back_saved_state(self, mock_api, questions, tmp_path):
        store = StateFileStore(str(tmp_path / "state.json"))
        store.save(started(questions))
        controller = InterviewController(mock_api, persistence=store)

        assert controller.restore() is True
        assert controller.state.session_id == "session-1"
        assert sm.is_unfinished(controller.state)

    def test_restore_interrupted_evaluation_as_completed(self, mock_api, questions, tmp_path):
        store = StateFileStore(str(tmp_path / "state.json"))
        state = started(questions[:1])
        state = sm.start_evaluation(sm.next_question(sm.submit_answer(state, "q1", "answer")))
        store.save(state)
        controller = InterviewController(mock_api, persistence=store)

        controller.restore()

        assert controller.state.status == InterviewStatus.COMPLETED
        assert sm.needs_evaluation(controller.state)

    def test_restore_without_file(self, mock_api, tmp_path):
        store = StateFileStore(str(tmp_path / "missing.json"))
        controller = InterviewController(mock_api, persistence=store)

        assert controller.restore() is False
        assert controller.state.status == InterviewStatus.IDLE

    def test_unreadable_file_is_ignored(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json")

        assert StateFileStore(str(path)).load() is None
