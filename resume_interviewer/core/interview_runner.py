"""
Interview controller for the candidate client.

Holds the client ``InterviewState``, applies the pure transitions from
``interview_state``, persists after every change and talks to the API. The
controller runs on a single asyncio loop: a timer task ticks once per second
while a question is active, and answer submission (manual or on timeout) is
serialized so each question is advanced past at most once.
"""
import asyncio
import logging
from typing import Callable, List, Optional

from resume_interviewer.core import interview_state as transitions
from resume_interviewer.core.errors import InterviewError, ValidationError
from resume_interviewer.core.interview_state import InterviewState, InterviewStatus
from resume_interviewer.core.state_persistence import StateFileStore
from resume_interviewer.models.session import CandidateInfo
from resume_interviewer.services.api_client import InterviewApiClient

logger = logging.getLogger(__name__)

StateListener = Callable[[InterviewState, InterviewState], None]

TICK_INTERVAL_SECONDS = 1.0


class InterviewController:
    """State container and flow driver for one candidate interview."""

    def __init__(
        self,
        api: InterviewApiClient,
        persistence: Optional[StateFileStore] = None,
        state: Optional[InterviewState] = None,
    ):
        """
        Initialize the controller.

        Args:
            api: Client for the interview HTTP API
            persistence: Where the state is saved after every change (optional)
            state: Initial state (defaults to idle)
        """
        self.api = api
        self.persistence = persistence
        self._state = state or InterviewState()
        self._submit_lock = asyncio.Lock()
        self._listeners: List[StateListener] = []
        self.draft = ""

    @property
    def state(self) -> InterviewState:
        return self._state

    def subscribe(self, listener: StateListener) -> None:
        """Register a callback invoked with ``(old, new)`` after each change."""
        self._listeners.append(listener)

    def dispatch(self, transition: Callable[..., InterviewState], *args) -> InterviewState:
        """Apply a transition, then persist and notify if the state changed."""
        old = self._state
        new = transition(old, *args)
        if new is old:
            return old
        self._state = new
        if self.persistence is not None:
            self.persistence.save(new)
        for listener in self._listeners:
            listener(old, new)
        return new

    def restore(self) -> bool:
        """
        Load the persisted state, if any.

        An interview interrupted during evaluation comes back as completed so
        evaluation can be requested again.

        Returns:
            True if a saved state was restored
        """
        if self.persistence is None:
            return False
        saved = self.persistence.load()
        if saved is None:
            return False
        if saved.status == InterviewStatus.EVALUATING:
            saved = saved.model_copy(update={"status": InterviewStatus.COMPLETED})
        self._state = saved
        logger.info(f"Restored interview state for session {saved.session_id} ({saved.status.value})")
        return True

    def reset(self) -> InterviewState:
        self.draft = ""
        return self.dispatch(transitions.reset)

    # ==================== Setup ====================

    async def upload_resume(self, file_path: str, question_count: Optional[int] = None) -> InterviewState:
        """Upload a resume, then fetch the generated questions."""
        self.reset()
        upload = await self.api.upload_resume(file_path)
        self.dispatch(transitions.set_session, upload.candidate, upload.session_id)
        logger.info(f"Resume uploaded, session {upload.session_id}")

        questions = await self.api.generate_questions(upload.session_id, question_count)
        return self.dispatch(transitions.load_questions, questions)

    async def update_candidate(self, candidate: CandidateInfo) -> InterviewState:
        """Save manually entered candidate details on the server and locally."""
        session_id = self._state.session_id
        if session_id is None:
            raise ValidationError("No interview session to update")
        await self.api.update_candidate(session_id, candidate)
        return self.dispatch(transitions.set_candidate, candidate)

    def begin(self) -> InterviewState:
        return self.dispatch(transitions.start_interview)

    def pause(self) -> InterviewState:
        return self.dispatch(transitions.pause)

    def resume(self) -> InterviewState:
        return self.dispatch(transitions.resume)

    # ==================== Answers ====================

    async def submit_answer(self, answer: str, question_index: Optional[int] = None) -> bool:
        """
        Save the answer for the active question and advance.

        Submissions are serialized. A submission for a question index that has
        already been advanced past (by a manual submit racing an auto-submit,
        for example) is ignored. If the save fails the state is left as it was
        and the error propagates, so the caller can retry.

        Args:
            answer: Answer text, possibly empty
            question_index: Index the answer belongs to (defaults to the active one)

        Returns:
            True if the question was answered and advanced, False if ignored
        """
        index = self._state.current if question_index is None else question_index
        async with self._submit_lock:
            state = self._state
            question = transitions.current_question(state)
            if state.status != InterviewStatus.IN_PROGRESS or question is None or state.current != index:
                logger.debug(f"Ignoring submission for question index {index}")
                return False

            await self.api.save_answer(state.session_id, question.id, answer)

            self.dispatch(transitions.submit_answer, question.id, answer)
            self.draft = ""
            self.dispatch(transitions.next_question)
            logger.info(f"Answer saved for question {index + 1}/{len(state.questions)}")
            return True

    async def submit_current_answer(self, answer: str) -> bool:
        """Submit ``answer`` for whichever question is active right now."""
        return await self.submit_answer(answer, question_index=self._state.current)

    async def auto_submit(self) -> bool:
        """Submit the current draft because the countdown ran out."""
        if not transitions.needs_auto_submit(self._state):
            return False
        index = self._state.current
        logger.info(f"Time is up for question {index + 1}, submitting automatically")
        return await self.submit_answer(self.draft, question_index=index)

    # ==================== Timer ====================

    async def tick(self) -> InterviewState:
        """
        Advance the countdown by one second.

        When the countdown reaches zero the current draft is auto-submitted. A
        failed auto-submit is logged and retried on the next tick.
        """
        state = self.dispatch(transitions.tick)
        if transitions.needs_auto_submit(state):
            try:
                await self.auto_submit()
            except InterviewError as e:
                logger.error(f"Auto-submit failed, will retry: {e}")
        return self._state

    async def run_timer(self, interval: float = TICK_INTERVAL_SECONDS) -> InterviewState:
        """Tick once per ``interval`` until no question is active any more."""
        while self._state.status in (InterviewStatus.IN_PROGRESS, InterviewStatus.PAUSED):
            await asyncio.sleep(interval)
            await self.tick()
        return self._state

    # ==================== Evaluation ====================

    async def evaluate(self) -> InterviewState:
        """
        Request the final score and summary.

        A failure is recorded in ``evaluation_error`` with status kept at
        completed; calling this again retries.
        """
        session_id = self._state.session_id
        if session_id is None or self._state.status == InterviewStatus.EVALUATING:
            return self._state
        state = self.dispatch(transitions.start_evaluation)
        if state.status != InterviewStatus.EVALUATING:
            return state
        try:
            result = await self.api.finalize(session_id)
        except InterviewError as e:
            logger.error(f"Evaluation failed for session {session_id}: {e}")
            return self.dispatch(transitions.set_evaluation_error, str(e))
        return self.dispatch(transitions.set_final_analysis, result.final_score, result.summary)
