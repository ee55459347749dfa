"""
Client-side interview lifecycle state machine.

The candidate client mirrors session progress in an ``InterviewState`` record.
Every transition below is a pure function: it takes a state and returns a new
one, leaving its input untouched. The ``InterviewController`` in
``interview_runner`` applies them, persists the result and drives the timer.

States::

    idle -> collecting -> in_progress <-> paused
                              |
                              v
                          completed <-> evaluating

``completed`` means there is nothing left to ask. Whether the evaluation of a
completed interview succeeded is tracked separately in ``evaluation_error``.
"""
from typing import Dict, List, Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

from resume_interviewer.models.session import CandidateInfo, Question


class InterviewStatus(str, Enum):
    IDLE = "idle"
    COLLECTING = "collecting"
    IN_PROGRESS = "in_progress"
    PAUSED = "paused"
    COMPLETED = "completed"
    EVALUATING = "evaluating"


class MessageRole(str, Enum):
    AI = "ai"
    USER = "user"
    SYSTEM = "system"


class ChatMessage(BaseModel):
    """One transcript entry shown to the candidate."""
    id: str
    role: MessageRole
    text: str
    score: Optional[float] = None


class InterviewState(BaseModel):
    """Ephemeral client mirror of one interview session."""
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(None, alias="sessionId")
    candidate: CandidateInfo = Field(default_factory=CandidateInfo)
    questions: List[Question] = Field(default_factory=list)
    current: int = 0
    messages: List[ChatMessage] = Field(default_factory=list)
    answers: Dict[str, str] = Field(default_factory=dict)
    status: InterviewStatus = InterviewStatus.IDLE
    time_remaining: int = Field(0, alias="timeRemaining", ge=0)
    total_asked: int = Field(0, alias="totalAsked", ge=0)
    final_score: Optional[float] = Field(None, alias="finalScore")
    summary: Optional[str] = None
    evaluation_error: Optional[str] = Field(None, alias="evaluationError")


def question_message_id(question: Question) -> str:
    return f"q-{question.id}"


def answer_message_id(question_id: str) -> str:
    return f"a-{question_id}"


def _ask(state: InterviewState, index: int, total_asked: int) -> InterviewState:
    question = state.questions[index]
    message = ChatMessage(id=question_message_id(question), role=MessageRole.AI, text=question.text)
    return state.model_copy(update={
        "current": index,
        "status": InterviewStatus.IN_PROGRESS,
        "time_remaining": question.difficulty.seconds,
        "total_asked": total_asked,
        "messages": [*state.messages, message],
    })


# ==================== Transitions ====================

def reset(state: Optional[InterviewState] = None) -> InterviewState:
    return InterviewState()


def set_session(state: InterviewState, candidate: CandidateInfo, session_id: str) -> InterviewState:
    return state.model_copy(update={
        "candidate": candidate,
        "session_id": session_id,
        "status": InterviewStatus.COLLECTING,
    })


def set_candidate(state: InterviewState, candidate: CandidateInfo) -> InterviewState:
    """Merge manually entered candidate details; status is unchanged."""
    return state.model_copy(update={"candidate": state.candidate.merged(candidate)})


def load_questions(state: InterviewState, questions: List[Question]) -> InterviewState:
    return state.model_copy(update={
        "questions": list(questions),
        "current": 0,
        "total_asked": 0,
        "status": InterviewStatus.COLLECTING,
    })


def start_interview(state: InterviewState) -> InterviewState:
    if state.status != InterviewStatus.COLLECTING or not state.questions:
        return state
    return _ask(state, state.current, total_asked=1)


def tick(state: InterviewState) -> InterviewState:
    if state.status != InterviewStatus.IN_PROGRESS:
        return state
    return state.model_copy(update={"time_remaining": max(0, state.time_remaining - 1)})


def submit_answer(state: InterviewState, question_id: str, answer: str) -> InterviewState:
    """
    Record (or overwrite) the answer for ``question_id``.

    The transcript holds at most one user message per question: a repeated
    submission replaces the text of the existing message instead of adding a
    second one.
    """
    message_id = answer_message_id(question_id)
    messages = list(state.messages)
    for i, message in enumerate(messages):
        if message.id == message_id:
            messages[i] = message.model_copy(update={"text": answer})
            break
    else:
        messages.append(ChatMessage(id=message_id, role=MessageRole.USER, text=answer))

    return state.model_copy(update={
        "answers": {**state.answers, question_id: answer},
        "messages": messages,
    })


def next_question(state: InterviewState) -> InterviewState:
    """
    Advance to the next question, or complete the interview when none remain.

    Once the completed region is reached (completed or evaluating) this is a
    no-op.
    """
    if state.status in (InterviewStatus.COMPLETED, InterviewStatus.EVALUATING):
        return state
    if state.current < len(state.questions) - 1:
        return _ask(state, state.current + 1, total_asked=state.total_asked + 1)
    return state.model_copy(update={
        "status": InterviewStatus.COMPLETED,
        "time_remaining": 0,
    })


def start_evaluation(state: InterviewState) -> InterviewState:
    if state.status not in (InterviewStatus.IN_PROGRESS, InterviewStatus.COMPLETED):
        return state
    return state.model_copy(update={
        "status": InterviewStatus.EVALUATING,
        "evaluation_error": None,
    })


def set_final_analysis(state: InterviewState, final_score: float, summary: str) -> InterviewState:
    return state.model_copy(update={
        "final_score": final_score,
        "summary": summary,
        "status": InterviewStatus.COMPLETED,
        "evaluation_error": None,
    })


def set_evaluation_error(state: InterviewState, message: str) -> InterviewState:
    return state.model_copy(update={
        "status": InterviewStatus.COMPLETED,
        "evaluation_error": message,
    })


def pause(state: InterviewState) -> InterviewState:
    if state.status != InterviewStatus.IN_PROGRESS:
        return state
    return state.model_copy(update={"status": InterviewStatus.PAUSED})


def resume(state: InterviewState) -> InterviewState:
    if state.status != InterviewStatus.PAUSED:
        return state
    return state.model_copy(update={"status": InterviewStatus.IN_PROGRESS})


# ==================== Queries ====================

def current_question(state: InterviewState) -> Optional[Question]:
    if 0 <= state.current < len(state.questions):
        return state.questions[state.current]
    return None


def needs_auto_submit(state: InterviewState) -> bool:
    """True when the countdown of the active question has run out."""
    return (
        state.status == InterviewStatus.IN_PROGRESS
        and state.time_remaining == 0
        and current_question(state) is not None
    )


def needs_evaluation(state: InterviewState) -> bool:
    return (
        state.status == InterviewStatus.COMPLETED
        and state.final_score is None
        and state.evaluation_error is None
    )


def is_unfinished(state: InterviewState) -> bool:
    """A restored state the candidate may want to pick up again."""
    return bool(state.messages) and state.status not in (
        InterviewStatus.COMPLETED,
        InterviewStatus.EVALUATING,
    )
