"""
Session data models for the Resume Interviewer platform.

This module defines the Pydantic models persisted by the session store and
returned by the API. Field names are snake_case in Python and camelCase on
the wire and in storage.
"""
from typing import Optional, Dict, List
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

from resume_interviewer.utils.constants import DIFFICULTY_DURATIONS, DEFAULT_MAX_SCORE


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Difficulty(str, Enum):
    """Question difficulty; determines the countdown duration."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def seconds(self) -> int:
        return DIFFICULTY_DURATIONS[self.value]


class SessionStatus(str, Enum):
    """Server-side progress of a session. Only ever moves forward."""
    UPLOADED = "uploaded"
    READY = "ready"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


_STATUS_ORDER = list(SessionStatus)


class CandidateInfo(BaseModel):
    """Closed candidate identity record. Unknown fields are dropped."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, description="Candidate full name")
    email: Optional[str] = Field(None, description="Candidate email address")
    phone: Optional[str] = Field(None, description="Candidate phone number")

    def merged(self, update: "CandidateInfo") -> "CandidateInfo":
        """Return a copy with every non-empty field of ``update`` applied."""
        changes = {k: v for k, v in update.model_dump().items() if v}
        return self.model_copy(update=changes)

    @property
    def is_complete(self) -> bool:
        return bool(self.name and self.email)


class Question(BaseModel):
    """A single interview question."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Question identifier")
    text: str = Field(..., description="Question text shown to the candidate")
    difficulty: Difficulty = Field(Difficulty.MEDIUM, description="Question difficulty")
    time_seconds: int = Field(..., ge=1, description="Countdown for this question in seconds")
    max_score: int = Field(DEFAULT_MAX_SCORE, alias="maxScore", description="Maximum score for this question")


class AnswerRecord(BaseModel):
    """The candidate's latest answer to one question."""
    model_config = ConfigDict(populate_by_name=True)

    question_id: str = Field(..., alias="questionId")
    question_text: str = Field("", alias="questionText")
    answer: str = Field("", description="Answer text, possibly empty on timeout")
    score: Optional[float] = Field(None, description="Per-question score, if any")
    feedback: Optional[str] = Field(None, description="Per-question feedback, if any")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")


class Session(BaseModel):
    """One candidate's end-to-end interview record."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Session identifier")
    candidate: CandidateInfo = Field(default_factory=CandidateInfo)
    resume_url: Optional[str] = Field(None, alias="resumeUrl")
    resume_text: str = Field("", alias="resumeText")
    questions: List[Question] = Field(default_factory=list)
    answers: Dict[str, AnswerRecord] = Field(default_factory=dict)
    final_score: Optional[float] = Field(None, alias="finalScore", ge=0, le=100)
    summary: Optional[str] = None
    status: SessionStatus = SessionStatus.UPLOADED
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")

    def find_question(self, question_id: str) -> Optional[Question]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def advance_status(self, status: SessionStatus) -> None:
        """Move the status forward; a regressing status is ignored."""
        if _STATUS_ORDER.index(status) > _STATUS_ORDER.index(self.status):
            self.status = status

    def record_answer(self, question: Question, answer: str) -> AnswerRecord:
        """Upsert the answer for ``question``; the latest write wins."""
        existing = self.answers.get(question.id)
        if existing is not None:
            existing.answer = answer
            return existing
        record = AnswerRecord(
            question_id=question.id,
            question_text=question.text,
            answer=answer,
        )
        self.answers[question.id] = record
        return record

    def to_document(self) -> dict:
        """Serialize to the JSON-safe form the stores persist."""
        return self.model_dump(by_alias=True, mode="json")


class Evaluation(BaseModel):
    """Final score and summary produced for a finished interview."""
    model_config = ConfigDict(populate_by_name=True)

    final_score: float = Field(..., alias="finalScore", ge=0, le=100)
    summary: str


class CandidateSummary(BaseModel):
    """Interviewer-facing listing row, derived on every list request."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str = ""
    phone: str = ""
    final_score: Optional[float] = Field(None, alias="finalScore")
    summary: Optional[str] = None
    status: SessionStatus = SessionStatus.UPLOADED
    created_at: datetime = Field(..., alias="createdAt")
