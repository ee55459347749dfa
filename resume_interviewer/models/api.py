"""
Request and response models for the Resume Interviewer HTTP API.
"""
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field

from resume_interviewer.models.session import CandidateInfo, Question
from resume_interviewer.utils.constants import DEFAULT_QUESTION_COUNT


class UploadResponse(BaseModel):
    session_id: str = Field(..., alias="sessionId", description="Newly created session ID")
    candidate: CandidateInfo = Field(..., description="Fields extracted from the resume")
    resume_url: Optional[str] = Field(None, alias="resumeUrl", description="Where the archived resume is served")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "sessionId": "0b8f3c7e-2f1d-4c1e-9a4b-7d2f0e5a1c33",
                "candidate": {"name": "Jane Doe", "email": "jane@example.com", "phone": "+1 555 0100"},
                "resumeUrl": "/resumes/0b8f3c7e-2f1d-4c1e-9a4b-7d2f0e5a1c33.pdf",
            }
        },
    )


class CandidateUpdateRequest(BaseModel):
    # sessionId is optional here so a missing value is answered with 400, not 422
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    session_id: Optional[str] = Field(None, alias="sessionId")
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    def candidate_fields(self) -> CandidateInfo:
        return CandidateInfo(name=self.name, email=self.email, phone=self.phone)


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(None, alias="sessionId")
    n: int = Field(DEFAULT_QUESTION_COUNT, ge=1, le=20, description="Number of questions to generate")


class GenerateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    questions: List[Question]


class AnswerRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(None, alias="sessionId")
    question_id: Optional[str] = Field(None, alias="questionId")
    answer: str = Field("", description="Answer text; empty when the timer ran out")


class FinalizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(None, alias="sessionId")


class FinalizeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    final_score: float = Field(..., alias="finalScore", ge=0, le=100)
    summary: str


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    detail: str = Field(..., description="Error details")

    model_config = ConfigDict(
        json_schema_extra={"example": {"detail": "session not found"}}
    )
