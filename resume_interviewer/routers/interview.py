"""
FastAPI router for the interview lifecycle.

These endpoints move a session from ``uploaded`` through question generation
and answer collection to a final score.
"""
import logging

from fastapi import APIRouter, Depends, Request

from resume_interviewer.core.errors import NotFound, ValidationError
from resume_interviewer.models.api import (
    AnswerRequest,
    CandidateUpdateRequest,
    ErrorResponse,
    FinalizeRequest,
    FinalizeResponse,
    GenerateRequest,
    GenerateResponse,
    MessageResponse,
)
from resume_interviewer.models.session import Session, SessionStatus
from resume_interviewer.routers.dependencies import (
    get_interview_service,
    get_session_store,
    limiter,
    load_session,
    log_request_time,
)
from resume_interviewer.services.interview_service import InterviewService
from resume_interviewer.utils.constants import ERROR_QUESTIONS_LOCKED, RATE_LIMIT_GENERATION
from resume_interviewer.utils.session_store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/interview",
    tags=["interview"],
    dependencies=[Depends(log_request_time)],
)

_NOT_FOUND = {"description": "Session not found", "model": ErrorResponse}
_BAD_REQUEST = {"description": "Missing or invalid field", "model": ErrorResponse}


@router.patch(
    "/candidate",
    response_model=MessageResponse,
    responses={400: _BAD_REQUEST, 404: _NOT_FOUND},
)
async def update_candidate(
    payload: CandidateUpdateRequest,
    store: SessionStore = Depends(get_session_store),
):
    """Merge manually entered candidate details into the session."""
    session = load_session(store, payload.session_id)
    session.candidate = session.candidate.merged(payload.candidate_fields())
    store.save(session.id, session)
    logger.info(f"Updated candidate details for session {session.id}")
    return MessageResponse(message="Candidate updated")


@router.post(
    "/generate",
    response_model=GenerateResponse,
    response_model_by_alias=True,
    responses={
        400: _BAD_REQUEST,
        404: _NOT_FOUND,
        502: {"description": "Question generation failed", "model": ErrorResponse},
    },
)
@limiter.limit(RATE_LIMIT_GENERATION)
async def generate_questions(
    request: Request,
    payload: GenerateRequest,
    store: SessionStore = Depends(get_session_store),
    service: InterviewService = Depends(get_interview_service),
):
    """
    Generate questions from the session's resume and store them.

    Nothing is stored when generation fails. Once an answer exists the
    question list is fixed, so regeneration is refused.
    """
    session = load_session(store, payload.session_id)
    if session.answers or session.status not in (SessionStatus.UPLOADED, SessionStatus.READY):
        raise ValidationError(ERROR_QUESTIONS_LOCKED)
    questions = await service.generate_questions(session, payload.n)

    session.questions = questions
    session.advance_status(SessionStatus.READY)
    store.save(session.id, session)
    logger.info(f"Stored {len(questions)} questions for session {session.id}")
    return GenerateResponse(session_id=session.id, questions=questions)


@router.post(
    "/answer",
    response_model=MessageResponse,
    responses={400: _BAD_REQUEST, 404: {"description": "Session or question not found", "model": ErrorResponse}},
)
async def save_answer(
    payload: AnswerRequest,
    store: SessionStore = Depends(get_session_store),
):
    """Save (or overwrite) the answer to one question."""
    if not payload.question_id:
        raise ValidationError("questionId is required")
    session = load_session(store, payload.session_id)
    question = session.find_question(payload.question_id)
    if question is None:
        raise NotFound("question not found")

    session.record_answer(question, payload.answer)
    session.advance_status(SessionStatus.IN_PROGRESS)
    store.save(session.id, session)
    logger.info(f"Saved answer to question {question.id} for session {session.id}")
    return MessageResponse(message="Answer saved")


@router.post(
    "/finalize",
    response_model=FinalizeResponse,
    response_model_by_alias=True,
    responses={
        400: _BAD_REQUEST,
        404: _NOT_FOUND,
        502: {"description": "Evaluation failed", "model": ErrorResponse},
    },
)
@limiter.limit(RATE_LIMIT_GENERATION)
async def finalize_interview(
    request: Request,
    payload: FinalizeRequest,
    store: SessionStore = Depends(get_session_store),
    service: InterviewService = Depends(get_interview_service),
):
    """Score the interview and mark the session completed."""
    session = load_session(store, payload.session_id)
    evaluation = await service.summarize_session(session)

    session.final_score = evaluation.final_score
    session.summary = evaluation.summary
    session.advance_status(SessionStatus.COMPLETED)
    store.save(session.id, session)
    logger.info(f"Finalized session {session.id} with score {evaluation.final_score:g}")
    return FinalizeResponse(final_score=evaluation.final_score, summary=evaluation.summary)


@router.get(
    "/session/{session_id}",
    response_model=Session,
    response_model_by_alias=True,
    responses={404: _NOT_FOUND},
)
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
):
    """Get the full session record."""
    return load_session(store, session_id)
