"""
FastAPI router for the interviewer dashboard.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends

from resume_interviewer.core.errors import NotFound
from resume_interviewer.core.summary import project_candidate_summaries
from resume_interviewer.models.api import ErrorResponse, MessageResponse
from resume_interviewer.models.session import CandidateSummary, Session
from resume_interviewer.routers.dependencies import get_session_store, load_session, log_request_time
from resume_interviewer.utils.constants import ERROR_SESSION_NOT_FOUND
from resume_interviewer.utils.session_store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/candidates",
    tags=["candidates"],
    dependencies=[Depends(log_request_time)],
)


@router.get(
    "",
    response_model=List[CandidateSummary],
    response_model_by_alias=True,
    responses={503: {"description": "Session store unavailable", "model": ErrorResponse}},
)
async def list_candidates(store: SessionStore = Depends(get_session_store)):
    """
    List every candidate, best scores first.

    Scored candidates are ordered by final score, then unscored candidates by
    most recent upload.
    """
    return project_candidate_summaries(store.list())


@router.get(
    "/{session_id}",
    response_model=Session,
    response_model_by_alias=True,
    responses={404: {"description": "Session not found", "model": ErrorResponse}},
)
async def get_candidate(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Get one candidate's full session."""
    return load_session(store, session_id)


@router.delete(
    "/{session_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Session not found", "model": ErrorResponse}},
)
async def delete_candidate(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Delete a candidate's session."""
    if not store.delete(session_id):
        raise NotFound(ERROR_SESSION_NOT_FOUND)
    logger.info(f"Deleted session {session_id}")
    return MessageResponse(message="Candidate deleted")
