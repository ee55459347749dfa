"""
Shared dependencies for the Resume Interviewer routers.
"""
import logging
from datetime import datetime

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from resume_interviewer.core.errors import NotFound, StorageUnavailable, ValidationError
from resume_interviewer.models.session import Session
from resume_interviewer.services.interview_service import InterviewService
from resume_interviewer.services.resume_service import ResumeService
from resume_interviewer.utils.config import RATE_LIMIT_ENABLED
from resume_interviewer.utils.constants import ERROR_SESSION_ID_REQUIRED, ERROR_SESSION_NOT_FOUND
from resume_interviewer.utils.session_store import SessionStore

logger = logging.getLogger(__name__)

# Shared rate limiter; the app registers it on app.state
limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)


async def log_request_time(request: Request):
    """Log request timing for HTTP endpoints."""
    request.state.start_time = datetime.now()
    yield
    process_time = (datetime.now() - request.state.start_time).total_seconds() * 1000
    logger.info(f"Request to {request.url.path} took {process_time:.2f}ms")


def get_session_store(request: Request) -> SessionStore:
    """Dependency to get the session store from app state."""
    store = getattr(request.app.state, "session_store", None)
    if store is None:
        raise StorageUnavailable("Session store not initialized")
    return store


def get_interview_service(request: Request) -> InterviewService:
    """Dependency to get the question/scoring service from app state."""
    return request.app.state.interview_service


def get_resume_service(request: Request) -> ResumeService:
    """Dependency to get the resume intake service from app state."""
    return request.app.state.resume_service


def load_session(store: SessionStore, session_id: str) -> Session:
    """
    Fetch a session or fail with the matching API error.

    Raises:
        ValidationError: No session id was given
        NotFound: The session does not exist
    """
    if not session_id:
        raise ValidationError(ERROR_SESSION_ID_REQUIRED)
    session = store.get(session_id)
    if session is None:
        raise NotFound(ERROR_SESSION_NOT_FOUND)
    return session
