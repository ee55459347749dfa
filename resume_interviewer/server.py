"""
FastAPI server for the Resume Interviewer platform.

This module provides the REST API used by the candidate client and the
interviewer dashboard.
"""
import os
import logging
import contextlib
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from resume_interviewer import __version__
from resume_interviewer import config_api
from resume_interviewer.core.errors import InterviewError, StorageUnavailable
from resume_interviewer.models.api import ErrorResponse, MessageResponse
from resume_interviewer.routers import candidates, interview, resume
from resume_interviewer.routers.dependencies import get_session_store, limiter, log_request_time
from resume_interviewer.services.interview_service import InterviewService
from resume_interviewer.services.resume_service import ResumeService
from resume_interviewer.utils.config import (
    ALLOWED_ORIGINS,
    PING_MESSAGE,
    SERVER_HOST,
    SERVER_PORT,
    SYSTEM_NAME,
    get_upload_config,
    log_config,
)
from resume_interviewer.utils.constants import RESUME_URL_PREFIX
from resume_interviewer.utils.session_store import SessionStore, create_session_store

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app_instance: FastAPI):
    """
    Lifespan context manager for FastAPI app.

    Builds the session store and services unless they were injected, and
    closes whatever it built on shutdown.
    """
    log_config()
    owned_store = None
    if getattr(app_instance.state, "session_store", None) is None:
        owned_store = create_session_store()
        app_instance.state.session_store = owned_store
    if getattr(app_instance.state, "interview_service", None) is None:
        app_instance.state.interview_service = InterviewService()
    if getattr(app_instance.state, "resume_service", None) is None:
        app_instance.state.resume_service = ResumeService(
            app_instance.state.session_store,
            app_instance.state.interview_service,
        )
    logger.info(f"{SYSTEM_NAME} started with {app_instance.state.session_store.backend_name} session store")

    yield

    if owned_store is not None:
        owned_store.close()
        logger.info("Session store closed")


def create_app(
    store: Optional[SessionStore] = None,
    interview_service: Optional[InterviewService] = None,
    resume_service: Optional[ResumeService] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        store: Session store to use instead of the configured one
        interview_service: Question/scoring service to use instead of the default
        resume_service: Resume intake service to use instead of the default

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title=f"{SYSTEM_NAME} API",
        description="""
        REST API for resume-driven technical interviews.

        ## Features

        * Resume upload with candidate detail extraction
        * Question generation tailored to the resume
        * Answer collection and final scoring
        * Candidate listing for interviewers
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.state.session_store = store
    app.state.interview_service = interview_service
    if resume_service is None and store is not None and interview_service is not None:
        resume_service = ResumeService(store, interview_service)
    app.state.resume_service = resume_service

    # Add rate limiter exception handler
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials="*" not in ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InterviewError)
    async def interview_error_handler(request: Request, exc: InterviewError):
        if exc.http_status >= 500:
            logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc}")
        else:
            logger.info(f"{exc.__class__.__name__} on {request.url.path}: {exc}")
        return JSONResponse(status_code=exc.http_status, content={"detail": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            detail = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
        else:
            detail = "Invalid request"
        return JSONResponse(status_code=400, content={"detail": detail})

    # Exception handler for general exceptions
    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "An internal server error occurred. Please try again later."}
        )

    app.include_router(resume.router)
    app.include_router(interview.router)
    app.include_router(candidates.router)
    app.include_router(config_api.router)

    @app.get(
        "/api/health",
        responses={503: {"description": "Session store unreachable", "model": ErrorResponse}},
        dependencies=[Depends(log_request_time)],
    )
    async def health_check(store: SessionStore = Depends(get_session_store)):
        """Report whether the session store is reachable."""
        if not store.ping():
            raise StorageUnavailable(f"{store.backend_name} session store is unreachable")
        return {"status": "ok", "store": store.backend_name, "version": __version__}

    @app.get("/api/ping", response_model=MessageResponse)
    async def ping():
        return MessageResponse(message=PING_MESSAGE)

    storage_dir = get_upload_config()["storage_dir"]
    os.makedirs(storage_dir, exist_ok=True)
    app.mount(RESUME_URL_PREFIX, StaticFiles(directory=storage_dir), name="resumes")

    return app


app = create_app()


def start_server(host: str = SERVER_HOST, port: int = SERVER_PORT, reload: bool = False):
    """
    Start the FastAPI server.

    Args:
        host: Host to bind the server to
        port: Port to bind the server to
        reload: Restart on code changes
    """
    import uvicorn

    # Configure Uvicorn logging
    uvicorn_log_config = uvicorn.config.LOGGING_CONFIG
    uvicorn_log_config["formatters"]["access"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    uvicorn_log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

    uvicorn.run(
        "resume_interviewer.server:app" if reload else app,
        host=host,
        port=port,
        reload=reload,
        log_config=uvicorn_log_config,
    )
