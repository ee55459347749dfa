"""
FastAPI router for resume upload.
"""
import os
import logging
import tempfile
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile

from resume_interviewer.core.errors import ValidationError
from resume_interviewer.models.api import ErrorResponse, UploadResponse
from resume_interviewer.routers.dependencies import get_resume_service, limiter, log_request_time
from resume_interviewer.services.resume_service import ResumeService, resume_extension
from resume_interviewer.utils.config import get_upload_config
from resume_interviewer.utils.constants import ERROR_NO_FILE, RATE_LIMIT_UPLOAD

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resume", tags=["resume"])

CHUNK_SIZE = 1024 * 1024


async def _spool_upload(file: UploadFile, fd: int, max_bytes: int) -> int:
    """Write an upload to an open temporary file, enforcing the size limit."""
    written = 0
    with os.fdopen(fd, "wb") as out:
        while True:
            chunk = await file.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > max_bytes:
                # the caller's finally removes the partial file
                raise ValidationError(f"Resume file exceeds the {max_bytes} byte limit")
            out.write(chunk)
    return written


@router.post(
    "/upload",
    response_model=UploadResponse,
    response_model_by_alias=True,
    responses={
        400: {"description": "No file or unsupported file type", "model": ErrorResponse},
        502: {"description": "Generation service error", "model": ErrorResponse},
        503: {"description": "Session store unavailable", "model": ErrorResponse},
    },
    dependencies=[Depends(log_request_time)],
)
@limiter.limit(RATE_LIMIT_UPLOAD)
async def upload_resume(
    request: Request,
    file: Optional[UploadFile] = File(None),
    resume_service: ResumeService = Depends(get_resume_service),
):
    """
    Upload a resume and create a new interview session.

    The candidate's name, email and phone are extracted from the resume; any
    that cannot be found come back empty for the client to collect.
    """
    if file is None or not file.filename:
        raise ValidationError(ERROR_NO_FILE)

    tmp_path = None
    try:
        ext = resume_extension(file.filename, file.content_type)
        upload_config = get_upload_config()
        os.makedirs(upload_config["tmp_dir"], exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix="upload-", suffix=ext, dir=upload_config["tmp_dir"])
        size = await _spool_upload(file, fd, upload_config["max_bytes"])
        logger.info(f"Received resume {file.filename} ({size} bytes)")
        session = await resume_service.create_session(tmp_path, file.filename, file.content_type)
    finally:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        await file.close()

    return UploadResponse(
        session_id=session.id,
        candidate=session.candidate,
        resume_url=session.resume_url,
    )
