"""
Resume intake for the Resume Interviewer platform.

Extracts text from an uploaded resume, archives the file where the server
serves it from, pulls out the candidate's details and creates the session.
"""
import os
import uuid
import shutil
import asyncio
import logging
from typing import Optional

import pdfplumber
from docx import Document

from resume_interviewer.core.errors import StorageUnavailable, ValidationError
from resume_interviewer.models.session import Session, SessionStatus
from resume_interviewer.services.interview_service import InterviewService
from resume_interviewer.utils.config import get_upload_config
from resume_interviewer.utils.constants import ALLOWED_RESUME_EXTENSIONS, RESUME_URL_PREFIX
from resume_interviewer.utils.session_store import SessionStore

logger = logging.getLogger(__name__)


def resume_extension(filename: Optional[str], content_type: Optional[str] = None) -> str:
    """
    Work out which supported format an upload is in.

    Raises:
        ValidationError: The file is neither PDF, DOCX nor plain text
    """
    ext = os.path.splitext(filename or "")[1].lower()
    if ext in ALLOWED_RESUME_EXTENSIONS:
        return ext
    if content_type == "application/pdf":
        return ".pdf"
    if content_type and "wordprocessingml" in content_type:
        return ".docx"
    if content_type and content_type.startswith("text/"):
        return ".txt"
    raise ValidationError(f"Unsupported resume type: {filename or content_type}. Upload a PDF, DOCX or TXT file.")


def _extract_pdf(filepath: str) -> str:
    text_parts = []
    with pdfplumber.open(filepath) as pdf:
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
    return "\n".join(text_parts)


def _extract_docx(filepath: str) -> str:
    doc = Document(filepath)
    return "\n".join(para.text for para in doc.paragraphs if para.text.strip())


def extract_text_from_file(filepath: str, ext: str) -> str:
    """
    Extract plain text from a resume file.

    Args:
        filepath: Path to the file
        ext: One of the supported extensions

    Raises:
        ValidationError: The file cannot be read as the given format, or holds no text
    """
    try:
        if ext == ".pdf":
            text = _extract_pdf(filepath)
        elif ext == ".docx":
            text = _extract_docx(filepath)
        else:
            with open(filepath, "r", encoding="utf-8", errors="ignore") as f:
                text = f.read()
    except Exception as e:
        logger.error(f"Error extracting text from {filepath}: {e}")
        raise ValidationError(f"Could not read the resume file: {e}") from e

    text = text.strip()
    if not text:
        raise ValidationError("No text could be extracted from the resume")
    return text


def archive_resume(filepath: str, session_id: str, ext: str, storage_dir: str) -> str:
    """
    Copy the uploaded file into the served resume directory.

    Returns:
        The URL path the archived resume is served under
    """
    filename = f"{session_id}{ext}"
    try:
        os.makedirs(storage_dir, exist_ok=True)
        shutil.copyfile(filepath, os.path.join(storage_dir, filename))
    except OSError as e:
        logger.error(f"Error archiving resume for session {session_id}: {e}")
        raise StorageUnavailable(f"Cannot store the resume file: {e}") from e
    return f"{RESUME_URL_PREFIX}/{filename}"


def remove_archived_resume(session_id: str, ext: str, storage_dir: str) -> None:
    """Delete an archived resume whose session was never stored."""
    path = os.path.join(storage_dir, f"{session_id}{ext}")
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error(f"Error removing orphaned resume {path}: {e}")


class ResumeService:
    """Turns an uploaded resume file into a new session."""

    def __init__(
        self,
        store: SessionStore,
        interview_service: InterviewService,
        storage_dir: Optional[str] = None,
    ):
        self.store = store
        self.interview_service = interview_service
        self.storage_dir = storage_dir or get_upload_config()["storage_dir"]

    async def create_session(
        self,
        filepath: str,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> Session:
        """
        Create and persist a session from an uploaded resume.

        Args:
            filepath: Temporary path of the uploaded file (the caller removes it)
            filename: Original filename
            content_type: Declared MIME type

        Returns:
            The new session, status ``uploaded``
        """
        ext = resume_extension(filename, content_type)
        resume_text = await asyncio.to_thread(extract_text_from_file, filepath, ext)
        candidate = await self.interview_service.extract_candidate_fields(resume_text)

        session_id = str(uuid.uuid4())
        resume_url = archive_resume(filepath, session_id, ext, self.storage_dir)
        session = Session(
            id=session_id,
            candidate=candidate,
            resume_url=resume_url,
            resume_text=resume_text,
            status=SessionStatus.UPLOADED,
        )
        try:
            self.store.save(session_id, session)
        except Exception:
            remove_archived_resume(session_id, ext, self.storage_dir)
            raise
        logger.info(f"Created session {session_id} from resume {filename}")
        return session
