"""
HTTP client for the Resume Interviewer API.

Used by the terminal candidate client and the interviewer commands. HTTP
failures are mapped back onto the same error taxonomy the server raises.
"""
import os
import logging
import mimetypes
from typing import Dict, List, Optional, Type, Any

import httpx

from resume_interviewer.core.errors import (
    InterviewError,
    NotFound,
    ServiceUnavailable,
    StorageUnavailable,
    ValidationError,
)
from resume_interviewer.models.api import FinalizeResponse, UploadResponse
from resume_interviewer.models.session import CandidateInfo, CandidateSummary, Question, Session

logger = logging.getLogger(__name__)

_STATUS_ERRORS: Dict[int, Type[InterviewError]] = {
    400: ValidationError,
    404: NotFound,
    503: StorageUnavailable,
}


class InterviewApiClient:
    """Async client for the interview HTTP API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Root URL of the API server
            timeout: Per-request timeout in seconds
            transport: Optional transport (tests pass an ASGI transport)
        """
        self.base_url = base_url
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ServiceUnavailable(f"Cannot reach the interview API: {e}") from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = (body.get("detail") if isinstance(body, dict) else None) or response.text
            error_class = _STATUS_ERRORS.get(response.status_code, ServiceUnavailable)
            logger.warning(f"{method} {path} returned {response.status_code}: {detail}")
            raise error_class(str(detail))
        return response.json()

    async def upload_resume(self, file_path: str) -> UploadResponse:
        filename = os.path.basename(file_path)
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        with open(file_path, "rb") as f:
            data = await self._request(
                "POST", "/api/resume/upload", files={"file": (filename, f.read(), content_type)}
            )
        return UploadResponse.model_validate(data)

    async def update_candidate(self, session_id: str, candidate: CandidateInfo) -> str:
        body = {"sessionId": session_id, **candidate.model_dump(exclude_none=True)}
        data = await self._request("PATCH", "/api/interview/candidate", json=body)
        return data.get("message", "")

    async def generate_questions(self, session_id: str, n: Optional[int] = None) -> List[Question]:
        body: Dict[str, Any] = {"sessionId": session_id}
        if n is not None:
            body["n"] = n
        data = await self._request("POST", "/api/interview/generate", json=body)
        return [Question.model_validate(q) for q in data.get("questions", [])]

    async def save_answer(self, session_id: str, question_id: str, answer: str) -> None:
        await self._request(
            "POST",
            "/api/interview/answer",
            json={"sessionId": session_id, "questionId": question_id, "answer": answer},
        )

    async def finalize(self, session_id: str) -> FinalizeResponse:
        data = await self._request("POST", "/api/interview/finalize", json={"sessionId": session_id})
        return FinalizeResponse.model_validate(data)

    async def get_session(self, session_id: str) -> Session:
        data = await self._request("GET", f"/api/interview/session/{session_id}")
        return Session.model_validate(data)

    async def list_candidates(self) -> List[CandidateSummary]:
        data = await self._request("GET", "/api/candidates")
        return [CandidateSummary.model_validate(row) for row in data]

    async def get_candidate(self, session_id: str) -> Session:
        data = await self._request("GET", f"/api/candidates/{session_id}")
        return Session.model_validate(data)

    async def delete_candidate(self, session_id: str) -> None:
        await self._request("DELETE", f"/api/candidates/{session_id}")

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
