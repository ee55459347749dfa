"""
Service layer for the Resume Interviewer platform.

This module contains business logic services that handle core functionality
of the application.
"""

from .gemini_client import GeminiClient
from .interview_service import InterviewService
from .resume_service import ResumeService
from .api_client import InterviewApiClient

__all__ = [
    "GeminiClient",
    "InterviewService",
    "ResumeService",
    "InterviewApiClient",
]
