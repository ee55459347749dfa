"""
FastAPI routers for the Resume Interviewer platform.

This module contains FastAPI routers for organizing API endpoints
into logical groups.
"""

from . import candidates, interview, resume

__all__ = ["candidates", "interview", "resume"]
