"""
Resume Interviewer Package.

This package provides tools for conducting resume-driven technical interviews.
"""

from resume_interviewer.utils.config import SYSTEM_NAME

__version__ = "0.1.0"
