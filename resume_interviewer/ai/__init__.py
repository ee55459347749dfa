"""
AI components for the {SYSTEM_NAME} platform.

This package contains the prompt templates sent to the generation service.
"""

from resume_interviewer.ai.prompts.interview_prompts import (
    CANDIDATE_EXTRACTION_PROMPT,
    QUESTION_GENERATION_PROMPT,
    INTERVIEW_EVALUATION_PROMPT,
)

__all__ = [
    'CANDIDATE_EXTRACTION_PROMPT',
    'QUESTION_GENERATION_PROMPT',
    'INTERVIEW_EVALUATION_PROMPT',
]
