"""
Transcript utilities for Resume Interviewer.

This module provides functionality for working with interview transcripts,
including formatting them for the evaluation prompt, for display and saving
them to disk.
"""
import os
import logging
from typing import Optional

from resume_interviewer.models.session import Session

logger = logging.getLogger(__name__)


def format_transcript_for_prompt(session: Session) -> str:
    """
    Format the question/answer pairs of a session, in question order.

    Questions without a saved answer are included with an empty answer so the
    evaluator sees what was skipped.
    """
    blocks = []
    for question in session.questions:
        record = session.answers.get(question.id)
        answer = record.answer if record else ""
        blocks.append(
            f"Question ({question.difficulty.value}): {question.text}\nAnswer: {answer}"
        )
    return "\n\n".join(blocks)


def format_transcript_for_display(session: Session) -> str:
    """
    Format a session for reading in a terminal.

    Args:
        session: Session to format

    Returns:
        Formatted transcript as a string
    """
    name = session.candidate.name or "Unknown"
    formatted = "INTERVIEW TRANSCRIPT\n"
    formatted += "====================\n"
    formatted += f"Candidate: {name}\n"
    formatted += f"Email: {session.candidate.email or '-'}\n"
    formatted += f"Phone: {session.candidate.phone or '-'}\n"
    formatted += f"Status: {session.status.value}\n"
    formatted += f"Created: {session.created_at.strftime('%Y-%m-%d %H:%M:%S')}\n"
    if session.final_score is not None:
        formatted += f"Final score: {session.final_score:g}/100\n"
    if session.summary:
        formatted += f"Summary: {session.summary}\n"
    formatted += "\n"

    for number, question in enumerate(session.questions, start=1):
        record = session.answers.get(question.id)
        formatted += f"Q{number} [{question.difficulty.value}, {question.time_seconds}s]: {question.text}\n"
        if record is None:
            formatted += "A: (not answered)\n\n"
        else:
            formatted += f"A: {record.answer or '(no answer)'}\n\n"

    return formatted


def save_transcript_to_file(
    session: Session,
    filename: Optional[str] = None,
    directory: str = "transcripts"
) -> str:
    """
    Save a session transcript to a text file.

    Args:
        session: Session to save
        filename: Optional filename (defaults to the session id)
        directory: Directory to save the transcript in

    Returns:
        Path to the saved transcript file
    """
    # Create directory if it doesn't exist
    if not os.path.exists(directory):
        os.makedirs(directory)
        logger.info(f"Created directory {directory}")

    filepath = os.path.join(directory, filename or f"interview_{session.id}.txt")
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(format_transcript_for_display(session))

    logger.info(f"Saved transcript to {filepath}")
    return filepath
