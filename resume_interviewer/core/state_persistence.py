"""
Persistence adapter for the client interview state.

The candidate client saves its ``InterviewState`` after every mutation and
restores it at startup, so an interrupted interview can be picked up again.
"""
import os
import json
import logging
import tempfile
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from resume_interviewer.core.interview_state import InterviewState

logger = logging.getLogger(__name__)


class StateFileStore:
    """Keeps one ``InterviewState`` as a JSON file."""

    def __init__(self, path: str):
        self.path = os.path.abspath(os.path.expanduser(path))

    def load(self) -> Optional[InterviewState]:
        """
        Restore the saved state.

        Returns:
            The saved state, or None if there is none or it cannot be read
        """
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return InterviewState.model_validate(json.load(f))
        except (OSError, ValueError, PydanticValidationError) as e:
            logger.warning(f"Ignoring unreadable interview state at {self.path}: {e}")
            return None

    def save(self, state: InterviewState) -> None:
        directory = os.path.dirname(self.path)
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".state-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(state.model_dump_json(by_alias=True, indent=2))
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
            logger.info(f"Cleared interview state at {self.path}")
