"""
Question generation and scoring for the Resume Interviewer platform.

This module turns sessions into prompts for the generation service and turns
the generated text back into validated questions, candidate details and final
evaluations. Malformed output fails loudly with a typed error: questions and
scores are never made up.
"""
import re
import math
import uuid
import logging
from typing import Any, Dict, List, Optional

from resume_interviewer.ai.prompts.interview_prompts import (
    CANDIDATE_EXTRACTION_PROMPT,
    INTERVIEW_EVALUATION_PROMPT,
    QUESTION_GENERATION_PROMPT,
)
from resume_interviewer.core.errors import (
    EvaluationFailed,
    InterviewError,
    QuestionGenerationFailed,
    ServiceResponseMalformed,
    ServiceUnavailable,
)
from resume_interviewer.models.session import CandidateInfo, Difficulty, Evaluation, Question, Session
from resume_interviewer.services.gemini_client import GeminiClient
from resume_interviewer.utils.config import get_llm_config
from resume_interviewer.utils.constants import (
    DEFAULT_DIFFICULTY,
    DEFAULT_MAX_SCORE,
    DEFAULT_QUESTION_COUNT,
    MAX_FINAL_SCORE,
    MIN_FINAL_SCORE,
)
from resume_interviewer.utils.json_utils import extract_json
from resume_interviewer.utils.profiling import timed_function
from resume_interviewer.utils.transcript import format_transcript_for_prompt

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
PHONE_PATTERN = re.compile(r"\+?\d[\d\s().-]{6,}\d")


def difficulty_plan(count: int) -> Dict[str, int]:
    """Split ``count`` questions evenly across difficulties, easiest first."""
    base, remainder = divmod(count, 3)
    plan = {"easy": base, "medium": base, "hard": base}
    for level in ("easy", "medium")[:remainder]:
        plan[level] += 1
    return plan


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def normalize_question(item: Any, seen_ids: set) -> Optional[Question]:
    """
    Build a Question from one generated item, filling defaults.

    Returns None for items that carry no question text.
    """
    if isinstance(item, str):
        item = {"text": item}
    if not isinstance(item, dict):
        return None

    text = item.get("text") or item.get("question")
    text = text.strip() if isinstance(text, str) else ""
    if not text:
        return None

    raw_difficulty = str(item.get("difficulty") or "").strip().lower()
    try:
        difficulty = Difficulty(raw_difficulty)
    except ValueError:
        difficulty = Difficulty(DEFAULT_DIFFICULTY)

    question_id = str(item.get("id") or "").strip()
    if not question_id or question_id in seen_ids:
        question_id = str(uuid.uuid4())
    seen_ids.add(question_id)

    return Question(
        id=question_id,
        text=text,
        difficulty=difficulty,
        # the client countdown is keyed on difficulty, so the stored duration follows it
        time_seconds=difficulty.seconds,
        max_score=_positive_int(item.get("maxScore")) or DEFAULT_MAX_SCORE,
    )


def parse_questions(raw: str, desired_count: int) -> List[Question]:
    """
    Parse generated text into questions.

    Raises:
        ValueError: The text holds no usable question list
    """
    parsed = extract_json(raw, ("[", "{"))
    if isinstance(parsed, dict):
        parsed = parsed.get("questions")
    if not isinstance(parsed, list):
        raise ValueError("expected a JSON array of questions")

    seen_ids: set = set()
    questions = [q for q in (normalize_question(item, seen_ids) for item in parsed) if q is not None]
    if not questions:
        raise ValueError("no question in the generated list has text")
    return questions[:desired_count]


def parse_evaluation(raw: str) -> Evaluation:
    """
    Parse generated text into a final score and summary.

    Raises:
        ValueError: The object is missing, lacks a key or has an unusable score
    """
    parsed = extract_json(raw, ("{",))
    if not isinstance(parsed, dict):
        raise ValueError("expected a JSON object")
    missing = [key for key in ("finalScore", "summary") if key not in parsed]
    if missing:
        raise ValueError(f"missing key(s): {', '.join(missing)}")

    score = parsed["finalScore"]
    if isinstance(score, bool):
        raise ValueError("finalScore is not a number")
    try:
        score = float(score)
    except (TypeError, ValueError):
        raise ValueError(f"finalScore is not a number: {score!r}")
    if math.isnan(score) or math.isinf(score):
        raise ValueError("finalScore is not a finite number")

    summary = parsed["summary"]
    if not isinstance(summary, str) or not summary.strip():
        raise ValueError("summary is empty")

    score = min(MAX_FINAL_SCORE, max(MIN_FINAL_SCORE, score))
    return Evaluation(final_score=score, summary=summary.strip())


def extract_fields_from_text(resume_text: str) -> CandidateInfo:
    """Pull candidate details straight out of the resume text."""
    email = EMAIL_PATTERN.search(resume_text)
    phone = PHONE_PATTERN.search(resume_text)
    name_line = next((line.strip() for line in resume_text.splitlines() if len(line.strip()) > 3), "")
    return CandidateInfo(
        name=name_line or None,
        email=email.group(0) if email else None,
        phone=phone.group(0).strip() if phone else None,
    )


class InterviewService:
    """Coordinates prompts and parsing around the generation service."""

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ):
        """
        Initialize the service.

        Args:
            client: Generation adapter (defaults to a configured GeminiClient)
            temperature: Sampling temperature for questions and scoring
            max_output_tokens: Token bound for every call
        """
        llm_config = get_llm_config()
        self.client = client or GeminiClient()
        self.temperature = llm_config["temperature"] if temperature is None else temperature
        self.max_output_tokens = max_output_tokens or llm_config["max_output_tokens"]

    @timed_function(log_level=logging.INFO)
    async def extract_candidate_fields(self, resume_text: str) -> CandidateInfo:
        """
        Extract name, email and phone from a resume.

        Falls back to scanning the resume text directly when the service
        fails or answers with something unparseable.
        """
        if not resume_text.strip():
            return CandidateInfo()

        prompt = CANDIDATE_EXTRACTION_PROMPT.format(resume_text=resume_text)
        try:
            raw = await self.client.generate(prompt, 0.0, self.max_output_tokens)
            parsed = extract_json(raw, ("{",))
            if not isinstance(parsed, dict):
                raise ValueError("expected a JSON object")
        except (InterviewError, ValueError) as e:
            logger.warning(f"Candidate extraction via service failed, scanning resume text: {e}")
            return extract_fields_from_text(resume_text)

        return CandidateInfo(
            name=str(parsed.get("name") or "").strip().title() or None,
            email=str(parsed.get("email") or "").strip() or None,
            phone=str(parsed.get("phone") or "").strip() or None,
        )

    @timed_function(log_level=logging.INFO)
    async def generate_questions(self, session: Session, desired_count: int = DEFAULT_QUESTION_COUNT) -> List[Question]:
        """
        Generate interview questions from the session's resume.

        Args:
            session: Session whose resume text is used
            desired_count: Number of questions to ask for

        Returns:
            Ordered list of questions

        Raises:
            QuestionGenerationFailed: The service failed or returned no usable questions
        """
        plan = difficulty_plan(desired_count)
        prompt = QUESTION_GENERATION_PROMPT.format(
            count=desired_count,
            easy_count=plan["easy"],
            medium_count=plan["medium"],
            hard_count=plan["hard"],
            resume_text=session.resume_text,
        )
        logger.info(f"Generating {desired_count} questions for session {session.id}")

        try:
            raw = await self.client.generate(prompt, self.temperature, self.max_output_tokens)
        except (ServiceUnavailable, ServiceResponseMalformed) as e:
            raise QuestionGenerationFailed(f"Question generation failed: {e}") from e

        try:
            questions = parse_questions(raw, desired_count)
        except ValueError as e:
            logger.error(f"Unusable question list for session {session.id}: {e}")
            raise QuestionGenerationFailed(f"Question generation returned unusable output: {e}") from e

        if len(questions) < desired_count:
            logger.warning(f"Asked for {desired_count} questions, got {len(questions)}")
        return questions

    @timed_function(log_level=logging.INFO)
    async def summarize_session(self, session: Session) -> Evaluation:
        """
        Score a finished interview.

        Args:
            session: Session with questions and answers

        Returns:
            Final score in [0, 100] and a short summary

        Raises:
            EvaluationFailed: The service failed or the response was unusable
        """
        prompt = INTERVIEW_EVALUATION_PROMPT.format(
            resume_text=session.resume_text,
            transcript=format_transcript_for_prompt(session),
        )
        logger.info(f"Evaluating session {session.id}")

        try:
            raw = await self.client.generate(prompt, self.temperature, self.max_output_tokens)
        except (ServiceUnavailable, ServiceResponseMalformed) as e:
            raise EvaluationFailed(f"Evaluation failed: {e}") from e

        try:
            return parse_evaluation(raw)
        except ValueError as e:
            logger.error(f"Unusable evaluation for session {session.id}: {e}")
            raise EvaluationFailed(f"Evaluation returned unusable output: {e}") from e
