"""
Interviewer-facing read model: candidate summaries derived from sessions.
"""
from typing import Iterable, List

from resume_interviewer.models.session import CandidateSummary, Session
from resume_interviewer.utils.constants import UNKNOWN_CANDIDATE_NAME


def summarize_candidate(session: Session) -> CandidateSummary:
    """Project the display fields of one session."""
    candidate = session.candidate
    return CandidateSummary(
        id=session.id,
        name=candidate.name or UNKNOWN_CANDIDATE_NAME,
        email=candidate.email or "",
        phone=candidate.phone or "",
        final_score=session.final_score,
        summary=session.summary or None,
        status=session.status,
        created_at=session.created_at,
    )


def project_candidate_summaries(sessions: Iterable[Session]) -> List[CandidateSummary]:
    """
    Build the sorted candidate listing.

    Scored sessions come first, highest score first; unscored sessions follow,
    newest first. Equal keys fall back to ascending id so the order does not
    depend on how the store happened to return the sessions.
    """
    summaries = sorted((summarize_candidate(s) for s in sessions), key=lambda s: s.id)
    # successive stable sorts: the id order above survives as the last tie-break
    unscored = [s for s in summaries if s.final_score is None]
    scored = [s for s in summaries if s.final_score is not None]
    scored.sort(key=lambda s: s.final_score, reverse=True)
    unscored.sort(key=lambda s: s.created_at, reverse=True)
    return scored + unscored
