"""
CRUD operations for Candidate, including the filtered dashboard listing.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional
from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session, contains_eager, joinedload
from app.models.candidate import Candidate, CandidateStatus, coerce_status
from app.models.match_analysis import MatchAnalysis


@dataclass
class CandidateFilters:
    """Listing filters. page is 1-based."""
    job_posting_id: Optional[int] = None
    search: Optional[str] = None
    min_score: Optional[float] = None
    max_score: Optional[float] = None
    status: Optional[CandidateStatus] = None
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def has_score_filter(self) -> bool:
        return self.min_score is not None or self.max_score is not None


@dataclass
class CandidatePage:
    candidates: List[Candidate]
    total: int
    has_more: bool


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def create(db: Session, candidate: Candidate) -> Candidate:
    """
    Persist a candidate on its own.

    Unknown status values are coerced to pending.
    """
    candidate.status = coerce_status(candidate.status)
    db.add(candidate)
    db.commit()
    db.refresh(candidate)
    return candidate


def get_by_id(db: Session, candidate_id: int) -> Optional[Candidate]:
    """Candidate with its analysis (if any) loaded."""
    return (
        db.query(Candidate)
        .options(joinedload(Candidate.analysis))
        .filter(Candidate.id == candidate_id)
        .first()
    )


def get_filtered(db: Session, filters: CandidateFilters) -> CandidatePage:
    """
    Ranked, filtered, paginated candidate listing.

    - search: case-insensitive substring of name, email or skills
    - min_score/max_score: bound the persisted match score; candidates with
      no analysis are dropped whenever either bound is set
    - order: match score (missing last), newest first, then id
    """
    query = db.query(Candidate).outerjoin(
        MatchAnalysis, MatchAnalysis.candidate_id == Candidate.id
    )

    if filters.job_posting_id is not None:
        query = query.filter(Candidate.job_posting_id == filters.job_posting_id)

    if filters.search:
        pattern = f"%{_escape_like(filters.search)}%"
        query = query.filter(
            or_(
                Candidate.name.ilike(pattern, escape="\\"),
                Candidate.email.ilike(pattern, escape="\\"),
                Candidate.skills_text.ilike(pattern, escape="\\"),
            )
        )

    if filters.status is not None:
        query = query.filter(Candidate.status == filters.status)

    if filters.min_score is not None:
        query = query.filter(MatchAnalysis.match_score >= filters.min_score)

    if filters.max_score is not None:
        query = query.filter(MatchAnalysis.match_score <= filters.max_score)

    total = query.count()

    # Past the last page; also keeps huge offsets out of the SQL
    if filters.offset >= total:
        return CandidatePage(candidates=[], total=total, has_more=False)

    candidates = (
        query.options(contains_eager(Candidate.analysis))
        .order_by(
            MatchAnalysis.match_score.desc().nullslast(),
            Candidate.created_at.desc(),
            Candidate.id.desc(),
        )
        .offset(filters.offset)
        .limit(filters.limit)
        .all()
    )

    return CandidatePage(
        candidates=candidates,
        total=total,
        has_more=filters.offset + filters.limit < total,
    )


def update_status(db: Session, candidate_id: int, status: CandidateStatus) -> Optional[Candidate]:
    """
    Set a candidate's workflow status.

    Returns:
        Updated candidate, or None if not found
    """
    candidate = get_by_id(db, candidate_id)
    if not candidate:
        return None

    candidate.status = status
    db.commit()
    db.refresh(candidate)
    return candidate


def update_notes(db: Session, candidate_id: int, interview_notes: Optional[str]) -> Optional[Candidate]:
    candidate = get_by_id(db, candidate_id)
    if not candidate:
        return None

    candidate.interview_notes = interview_notes
    db.commit()
    db.refresh(candidate)
    return candidate


def count_by_status(db: Session) -> Dict[str, int]:
    """Candidate counts for every status, including zeros."""
    counts = {status.value: 0 for status in CandidateStatus}
    rows = db.query(Candidate.status, func.count(Candidate.id)).group_by(Candidate.status).all()
    for status, total in rows:
        counts[coerce_status(status).value] = total
    return counts


def analysis_summary(db: Session) -> Dict[str, Optional[float]]:
    """Average match score and number of positive match decisions."""
    average, matched = db.query(
        func.avg(MatchAnalysis.match_score),
        func.count(case((MatchAnalysis.is_match.is_(True), 1))),
    ).one()
    return {
        "average_match_score": round(float(average), 1) if average is not None else None,
        "matched_candidates": matched or 0,
    }
