"""
Dashboard summary endpoint.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app import crud
from app.core.database import get_db
from app.schemas.dashboard import DashboardStats

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(db: Session = Depends(get_db)):
    """Candidate counts per status, score summary and job posting totals."""
    by_status = crud.candidate.count_by_status(db)
    summary = crud.candidate.analysis_summary(db)
    active = crud.job_posting.get_active(db)

    return DashboardStats(
        total_candidates=sum(by_status.values()),
        candidates_by_status=by_status,
        average_match_score=summary["average_match_score"],
        matched_candidates=summary["matched_candidates"],
        total_job_postings=crud.job_posting.count(db),
        active_job_posting_id=active.id if active else None,
    )
