from typing import Dict, Optional
from pydantic import BaseModel


class DashboardStats(BaseModel):
    """Headline numbers for the recruiter dashboard."""
    total_candidates: int
    candidates_by_status: Dict[str, int]
    average_match_score: Optional[float] = None
    matched_candidates: int
    total_job_postings: int
    active_job_posting_id: Optional[int] = None
