"""
Pydantic schemas for Candidate API requests/responses.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from app.core.config import settings
from app.models.candidate import CandidateStatus


class MatchAnalysisResponse(BaseModel):
    """Scores (0-100) and narrative for one candidate/job pair."""
    id: int
    candidate_id: int
    job_posting_id: int
    match_score: float
    skills_match: float
    experience_match: float
    education_match: float
    industry_match: float
    strengths: List[str] = []
    weaknesses: List[str] = []
    recommendation: Optional[str] = None
    detailed_analysis: Optional[str] = None
    is_match: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CandidateResponse(BaseModel):
    """Candidate profile extracted from a resume."""
    id: int
    job_posting_id: Optional[int] = None
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    summary: Optional[str] = None
    skills: List[str] = []
    experience: List[Dict[str, Any]] = []
    education: List[Dict[str, Any]] = []
    certifications: List[str] = []
    file_name: str
    status: CandidateStatus
    interview_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CandidateDetailResponse(CandidateResponse):
    """Candidate with its analysis, which may be absent."""
    raw_text: str
    analysis: Optional[MatchAnalysisResponse] = None


class CandidateListItem(CandidateResponse):
    analysis: Optional[MatchAnalysisResponse] = None


class CandidateListResponse(BaseModel):
    """One page of the ranked candidate listing."""
    candidates: List[CandidateListItem]
    total: int
    has_more: bool = Field(..., alias="hasMore")

    class Config:
        populate_by_name = True


class CandidateResult(BaseModel):
    candidate: CandidateResponse
    analysis: MatchAnalysisResponse


class UploadError(BaseModel):
    file_name: str = Field(..., alias="fileName")
    error: str

    class Config:
        populate_by_name = True


class BatchUploadResponse(BaseModel):
    """Per-file outcomes of a resume batch, in submission order within each list."""
    results: List[CandidateResult]
    errors: List[UploadError]


class StatusUpdate(BaseModel):
    status: CandidateStatus


class NotesUpdate(BaseModel):
    interview_notes: Optional[str] = Field(None, max_length=settings.MAX_NOTES_LENGTH)
