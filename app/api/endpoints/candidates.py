"""
API endpoints for candidates.

Handles resume batch uploads, the ranked dashboard listing and recruiter
actions (status and interview notes).
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session
from app import crud
from app.api.uploads import to_uploaded_file
from app.core.api_rate_limiter import check_upload_rate_limit
from app.core.config import settings
from app.core.database import get_db
from app.crud.candidate import CandidateFilters
from app.models.candidate import CandidateStatus
from app.schemas.candidate import (
    BatchUploadResponse,
    CandidateDetailResponse,
    CandidateListItem,
    CandidateListResponse,
    CandidateResponse,
    CandidateResult,
    MatchAnalysisResponse,
    NotesUpdate,
    StatusUpdate,
    UploadError,
)
from app.services import match_pipeline

router = APIRouter(prefix="/candidates", tags=["Candidates"])
logger = logging.getLogger(__name__)


@router.post("/upload", response_model=BatchUploadResponse, dependencies=[Depends(check_upload_rate_limit)])
async def upload_resumes(
    files: List[UploadFile] = File(...),
    job_id: Optional[int] = Form(None),
    db: Session = Depends(get_db)
):
    """
    Upload a batch of resumes (PDF or DOCX) and score each against a job.

    Files are processed one after another. A file that fails (wrong type,
    too large, unparseable, AI error) is reported under `errors` and does not
    stop the rest of the batch.

    Args:
        files: 1 to MAX_CANDIDATE_FILES resume files
        job_id: Job posting to score against; defaults to the active one

    Raises:
        HTTPException 400: Too many files, or no job given and none active
        HTTPException 404: If job_id does not exist
    """
    if not files:
        raise HTTPException(status_code=400, detail="No files uploaded")
    if len(files) > settings.MAX_CANDIDATE_FILES:
        raise HTTPException(
            status_code=400,
            detail=f"Too many files. A maximum of {settings.MAX_CANDIDATE_FILES} files can be uploaded at once."
        )

    if job_id is not None:
        job = crud.job_posting.get_by_id(db, job_id)
        if not job:
            raise HTTPException(status_code=404, detail=f"Job posting {job_id} not found")
    else:
        job = crud.job_posting.get_active(db)
        if not job:
            raise HTTPException(
                status_code=400,
                detail="No active job posting. Upload a job description first."
            )

    logger.info(f"Processing {len(files)} resumes against job posting {job.id}")
    outcomes = await match_pipeline.process_batch(db, [to_uploaded_file(f) for f in files], job)

    results = []
    errors = []
    for outcome in outcomes:
        if outcome.ok:
            results.append(CandidateResult(
                candidate=CandidateResponse.model_validate(outcome.candidate),
                analysis=MatchAnalysisResponse.model_validate(outcome.analysis)
            ))
        else:
            errors.append(UploadError(file_name=outcome.file_name, error=outcome.error))

    return BatchUploadResponse(results=results, errors=errors)


@router.get("/", response_model=CandidateListResponse)
def list_candidates(
    job_id: Optional[int] = None,
    search: Optional[str] = None,
    min_score: Optional[float] = Query(None, ge=0, le=100),
    max_score: Optional[float] = Query(None, ge=0, le=100),
    status: Optional[CandidateStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """
    Ranked, filtered candidate listing.

    Candidates are ordered by match score (unscored last), then newest first.
    Setting min_score or max_score excludes candidates that have no analysis.
    """
    filters = CandidateFilters(
        job_posting_id=job_id,
        search=search.strip() if search else None,
        min_score=min_score,
        max_score=max_score,
        status=status,
        page=page,
        limit=limit,
    )
    result = crud.candidate.get_filtered(db, filters)

    return CandidateListResponse(
        candidates=[CandidateListItem.model_validate(c) for c in result.candidates],
        total=result.total,
        has_more=result.has_more
    )


@router.get("/{candidate_id}", response_model=CandidateDetailResponse)
def get_candidate(candidate_id: int, db: Session = Depends(get_db)):
    """
    Full candidate profile with its analysis, if one exists.

    Raises:
        HTTPException 404: If candidate not found
    """
    candidate = crud.candidate.get_by_id(db, candidate_id)
    if not candidate:
        raise HTTPException(status_code=404, detail=f"Candidate {candidate_id} not found")
    return candidate


@router.patch("/{candidate_id}/status", response_model=CandidateResponse)
def update_candidate_status(candidate_id: int, update: StatusUpdate, db: Session = Depends(get_db)):
    """
    Move a candidate through the hiring workflow.

    Values outside pending/shortlisted/rejected/hired are rejected with 422
    before anything is written.
    """
    candidate = crud.candidate.update_status(db, candidate_id, update.status)
    if not candidate:
        raise HTTPException(status_code=404, detail=f"Candidate {candidate_id} not found")

    logger.info(f"Candidate {candidate_id} status set to {update.status.value}")
    return candidate


@router.patch("/{candidate_id}/notes", response_model=CandidateResponse)
def update_candidate_notes(candidate_id: int, update: NotesUpdate, db: Session = Depends(get_db)):
    candidate = crud.candidate.update_notes(db, candidate_id, update.interview_notes)
    if not candidate:
        raise HTTPException(status_code=404, detail=f"Candidate {candidate_id} not found")
    return candidate
