"""
API endpoints for job postings.

A job description is uploaded as a document, turned into structured fields
and an embedding by the AI service, and becomes the single active job that
resume batches are scored against by default.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session
from app import crud
from app.api.uploads import validate_upload
from app.core.api_rate_limiter import check_upload_rate_limit
from app.core.database import get_db
from app.schemas.job_posting import JobPostingResponse
from app.services import document_intake
from app.services.ai_service import AIServiceError
from app.services.file_parser import JOB_DESCRIPTION_EXTENSIONS, FileParsingError

router = APIRouter(prefix="/job-postings", tags=["Job Postings"])
logger = logging.getLogger(__name__)


@router.post("/upload", response_model=JobPostingResponse, dependencies=[Depends(check_upload_rate_limit)])
async def upload_job_description(
    file: UploadFile = File(...),
    db: Session = Depends(get_db)
):
    """
    Upload a job description (PDF, DOCX or TXT, up to the size limit).

    The new posting becomes the active one; the previously active posting is
    deactivated in the same transaction.

    Raises:
        HTTPException 400: Invalid type or size, or no extractable text
        HTTPException 502: AI extraction or embedding failed
    """
    validate_upload(file, JOB_DESCRIPTION_EXTENSIONS)

    try:
        job_posting = await document_intake.ingest_job_description(db, file.file, file.filename)
    except FileParsingError as e:
        logger.warning(f"Could not parse job description {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except AIServiceError as e:
        logger.error(f"AI processing failed for job description {file.filename}: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to process job description: {e}")

    return job_posting


@router.get("/active", response_model=Optional[JobPostingResponse])
def get_active_job_posting(db: Session = Depends(get_db)):
    """The active job posting, or null when none has been uploaded."""
    return crud.job_posting.get_active(db)


@router.get("/", response_model=List[JobPostingResponse])
def list_job_postings(db: Session = Depends(get_db)):
    """All job postings, newest first."""
    return crud.job_posting.get_multi(db)


@router.get("/{job_posting_id}", response_model=JobPostingResponse)
def get_job_posting(job_posting_id: int, db: Session = Depends(get_db)):
    job_posting = crud.job_posting.get_by_id(db, job_posting_id)
    if not job_posting:
        raise HTTPException(status_code=404, detail=f"Job posting {job_posting_id} not found")
    return job_posting


@router.post("/{job_posting_id}/activate", response_model=JobPostingResponse)
def activate_job_posting(job_posting_id: int, db: Session = Depends(get_db)):
    """
    Make a job posting the single active one.

    Raises:
        HTTPException 404: If the posting does not exist
    """
    job_posting = crud.job_posting.activate(db, job_posting_id)
    if not job_posting:
        raise HTTPException(status_code=404, detail=f"Job posting {job_posting_id} not found")

    logger.info(f"Activated job posting {job_posting_id}")
    return job_posting
