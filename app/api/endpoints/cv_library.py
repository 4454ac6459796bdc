"""
API endpoints for the CV library: saved CVs reused across optimization runs.
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session
from app import crud
from app.api.uploads import validate_upload
from app.core.api_rate_limiter import check_upload_rate_limit
from app.core.database import get_db
from app.schemas.cv import CvLibraryCreate, CvLibraryResponse
from app.services import document_intake
from app.services.file_parser import RESUME_EXTENSIONS, FileParsingError

router = APIRouter(prefix="/cv-library", tags=["CV Library"])
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[CvLibraryResponse])
def list_cvs(db: Session = Depends(get_db)):
    return crud.cv_library.get_multi(db)


@router.post("/", response_model=CvLibraryResponse, status_code=201)
def create_cv(cv: CvLibraryCreate, db: Session = Depends(get_db)):
    """Save CV text that was already extracted on the client."""
    entry = crud.cv_library.create(db, name=cv.name, file_name=cv.file_name, cv_text=cv.cv_text)
    logger.info(f"Saved CV {entry.id} ({entry.name}) to library")
    return entry


@router.post(
    "/upload",
    response_model=CvLibraryResponse,
    status_code=201,
    dependencies=[Depends(check_upload_rate_limit)]
)
async def upload_cv(
    file: UploadFile = File(...),
    name: str = Form(..., min_length=1),
    db: Session = Depends(get_db)
):
    """
    Upload a CV file (PDF or DOCX) and save its text to the library.

    Raises:
        HTTPException 400: Invalid type or size, or no extractable text
    """
    validate_upload(file, RESUME_EXTENSIONS)

    try:
        cv_text = await document_intake.read_document(file.file, file.filename)
    except FileParsingError as e:
        logger.warning(f"Could not parse CV {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    entry = crud.cv_library.create(db, name=name, file_name=file.filename, cv_text=cv_text)
    logger.info(f"Uploaded CV {entry.id} ({entry.name}) to library")
    return entry


@router.post("/{entry_id}/activate", response_model=CvLibraryResponse)
def activate_cv(entry_id: int, db: Session = Depends(get_db)):
    """Make a library CV the single active one."""
    entry = crud.cv_library.activate(db, entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail=f"CV {entry_id} not found")
    return entry


@router.delete("/{entry_id}", status_code=204)
def delete_cv(entry_id: int, db: Session = Depends(get_db)):
    if not crud.cv_library.delete(db, entry_id):
        raise HTTPException(status_code=404, detail=f"CV {entry_id} not found")
    logger.info(f"Deleted CV {entry_id} from library")
