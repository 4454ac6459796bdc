"""
Plain text extraction for client-side previews and the CV tools.
"""

import logging
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from app.api.uploads import validate_upload
from app.core.api_rate_limiter import check_upload_rate_limit
from app.schemas.cv import ParsedFileResponse
from app.services import document_intake
from app.services.file_parser import JOB_DESCRIPTION_EXTENSIONS, FileParsingError

router = APIRouter(tags=["Files"])
logger = logging.getLogger(__name__)


@router.post("/parse-file", response_model=ParsedFileResponse, dependencies=[Depends(check_upload_rate_limit)])
async def parse_file(file: UploadFile = File(...)):
    """
    Extract the text of one PDF, DOCX or TXT file. Nothing is stored.

    Raises:
        HTTPException 400: Invalid type or size, or no extractable text
    """
    validate_upload(file, JOB_DESCRIPTION_EXTENSIONS)

    try:
        text = await document_intake.read_document(file.file, file.filename)
    except FileParsingError as e:
        logger.warning(f"Could not parse {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return {"text": text}
