"""
Single-document intake: staging, text extraction and job description ingestion.
"""

import logging
from typing import BinaryIO
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from app import crud
from app.core.storage import storage
from app.models.job_posting import JobPosting
from app.services import ai_service, file_parser, record_shaper

logger = logging.getLogger(__name__)


async def read_document(stream: BinaryIO, file_name: str) -> str:
    """
    Stage an upload, extract its text and remove the staged copy.

    Raises:
        FileParsingError: If no text can be extracted
    """
    async with storage.staged(stream, file_name) as staged_path:
        return await run_in_threadpool(file_parser.extract_text, staged_path, file_name)


async def ingest_job_description(db: Session, stream: BinaryIO, file_name: str) -> JobPosting:
    """
    Turn an uploaded job description into the new active job posting.

    Nothing is persisted unless extraction and embedding both succeed.

    Raises:
        FileParsingError: If the document has no extractable text
        AIServiceError: If extraction or embedding fails
    """
    text = await read_document(stream, file_name)

    extracted = await ai_service.extract_job_info(text)
    embedding = await ai_service.generate_embedding(record_shaper.job_embedding_text(extracted))

    job_posting = record_shaper.build_job_posting(extracted, file_name=file_name, embedding=embedding)
    job_posting = crud.job_posting.create_active(db, job_posting)
    logger.info(f"Created active job posting {job_posting.id}: {job_posting.title}")
    return job_posting
