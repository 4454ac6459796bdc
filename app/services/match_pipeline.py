"""
Candidate-to-job matching pipeline.

For each resume:

    parse -> extract fields -> embed -> geometric score
                            -> qualitative assessment
          -> blend -> persist Candidate + MatchAnalysis (one transaction)

Score blend policy
------------------
The persisted match score is max(qualitative, geometric), clamped to [0, 100].
The geometric score is only a text-vector similarity, so it may raise the
qualitative assessment but never lower it. Sub-scores, strengths, weaknesses,
recommendation, analysis and the pass/fail flag are taken from the
qualitative assessment unchanged (apart from clamping).

Batches are processed strictly one file after another. Each file ends as a
ProcessingSuccess or a ProcessingFailure; a failure persists nothing for that
file and does not stop the batch.
"""

import logging
import math
from dataclasses import dataclass
from typing import BinaryIO, List, Optional, Sequence, Tuple, Union
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.storage import storage
from app.models.candidate import Candidate
from app.models.job_posting import JobPosting
from app.models.match_analysis import MatchAnalysis
from app.schemas.ai import QualitativeAssessment
from app.services import ai_service, file_parser, record_shaper
from app.services.ai_service import AIServiceError
from app.services.file_parser import FileParsingError
from app.services.record_shaper import EmbeddingDecodeError
from app.services.similarity import DimensionMismatchError, geometric_score

logger = logging.getLogger(__name__)

SCORE_MIN = 0.0
SCORE_MAX = 100.0

# Errors that fail a single file without aborting the batch
PIPELINE_ERRORS = (
    AIServiceError,
    FileParsingError,
    EmbeddingDecodeError,
    DimensionMismatchError,
)


@dataclass
class ProcessingSuccess:
    file_name: str
    candidate: Candidate
    analysis: MatchAnalysis
    ok: bool = True


@dataclass
class ProcessingFailure:
    file_name: str
    error: str
    ok: bool = False


ProcessingOutcome = Union[ProcessingSuccess, ProcessingFailure]


@dataclass
class UploadedFile:
    """One file of a batch: its name, size and readable stream."""
    file_name: str
    size: int
    stream: BinaryIO


def clamp_score(value: Optional[float]) -> float:
    """Clamp a score to [0, 100]; missing or NaN values become 0."""
    if value is None:
        return SCORE_MIN
    value = float(value)
    if math.isnan(value):
        return SCORE_MIN
    return max(SCORE_MIN, min(SCORE_MAX, value))


def blend_scores(qualitative: Optional[float], geometric: Optional[float]) -> float:
    """Final match score: the higher of the two sources, clamped to [0, 100]."""
    return clamp_score(max(clamp_score(qualitative), clamp_score(geometric)))


def score_candidate(
    candidate_id: int,
    job_posting_id: int,
    assessment: QualitativeAssessment,
    geometric: float,
) -> MatchAnalysis:
    """Build the MatchAnalysis record for one candidate/job pair."""
    return MatchAnalysis(
        candidate_id=candidate_id,
        job_posting_id=job_posting_id,
        match_score=blend_scores(assessment.match_score, geometric),
        skills_match=clamp_score(assessment.skills_match),
        experience_match=clamp_score(assessment.experience_match),
        education_match=clamp_score(assessment.education_match),
        industry_match=clamp_score(assessment.industry_match),
        strengths=list(assessment.strengths),
        weaknesses=list(assessment.weaknesses),
        recommendation=assessment.recommendation,
        detailed_analysis=assessment.detailed_analysis,
        is_match=assessment.is_match,
    )


async def process_resume(
    db: Session,
    staged_path: str,
    file_name: str,
    job: JobPosting,
) -> Tuple[Candidate, MatchAnalysis]:
    """
    Run the full pipeline for one staged resume against one job.

    Nothing is written until every external call has succeeded; the candidate
    and its analysis are then committed together.

    Raises:
        FileParsingError, AIServiceError, EmbeddingDecodeError,
        DimensionMismatchError: The file failed; nothing was persisted
    """
    raw_text = await run_in_threadpool(file_parser.extract_text, staged_path, file_name)

    extracted = await ai_service.extract_candidate_info(raw_text)

    candidate_vector = await ai_service.generate_embedding(
        record_shaper.candidate_embedding_text(extracted)
    )
    job_vector = record_shaper.deserialize_embedding(job.embedding)
    geometric = geometric_score(candidate_vector, job_vector)

    assessment = await ai_service.analyze_candidate_match(
        raw_text,
        record_shaper.job_analysis_text(job),
        extracted.name
    )
    logger.info(
        f"Scores for {file_name}: qualitative={assessment.match_score}, geometric={geometric}"
    )

    candidate = record_shaper.build_candidate(
        extracted,
        raw_text=raw_text,
        file_name=file_name,
        embedding=candidate_vector,
        job_posting_id=job.id,
    )
    try:
        db.add(candidate)
        db.flush()  # assigns candidate.id inside the open transaction
        analysis = score_candidate(candidate.id, job.id, assessment, geometric)
        db.add(analysis)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(candidate)
    db.refresh(analysis)
    return candidate, analysis


async def process_upload(db: Session, upload: UploadedFile, job: JobPosting) -> ProcessingOutcome:
    """Validate, stage and score one uploaded file, never raising for expected failures."""
    if not file_parser.validate_file_type(upload.file_name, file_parser.RESUME_EXTENSIONS):
        return ProcessingFailure(upload.file_name, "Invalid file type. Only PDF and DOCX files are allowed.")

    if not file_parser.validate_file_size(upload.size):
        return ProcessingFailure(
            upload.file_name,
            f"File size exceeds {settings.MAX_UPLOAD_SIZE_MB}MB limit"
        )

    try:
        async with storage.staged(upload.stream, upload.file_name) as staged_path:
            candidate, analysis = await process_resume(db, staged_path, upload.file_name, job)
    except PIPELINE_ERRORS as e:
        logger.warning(f"Failed to process {upload.file_name}: {e}")
        return ProcessingFailure(upload.file_name, str(e))
    except Exception as e:
        logger.error(f"Unexpected error processing {upload.file_name}: {e}", exc_info=True)
        return ProcessingFailure(upload.file_name, f"Unexpected error: {e}")

    logger.info(
        f"Created candidate {candidate.id} from {upload.file_name} "
        f"with match score {analysis.match_score}"
    )
    return ProcessingSuccess(upload.file_name, candidate, analysis)


async def process_batch(
    db: Session,
    uploads: Sequence[UploadedFile],
    job: JobPosting,
) -> List[ProcessingOutcome]:
    """
    Score a batch of resumes against one job, one file at a time.

    Outcomes are returned in submission order.
    """
    outcomes: List[ProcessingOutcome] = []
    for upload in uploads:
        outcomes.append(await process_upload(db, upload, job))

    succeeded = sum(1 for outcome in outcomes if outcome.ok)
    logger.info(
        f"Batch for job {job.id} complete: {succeeded} succeeded, "
        f"{len(outcomes) - succeeded} failed"
    )
    return outcomes
