"""
Record shaping: canonical embedding text and persistable records.

The canonical text of a record is the exact string sent to the embedding
model. It is built in a fixed field order so the same structured input always
produces the same text.
"""

import json
from typing import List, Optional, Sequence
from app.models.candidate import Candidate, CandidateStatus
from app.models.job_posting import JobPosting
from app.schemas.ai import ExtractedCandidate, ExtractedJob


class EmbeddingDecodeError(ValueError):
    """Raised when a stored embedding cannot be decoded into a vector."""
    pass


def candidate_embedding_text(candidate: ExtractedCandidate) -> str:
    """
    Canonical text for a candidate:
    name, summary, skills, "{title} at {company}: {description}" per role,
    "{degree} from {institution}" per degree.
    """
    experience = " ".join(
        f"{exp.title} at {exp.company}: {exp.description}" for exp in candidate.experience
    )
    education = " ".join(
        f"{edu.degree} from {edu.institution}" for edu in candidate.education
    )
    return " ".join([
        candidate.name,
        candidate.summary,
        skills_search_text(candidate.skills),
        experience,
        education,
    ])


def job_embedding_text(job) -> str:
    """Canonical text for a job: title, description, requirements."""
    return " ".join([job.title or "", job.description or "", job.requirements or ""])


def job_analysis_text(job) -> str:
    """Job text handed to the qualitative assessment."""
    return f"{job.description or ''} {job.requirements or ''}"


def skills_search_text(skills: Sequence[str]) -> str:
    return " ".join(skills)


def serialize_embedding(vector: Sequence[float]) -> str:
    return json.dumps([float(x) for x in vector])


def deserialize_embedding(value: Optional[str]) -> List[float]:
    if not value:
        raise EmbeddingDecodeError("Embedding is missing")
    try:
        vector = json.loads(value)
    except json.JSONDecodeError as e:
        raise EmbeddingDecodeError(f"Embedding is not valid JSON: {e}")
    if not isinstance(vector, list) or not all(isinstance(x, (int, float)) for x in vector):
        raise EmbeddingDecodeError("Embedding must be a list of numbers")
    return [float(x) for x in vector]


def build_job_posting(
    extracted: ExtractedJob,
    file_name: Optional[str],
    embedding: Sequence[float],
) -> JobPosting:
    """Unsaved JobPosting from extracted fields. Activation is done by the caller."""
    return JobPosting(
        title=extracted.title,
        company=extracted.company,
        location=extracted.location or None,
        salary_range=extracted.salary_range or None,
        description=extracted.description,
        requirements=extracted.requirements,
        file_name=file_name,
        is_active=False,
        embedding=serialize_embedding(embedding),
    )


def build_candidate(
    extracted: ExtractedCandidate,
    raw_text: str,
    file_name: str,
    embedding: Sequence[float],
    job_posting_id: Optional[int],
) -> Candidate:
    """Unsaved Candidate from extracted fields, always starting as pending."""
    return Candidate(
        job_posting_id=job_posting_id,
        name=extracted.name,
        email=extracted.email or None,
        phone=extracted.phone or None,
        location=extracted.location or None,
        summary=extracted.summary or None,
        skills=list(extracted.skills),
        skills_text=skills_search_text(extracted.skills),
        experience=[exp.model_dump() for exp in extracted.experience],
        education=[edu.model_dump() for edu in extracted.education],
        certifications=list(extracted.certifications),
        raw_text=raw_text,
        file_name=file_name,
        embedding=serialize_embedding(embedding),
        status=CandidateStatus.PENDING,
    )
