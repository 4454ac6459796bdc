"""
Candidate database model.

One row per uploaded resume, holding the AI-extracted profile, the raw text,
and the recruiter's workflow state (status and interview notes).
"""

from typing import Any
from sqlalchemy import Column, Integer, String, ForeignKey, Enum, Text, DateTime, func
from sqlalchemy.orm import relationship
import enum
from app.core.database import Base
from app.models.types import JSONType


class CandidateStatus(str, enum.Enum):
    """
    Recruiter workflow status.

    pending -> shortlisted -> hired
           \\-> rejected
    """
    PENDING = "pending"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    HIRED = "hired"


def coerce_status(value: Any) -> CandidateStatus:
    """Map any incoming status value onto the enum, falling back to PENDING."""
    if isinstance(value, CandidateStatus):
        return value
    try:
        return CandidateStatus(value)
    except ValueError:
        return CandidateStatus.PENDING


class Candidate(Base):
    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True, index=True)
    job_posting_id = Column(Integer, ForeignKey("job_postings.id"), nullable=True, index=True)

    # Extracted profile
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    location = Column(String, nullable=True)
    summary = Column(Text, nullable=True)
    skills = Column(JSONType, nullable=False, default=list)  # ordered list of strings
    skills_text = Column(Text, nullable=False, default="")  # space-joined skills, used by search
    experience = Column(JSONType, nullable=False, default=list)
    education = Column(JSONType, nullable=False, default=list)
    certifications = Column(JSONType, nullable=False, default=list)

    # Source document
    raw_text = Column(Text, nullable=False)
    file_name = Column(String, nullable=False)

    # JSON-encoded embedding vector of the canonical candidate text
    embedding = Column(Text, nullable=True)

    status = Column(
        Enum(
            CandidateStatus,
            name="candidate_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        default=CandidateStatus.PENDING,
        nullable=False,
        index=True
    )
    interview_notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    job_posting = relationship("JobPosting", back_populates="candidates")
    analysis = relationship("MatchAnalysis", back_populates="candidate", uselist=False)

    def __repr__(self):
        return f"<Candidate(id={self.id}, name='{self.name}', status={self.status})>"
