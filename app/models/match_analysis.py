"""
MatchAnalysis model for storing the scored comparison of a candidate
against a job posting.

match_score is the blended score: the higher of the AI's qualitative score
and the embedding (geometric) score. The four sub-scores and the narrative
fields come straight from the qualitative assessment.
"""

from sqlalchemy import Column, Integer, ForeignKey, Float, Text, Boolean, DateTime, func
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.types import JSONType


class MatchAnalysis(Base):
    __tablename__ = "match_analyses"

    id = Column(Integer, primary_key=True, index=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id"), nullable=False, unique=True, index=True)
    job_posting_id = Column(Integer, ForeignKey("job_postings.id"), nullable=False, index=True)

    # The Headline Score (0-100)
    match_score = Column(Float, nullable=False, index=True)

    # Sub-scores (0-100)
    skills_match = Column(Float, nullable=False, default=0)
    experience_match = Column(Float, nullable=False, default=0)
    education_match = Column(Float, nullable=False, default=0)
    industry_match = Column(Float, nullable=False, default=0)

    strengths = Column(JSONType, nullable=False, default=list)
    weaknesses = Column(JSONType, nullable=False, default=list)
    recommendation = Column(Text, nullable=True)
    detailed_analysis = Column(Text, nullable=True)

    # Binary hire/reject decision from the qualitative assessment
    is_match = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    candidate = relationship("Candidate", back_populates="analysis")

    def __repr__(self):
        return f"<MatchAnalysis(candidate_id={self.candidate_id}, match_score={self.match_score})>"
