"""
CvOptimization model.

Tracks one background run that aligns a CV with a job description and
rewrites it for the chosen application channel.
"""

import enum
from sqlalchemy import Column, Integer, Float, Text, ForeignKey, Enum, DateTime, func
from app.core.database import Base
from app.models.types import JSONType


class ApplicationMethod(str, enum.Enum):
    ATS = "ats"      # Applicant tracking system, keyword driven
    EMAIL = "email"  # Read by a human


class OptimizationStatus(str, enum.Enum):
    """
    PROCESSING -> COMPLETED
              \\-> FAILED
    """
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


def _values(enum_cls):
    return [member.value for member in enum_cls]


class CvOptimization(Base):
    __tablename__ = "cv_optimizations"

    id = Column(Integer, primary_key=True, index=True)
    cv_library_id = Column(Integer, ForeignKey("cv_library.id", ondelete="SET NULL"), nullable=True)

    original_cv_text = Column(Text, nullable=False)
    job_description_text = Column(Text, nullable=False)
    application_method = Column(
        Enum(ApplicationMethod, name="application_method", values_callable=_values),
        nullable=False
    )

    # Results
    optimized_cv_text = Column(Text, nullable=True)
    improvement_suggestions = Column(JSONType, nullable=True)
    keyword_matches = Column(JSONType, nullable=True)
    skills_alignment = Column(JSONType, nullable=True)
    experience_alignment = Column(JSONType, nullable=True)
    overall_score = Column(Float, nullable=True)  # 0-100

    # Names of the pipeline steps completed so far
    processing_steps = Column(JSONType, nullable=False, default=list)

    status = Column(
        Enum(OptimizationStatus, name="optimization_status", values_callable=_values),
        default=OptimizationStatus.PROCESSING,
        nullable=False,
        index=True
    )
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<CvOptimization(id={self.id}, status={self.status})>"
