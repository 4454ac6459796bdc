from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Index, func, text
from sqlalchemy.orm import relationship
from app.core.database import Base


class JobPosting(Base):
    """
    A job description uploaded by a recruiter.

    Exactly one posting is "active" at a time; it is the default match target
    for new resume uploads. The partial unique index below makes a second
    active row impossible at the storage level.
    """
    __tablename__ = "job_postings"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    company = Column(String, nullable=False, default="")
    location = Column(String, nullable=True)
    salary_range = Column(String, nullable=True)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=False, default="")
    file_name = Column(String, nullable=True)

    is_active = Column(Boolean, nullable=False, default=False)

    # JSON-encoded embedding vector of the canonical job text
    embedding = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    candidates = relationship("Candidate", back_populates="job_posting")

    __table_args__ = (
        Index(
            "uq_job_postings_single_active",
            "is_active",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    def __repr__(self):
        return f"<JobPosting(id={self.id}, title='{self.title}', active={self.is_active})>"
