"""
CRUD operations for JobPosting.
"""

from typing import List, Optional
from sqlalchemy.orm import Session
from app.crud.activation import activate_exclusive
from app.models.job_posting import JobPosting


def create_active(db: Session, job_posting: JobPosting) -> JobPosting:
    """
    Persist a new job posting as the single active one.

    Args:
        db: Database session
        job_posting: Unsaved JobPosting built by the record shaper

    Returns:
        The saved posting, with id and is_active=True
    """
    activate_exclusive(db, job_posting)
    return job_posting


def activate(db: Session, job_posting_id: int) -> Optional[JobPosting]:
    """
    Make an existing posting the active one.

    Returns:
        The activated posting, or None if it does not exist
    """
    job_posting = get_by_id(db, job_posting_id)
    if not job_posting:
        return None

    activate_exclusive(db, job_posting)
    return job_posting


def get_by_id(db: Session, job_posting_id: int) -> Optional[JobPosting]:
    return db.query(JobPosting).filter(JobPosting.id == job_posting_id).first()


def get_active(db: Session) -> Optional[JobPosting]:
    """The active posting, if any."""
    return (
        db.query(JobPosting)
        .filter(JobPosting.is_active.is_(True))
        .order_by(JobPosting.created_at.desc(), JobPosting.id.desc())
        .first()
    )


def get_multi(db: Session, skip: int = 0, limit: int = 100) -> List[JobPosting]:
    """All postings, newest first."""
    return (
        db.query(JobPosting)
        .order_by(JobPosting.created_at.desc(), JobPosting.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def count(db: Session) -> int:
    return db.query(JobPosting).count()
