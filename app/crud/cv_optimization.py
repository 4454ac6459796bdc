"""
CRUD operations for CV optimization runs.
"""

from typing import Any, Optional
from sqlalchemy.orm import Session
from app.models.cv_optimization import ApplicationMethod, CvOptimization, OptimizationStatus


def create(
    db: Session,
    original_cv_text: str,
    job_description_text: str,
    application_method: ApplicationMethod,
    cv_library_id: Optional[int] = None,
) -> CvOptimization:
    """Record a new run in the processing state."""
    optimization = CvOptimization(
        cv_library_id=cv_library_id,
        original_cv_text=original_cv_text,
        job_description_text=job_description_text,
        application_method=application_method,
        status=OptimizationStatus.PROCESSING,
        processing_steps=[]
    )
    db.add(optimization)
    db.commit()
    db.refresh(optimization)
    return optimization


def get_by_id(db: Session, optimization_id: int) -> Optional[CvOptimization]:
    # Rows are updated by the worker in another session; always reload
    return (
        db.query(CvOptimization)
        .populate_existing()
        .filter(CvOptimization.id == optimization_id)
        .first()
    )


def update(db: Session, optimization: CvOptimization, **fields: Any) -> CvOptimization:
    for key, value in fields.items():
        setattr(optimization, key, value)
    db.commit()
    db.refresh(optimization)
    return optimization


def add_step(db: Session, optimization: CvOptimization, step: str) -> CvOptimization:
    """Append a completed step name; the list is reassigned so the JSON column is flagged dirty."""
    return update(db, optimization, processing_steps=list(optimization.processing_steps or []) + [step])
