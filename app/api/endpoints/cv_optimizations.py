"""
API endpoints for CV optimization.

A run is recorded immediately and processed by a Celery worker; clients poll
GET /cv-optimizations/{id} until the status leaves "processing".
"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app import crud
from app.core.api_rate_limiter import check_ai_rate_limit
from app.core.database import get_db
from app.models.cv_optimization import OptimizationStatus
from app.schemas.cv import (
    CvOptimizationCreate,
    CvOptimizationQueued,
    CvOptimizationResponse,
    ImproveSectionRequest,
    ImproveSectionResponse,
)
from app.services import cv_optimizer
from app.services.ai_service import AIServiceError
from app.tasks import cv_optimization_tasks

router = APIRouter(prefix="/cv-optimizations", tags=["CV Optimization"])
logger = logging.getLogger(__name__)


@router.post(
    "/",
    response_model=CvOptimizationQueued,
    status_code=202,
    dependencies=[Depends(check_ai_rate_limit)]
)
def create_optimization(request: CvOptimizationCreate, db: Session = Depends(get_db)):
    """
    Queue an optimization run.

    Raises:
        HTTPException 400: Neither CV text nor a library CV was given
        HTTPException 404: cv_library_id does not exist
    """
    cv_text = (request.cv_text or "").strip()

    if request.cv_library_id is not None:
        entry = crud.cv_library.get_by_id(db, request.cv_library_id)
        if not entry:
            raise HTTPException(status_code=404, detail=f"CV {request.cv_library_id} not found")
        cv_text = cv_text or entry.cv_text

    if not cv_text:
        raise HTTPException(status_code=400, detail="Either cv_text or cv_library_id is required")

    optimization = crud.cv_optimization.create(
        db,
        original_cv_text=cv_text,
        job_description_text=request.job_description_text,
        application_method=request.application_method,
        cv_library_id=request.cv_library_id,
    )

    task = cv_optimization_tasks.optimize_cv_task.delay(optimization.id)
    logger.info(f"Queued optimization task {task.id} for run {optimization.id}")

    return CvOptimizationQueued(
        optimization_id=optimization.id,
        status=OptimizationStatus.PROCESSING,
        task_id=task.id
    )


@router.get("/{optimization_id}", response_model=CvOptimizationResponse)
def get_optimization(optimization_id: int, db: Session = Depends(get_db)):
    optimization = crud.cv_optimization.get_by_id(db, optimization_id)
    if not optimization:
        raise HTTPException(status_code=404, detail=f"Optimization {optimization_id} not found")
    return optimization


@router.post(
    "/{optimization_id}/improve-section",
    response_model=ImproveSectionResponse,
    dependencies=[Depends(check_ai_rate_limit)]
)
async def improve_section(
    optimization_id: int,
    request: ImproveSectionRequest,
    db: Session = Depends(get_db)
):
    """
    Rewrite one CV section to apply a single suggestion, using the run's job
    description and application method as context.

    Raises:
        HTTPException 404: If the run does not exist
        HTTPException 502: AI call failed
    """
    optimization = crud.cv_optimization.get_by_id(db, optimization_id)
    if not optimization:
        raise HTTPException(status_code=404, detail=f"Optimization {optimization_id} not found")

    try:
        improved_text = await cv_optimizer.generate_specific_improvement(
            request.original_text,
            request.suggestion,
            optimization.job_description_text,
            optimization.application_method
        )
    except AIServiceError as e:
        logger.error(f"Section improvement failed for run {optimization_id}: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to generate improvement: {e}")

    return ImproveSectionResponse(improved_text=improved_text)
