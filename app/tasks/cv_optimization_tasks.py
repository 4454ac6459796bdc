"""
Background CV optimization.

Runs outside the request cycle because a full run makes two long AI calls:

1. analyze_cv_alignment - keyword, skills and experience alignment
2. optimize_cv - rewrite guided by that analysis

Each finished step is appended to CvOptimization.processing_steps so clients
polling the record can show progress.
"""

import asyncio
import logging
from app import crud
from app.core.celery_app import celery_app
from app.core.database import SessionLocal
from app.models.cv_optimization import OptimizationStatus
from app.services import cv_optimizer
from app.services.ai_service import AIServiceError

logger = logging.getLogger(__name__)

STEP_ANALYSIS = "analysis"
STEP_OPTIMIZATION = "optimization"


async def run_optimization(db, optimization) -> None:
    analysis = await cv_optimizer.analyze_cv_alignment(
        optimization.original_cv_text,
        optimization.job_description_text,
        optimization.application_method
    )
    crud.cv_optimization.update(
        db,
        optimization,
        improvement_suggestions=[s.model_dump() for s in analysis.improvement_suggestions],
        keyword_matches=analysis.keyword_matches.model_dump(),
        skills_alignment=analysis.skills_alignment.model_dump(),
        experience_alignment=analysis.experience_alignment.model_dump(),
        overall_score=analysis.overall_score,
    )
    crud.cv_optimization.add_step(db, optimization, STEP_ANALYSIS)

    optimized_text = await cv_optimizer.optimize_cv(
        optimization.original_cv_text,
        optimization.job_description_text,
        optimization.application_method,
        analysis
    )
    crud.cv_optimization.update(db, optimization, optimized_cv_text=optimized_text)
    crud.cv_optimization.add_step(db, optimization, STEP_OPTIMIZATION)


@celery_app.task(name="app.tasks.cv_optimization_tasks.optimize_cv_task", bind=True)
def optimize_cv_task(self, optimization_id: int):
    """
    Worker: analyze and rewrite the CV of one optimization run.

    Args:
        self: Celery task instance (when bind=True)
        optimization_id: The CvOptimization ID to process

    Returns:
        dict: Processing result with status
    """
    logger.info(f"[Task {self.request.id}] Optimizing CV for run {optimization_id}")

    db = SessionLocal()

    try:
        optimization = crud.cv_optimization.get_by_id(db, optimization_id)
        if not optimization:
            logger.error(f"[Task {self.request.id}] Optimization {optimization_id} not found")
            return {"status": "error", "message": "Optimization not found"}

        try:
            asyncio.run(run_optimization(db, optimization))
        except AIServiceError as e:
            logger.error(f"[Task {self.request.id}] AI error optimizing run {optimization_id}: {e}")
            db.rollback()
            crud.cv_optimization.update(
                db, optimization, status=OptimizationStatus.FAILED, error_message=str(e)
            )
            return {"status": "error", "message": str(e)}
        except Exception as e:
            logger.error(
                f"[Task {self.request.id}] Unexpected error optimizing run {optimization_id}: {e}",
                exc_info=True
            )
            db.rollback()
            crud.cv_optimization.update(
                db, optimization, status=OptimizationStatus.FAILED, error_message=f"Unexpected error: {e}"
            )
            return {"status": "error", "message": str(e)}

        crud.cv_optimization.update(db, optimization, status=OptimizationStatus.COMPLETED, error_message=None)
        logger.info(
            f"[Task {self.request.id}] Run {optimization_id} completed "
            f"with alignment score {optimization.overall_score}"
        )
        return {
            "status": "success",
            "optimization_id": optimization_id,
            "overall_score": optimization.overall_score
        }

    finally:
        db.close()
