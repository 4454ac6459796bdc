"""
Celery application configuration.

Redis is used as both the message broker and result backend. The worker runs
long AI jobs (CV optimization) outside the request cycle.
"""

from celery import Celery
from app.core.config import settings

celery_app = Celery(
    "talent_match_worker",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["app.tasks.cv_optimization_tasks"],
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Task behavior
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max per task
    task_soft_time_limit=240,

    result_expires=3600,

    # One task at a time per worker process; AI calls are rate limited upstream
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=50,
)
