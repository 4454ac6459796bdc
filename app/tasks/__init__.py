"""
Celery tasks package.

- cv_optimization_tasks: CV alignment analysis and rewrite
"""

from app.tasks import cv_optimization_tasks

__all__ = ["cv_optimization_tasks"]
