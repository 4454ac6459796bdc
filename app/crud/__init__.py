"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer keeps query construction out of the API routes.
"""

from app.crud import job_posting, candidate, cv_library, cv_optimization

__all__ = ["job_posting", "candidate", "cv_library", "cv_optimization"]
