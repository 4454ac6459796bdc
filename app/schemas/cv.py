"""
Pydantic schemas for the CV library, CV optimization and file parsing endpoints.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from app.models.cv_optimization import ApplicationMethod, OptimizationStatus


class ParsedFileResponse(BaseModel):
    text: str


class CvLibraryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    file_name: str = Field(..., min_length=1)
    cv_text: str = Field(..., min_length=1)


class CvLibraryResponse(BaseModel):
    id: int
    name: str
    file_name: str
    cv_text: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CvOptimizationCreate(BaseModel):
    """
    Start an optimization run.

    Either cv_text or cv_library_id must be given; when only the library id is
    given, the saved CV text is used.
    """
    cv_text: Optional[str] = None
    cv_library_id: Optional[int] = None
    job_description_text: str = Field(..., min_length=1)
    application_method: ApplicationMethod


class CvOptimizationQueued(BaseModel):
    optimization_id: int
    status: OptimizationStatus
    task_id: Optional[str] = None


class CvOptimizationResponse(BaseModel):
    id: int
    cv_library_id: Optional[int] = None
    original_cv_text: str
    job_description_text: str
    application_method: ApplicationMethod
    optimized_cv_text: Optional[str] = None
    improvement_suggestions: Optional[List[Dict[str, Any]]] = None
    keyword_matches: Optional[Dict[str, Any]] = None
    skills_alignment: Optional[Dict[str, Any]] = None
    experience_alignment: Optional[Dict[str, Any]] = None
    overall_score: Optional[float] = None
    processing_steps: List[str] = []
    status: OptimizationStatus
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ImproveSectionRequest(BaseModel):
    original_text: str = Field(..., min_length=1)
    suggestion: str = Field(..., min_length=1)


class ImproveSectionResponse(BaseModel):
    improved_text: str
