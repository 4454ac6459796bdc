"""
Pydantic schemas for JobPosting API responses.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class JobPostingResponse(BaseModel):
    """Job posting as returned by the API. The embedding is internal and omitted."""
    id: int
    title: str
    company: str
    location: Optional[str] = None
    salary_range: Optional[str] = None
    description: str
    requirements: str
    file_name: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
