"""
Database models package.
"""

from app.models.job_posting import JobPosting
from app.models.candidate import Candidate, CandidateStatus
from app.models.match_analysis import MatchAnalysis
from app.models.cv_library import CvLibraryEntry
from app.models.cv_optimization import CvOptimization, ApplicationMethod, OptimizationStatus

__all__ = [
    "JobPosting",
    "Candidate",
    "CandidateStatus",
    "MatchAnalysis",
    "CvLibraryEntry",
    "CvOptimization",
    "ApplicationMethod",
    "OptimizationStatus",
]
