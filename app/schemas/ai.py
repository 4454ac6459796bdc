"""
Validated shapes of the JSON returned by the AI service.

Every optional field is default-filled (null -> "" / [] / 0 / False) so the
rest of the pipeline never sees a missing key. Fields that the pipeline cannot
do without (a candidate's name, a job's title) are required and rejected when
empty.
"""

from typing import Any, List
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class _AIModel(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @field_validator("*", mode="before")
    @classmethod
    def _fill_nulls(cls, value: Any, info: ValidationInfo) -> Any:
        if value is not None:
            return value
        field = cls.model_fields[info.field_name]
        if field.is_required():
            return value
        return field.get_default(call_default_factory=True)


class ExperienceEntry(_AIModel):
    title: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class EducationEntry(_AIModel):
    degree: str = ""
    institution: str = ""
    location: str = ""
    graduation_date: str = ""
    description: str = ""


class ExtractedCandidate(_AIModel):
    """Structured resume fields."""
    name: str = Field(..., min_length=1)
    email: str = ""
    phone: str = ""
    location: str = ""
    summary: str = ""
    skills: List[str] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)

    @field_validator("skills", "certifications", mode="after")
    @classmethod
    def _drop_blank_items(cls, items: List[str]) -> List[str]:
        return [item.strip() for item in items if item and item.strip()]


class ExtractedJob(_AIModel):
    """Structured job description fields."""
    title: str = Field(..., min_length=1)
    company: str = ""
    location: str = ""
    salary_range: str = ""
    description: str = ""
    requirements: str = ""


class QualitativeAssessment(_AIModel):
    """
    Holistic candidate-vs-job assessment.

    Scores are kept as returned; clamping to [0, 100] happens in the match
    pipeline right before persisting.
    """
    match_score: float = 0
    skills_match: float = 0
    experience_match: float = 0
    education_match: float = 0
    industry_match: float = 0
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    recommendation: str = "No recommendation available"
    detailed_analysis: str = "No analysis available"
    is_match: bool = False


class ImprovementSuggestion(_AIModel):
    section: str = ""
    issue: str = ""
    suggestion: str = ""
    priority: str = "medium"


class KeywordMatches(_AIModel):
    found: List[str] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list)
    importance: dict = Field(default_factory=dict)


class SkillsAlignment(_AIModel):
    matched: List[str] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class RelevantExperience(_AIModel):
    section: str = ""
    relevance: float = 0
    improvements: List[str] = Field(default_factory=list)


class ExperienceAlignment(_AIModel):
    relevant_experience: List[RelevantExperience] = Field(default_factory=list)
    missing_experience: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class CvAlignmentAnalysis(_AIModel):
    """CV-vs-job alignment used by the CV optimizer."""
    improvement_suggestions: List[ImprovementSuggestion] = Field(default_factory=list)
    keyword_matches: KeywordMatches = Field(default_factory=KeywordMatches)
    skills_alignment: SkillsAlignment = Field(default_factory=SkillsAlignment)
    experience_alignment: ExperienceAlignment = Field(default_factory=ExperienceAlignment)
    overall_score: float = 0
