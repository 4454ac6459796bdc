"""
CV optimization: align a CV with a job description and rewrite it.

Guidance differs by application channel. ATS submissions favour exact
keywords and plain structure; email submissions are read by a person and
favour narrative and quantified impact.
"""

import logging
from app.core.config import settings
from app.models.cv_optimization import ApplicationMethod
from app.schemas.ai import CvAlignmentAnalysis
from app.services import ai_service

logger = logging.getLogger(__name__)

ANALYSIS_GUIDANCE = {
    ApplicationMethod.ATS: (
        "Focus on ATS optimization: use standard headings, include exact keyword matches, "
        "avoid tables/graphics, use standard fonts."
    ),
    ApplicationMethod.EMAIL: (
        "Focus on human readability: prioritize compelling narrative, visual appeal, "
        "and relationship building."
    ),
}

REWRITE_GUIDANCE = {
    ApplicationMethod.ATS: (
        "Optimize for ATS: use standard section headings (Summary, Experience, Skills, Education), "
        "include exact keyword matches, avoid special formatting, use bullet points."
    ),
    ApplicationMethod.EMAIL: (
        "Optimize for human review: create compelling narrative, use action verbs, "
        "quantify achievements, ensure visual appeal."
    ),
}


def _method(method) -> ApplicationMethod:
    return ApplicationMethod(method)


async def analyze_cv_alignment(cv_text: str, job_text: str, method: ApplicationMethod) -> CvAlignmentAnalysis:
    """
    Compare a CV with a job description.

    Raises:
        AIServiceError: If the call fails or returns malformed data
    """
    method = _method(method)
    user_prompt = f"""Analyze this CV against the job description and provide detailed alignment analysis.

APPLICATION METHOD: {method.value.upper()}
{ANALYSIS_GUIDANCE[method]}

JOB DESCRIPTION:
{job_text}

CV CONTENT:
{cv_text}

Provide a comprehensive analysis in JSON format with the following structure:
{{
  "improvement_suggestions": [
    {{"section": "section name", "issue": "what's wrong", "suggestion": "how to fix it", "priority": "high|medium|low"}}
  ],
  "keyword_matches": {{
    "found": ["keyword"],
    "missing": ["keyword"],
    "importance": {{"keyword": "critical|important|nice-to-have"}}
  }},
  "skills_alignment": {{
    "matched": ["skill"],
    "missing": ["skill"],
    "suggestions": ["how to highlight missing skills"]
  }},
  "experience_alignment": {{
    "relevant_experience": [
      {{"section": "job title or experience", "relevance": 85, "improvements": ["..."]}}
    ],
    "missing_experience": ["missing experience areas"],
    "suggestions": ["how to address missing experience"]
  }},
  "overall_score": 75
}}"""

    analysis = await ai_service.complete_json(
        "You are a professional CV optimization expert. Provide detailed, actionable feedback "
        "to help candidates align their CV with job requirements.",
        user_prompt,
        CvAlignmentAnalysis,
        settings.OPENAI_ANALYSIS_TEMPERATURE,
        "CV alignment analysis"
    )
    analysis.overall_score = max(0.0, min(100.0, float(analysis.overall_score)))
    return analysis


async def optimize_cv(
    cv_text: str,
    job_text: str,
    method: ApplicationMethod,
    analysis: CvAlignmentAnalysis,
) -> str:
    """
    Rewrite a CV using the alignment analysis. Falls back to the original
    text when the model returns nothing.

    Raises:
        AIServiceError: If the call fails
    """
    method = _method(method)
    high_priority = [s.suggestion for s in analysis.improvement_suggestions if s.priority == "high"]
    presentation = "ATS-friendly formatting" if method == ApplicationMethod.ATS else "human-readable presentation"

    user_prompt = f"""Based on the analysis, rewrite this CV to better align with the job description.

APPLICATION METHOD: {method.value.upper()}
{REWRITE_GUIDANCE[method]}

JOB DESCRIPTION:
{job_text}

ORIGINAL CV:
{cv_text}

ANALYSIS INSIGHTS:
- Missing Keywords: {', '.join(analysis.keyword_matches.missing)}
- Missing Skills: {', '.join(analysis.skills_alignment.missing)}
- Key Improvements Needed: {'; '.join(high_priority)}

Instructions:
1. Maintain all factual information - do not fabricate experience or skills
2. Reframe existing experience to highlight relevant aspects
3. Incorporate missing keywords naturally where applicable to existing experience
4. Restructure content to emphasize job-relevant achievements
5. Use strong action verbs and quantify results where possible
6. Ensure {presentation}

Return the optimized CV text:"""

    optimized = await ai_service.complete_text(
        "You are a professional CV writer. Rewrite CVs to maximize job alignment while "
        "maintaining truthfulness and professionalism.",
        user_prompt,
        settings.OPENAI_REWRITE_TEMPERATURE,
        "CV optimization"
    )
    if not optimized:
        logger.warning("CV optimization returned empty text, keeping original")
        return cv_text
    return optimized


async def generate_specific_improvement(
    original_text: str,
    suggestion: str,
    job_text: str,
    method: ApplicationMethod,
) -> str:
    """
    Rewrite one CV section to implement a single suggestion.

    Raises:
        AIServiceError: If the call fails
    """
    method = _method(method)
    user_prompt = f"""Improve this specific section of the CV based on the suggestion provided.

APPLICATION METHOD: {method.value.upper()}
JOB DESCRIPTION CONTEXT: {job_text}

ORIGINAL TEXT:
{original_text}

IMPROVEMENT SUGGESTION:
{suggestion}

Rewrite only this section to implement the suggestion while keeping it truthful and professional. Return just the improved text:"""

    improved = await ai_service.complete_text(
        "You are a professional CV editor. Make targeted improvements to CV sections while "
        "maintaining accuracy and professionalism.",
        user_prompt,
        settings.OPENAI_ANALYSIS_TEMPERATURE,
        "Section improvement"
    )
    return improved or original_text
