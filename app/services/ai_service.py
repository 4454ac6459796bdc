"""
OpenAI-backed extraction, assessment and embedding calls.

Every call is bounded by AI_REQUEST_TIMEOUT_SECONDS and every failure mode
(API error, timeout, empty or malformed JSON, schema violation) surfaces as
AIServiceError. Nothing is retried here: callers decide how a failure is
reported.
"""

import asyncio
import json
import logging
from typing import List, Optional, Type, TypeVar
from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError
from app.core.config import settings
from app.schemas.ai import ExtractedCandidate, ExtractedJob, QualitativeAssessment

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

_client: Optional[AsyncOpenAI] = None


class AIServiceError(Exception):
    """Raised when the AI service fails or returns unusable data."""
    pass


def get_client() -> AsyncOpenAI:
    global _client
    if _client is None:
        if not settings.OPENAI_API_KEY:
            raise AIServiceError("OPENAI_API_KEY is not configured")
        _client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
    return _client


async def _bounded(coro, operation: str):
    """Await an AI call, converting timeouts and API errors to AIServiceError."""
    timeout = settings.AI_REQUEST_TIMEOUT_SECONDS
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError:
        raise AIServiceError(f"{operation} timed out after {timeout:g} seconds")
    except OpenAIError as e:
        raise AIServiceError(f"{operation} failed: {e}")


async def complete_text(system_prompt: str, user_prompt: str, temperature: float, operation: str) -> str:
    """Plain-text chat completion."""
    response = await _bounded(
        get_client().chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            temperature=temperature
        ),
        operation
    )
    return (response.choices[0].message.content or "").strip()


async def complete_json(
    system_prompt: str,
    user_prompt: str,
    schema: Type[SchemaT],
    temperature: float,
    operation: str,
) -> SchemaT:
    """JSON-mode chat completion validated against a pydantic schema."""
    response = await _bounded(
        get_client().chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            response_format={"type": "json_object"},
            temperature=temperature
        ),
        operation
    )

    content = response.choices[0].message.content
    if not content:
        raise AIServiceError(f"{operation} failed: empty response from OpenAI")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise AIServiceError(f"{operation} failed: invalid JSON from OpenAI: {e}")
    if not isinstance(data, dict):
        raise AIServiceError(f"{operation} failed: expected a JSON object")

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise AIServiceError(f"{operation} failed: response did not match schema: {e}")


async def generate_embedding(text: str) -> List[float]:
    """Embedding vector for a canonical text."""
    response = await _bounded(
        get_client().embeddings.create(
            model=settings.OPENAI_EMBEDDING_MODEL,
            input=text
        ),
        "Embedding generation"
    )
    if not response.data:
        raise AIServiceError("Embedding generation failed: no vector returned")
    return list(response.data[0].embedding)


CANDIDATE_EXTRACTION_SCHEMA = """
{
  "name": "Full name",
  "email": "email@example.com",
  "phone": "phone number",
  "location": "city, country",
  "summary": "professional summary/objective",
  "skills": ["skill1", "skill2"],
  "experience": [
    {
      "title": "Job title",
      "company": "Company name",
      "location": "Location",
      "start_date": "Month Year",
      "end_date": "Month Year or Present",
      "description": "Responsibilities and achievements"
    }
  ],
  "education": [
    {
      "degree": "Degree name",
      "institution": "Institution name",
      "location": "Location",
      "graduation_date": "Month Year",
      "description": "Additional details if any"
    }
  ],
  "certifications": ["cert1", "cert2"]
}
"""


async def extract_candidate_info(cv_text: str) -> ExtractedCandidate:
    """
    Extract structured resume fields.

    Raises:
        AIServiceError: If the call fails or no candidate name can be found
    """
    user_prompt = f"""Extract structured information from this CV text:

{cv_text}

Return JSON with this exact structure:
{CANDIDATE_EXTRACTION_SCHEMA}
If a field is not found, use an empty string for strings and an empty array for arrays."""

    result = await complete_json(
        "You are an expert CV parser. Extract structured information accurately from CV text.",
        user_prompt,
        ExtractedCandidate,
        settings.OPENAI_EXTRACTION_TEMPERATURE,
        "Candidate extraction"
    )
    logger.info(f"Extracted candidate profile for {result.name} ({len(result.skills)} skills)")
    return result


async def extract_job_info(jd_text: str) -> ExtractedJob:
    """
    Extract structured job description fields.

    Raises:
        AIServiceError: If the call fails or no job title can be found
    """
    user_prompt = f"""Extract structured information from this job description:

{jd_text}

Return JSON with this exact structure:
{{
  "title": "Job title",
  "company": "Company name",
  "location": "Location",
  "salary_range": "Salary range if mentioned",
  "description": "Job description and responsibilities",
  "requirements": "Requirements and qualifications"
}}

If a field is not found, use an empty string."""

    result = await complete_json(
        "You are an expert job description parser. Extract structured information accurately.",
        user_prompt,
        ExtractedJob,
        settings.OPENAI_EXTRACTION_TEMPERATURE,
        "Job description extraction"
    )
    logger.info(f"Extracted job description: {result.title}")
    return result


async def analyze_candidate_match(
    candidate_text: str,
    job_description_text: str,
    candidate_name: str
) -> QualitativeAssessment:
    """
    Holistic assessment of one candidate against one job.

    Raises:
        AIServiceError: If the call fails or returns malformed data
    """
    user_prompt = f"""Analyze how well {candidate_name or 'this candidate'} matches the job description. Score strictly.

CANDIDATE PROFILE:
{candidate_text}

JOB DESCRIPTION:
{job_description_text}

Provide these scores (0-100 each):
1. match_score - overall fit, be conservative
2. skills_match - technical and soft skill alignment
3. experience_match - years and relevance of experience; read ALL work history entries
4. education_match - educational background alignment
5. industry_match - industry/domain relevance

Also provide:
- 3-5 strengths
- 3-5 weaknesses or missing qualifications
- a binary is_match decision: true (hire) or false (reject)
- a short recommendation and a detailed analysis

SCORING GUIDELINES:
- 90-100: Exceeds all requirements
- 80-89: Meets all requirements with some extras
- 70-79: Meets most requirements
- 60-69: Meets some requirements
- 50-59: Significant gaps
- Below 50: Major misalignment

Check whether the candidate has actually performed the responsibilities listed in the job description, not only related skills.

Respond with JSON in this exact format:
{{
  "match_score": number,
  "skills_match": number,
  "experience_match": number,
  "education_match": number,
  "industry_match": number,
  "strengths": ["..."],
  "weaknesses": ["..."],
  "recommendation": "string",
  "detailed_analysis": "string",
  "is_match": boolean
}}"""

    result = await complete_json(
        "You are an expert HR analyst specializing in candidate assessment and job matching.",
        user_prompt,
        QualitativeAssessment,
        settings.OPENAI_ANALYSIS_TEMPERATURE,
        "Candidate analysis"
    )
    logger.info(f"Qualitative score for {candidate_name}: {result.match_score}")
    return result
