"""
Tests for the AI service adapter and its response schemas.

The OpenAI client is replaced by a small fake; no network calls are made.
"""

import asyncio
import json
from types import SimpleNamespace
import pytest
from openai import OpenAIError
from pydantic import ValidationError
from app.core.config import settings
from app.schemas.ai import CvAlignmentAnalysis, ExtractedCandidate, ExtractedJob, QualitativeAssessment
from app.services import ai_service
from app.services.ai_service import AIServiceError


class FakeCompletions:
    def __init__(self, content=None, error=None, delay=0.0):
        self.content = content
        self.error = error
        self.delay = delay
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeEmbeddings:
    def __init__(self, vector):
        self.vector = vector

    async def create(self, **kwargs):
        data = [SimpleNamespace(embedding=self.vector)] if self.vector is not None else []
        return SimpleNamespace(data=data)


def install_client(monkeypatch, completions=None, embeddings=None):
    client = SimpleNamespace(
        chat=SimpleNamespace(completions=completions or FakeCompletions("{}")),
        embeddings=embeddings or FakeEmbeddings([0.1, 0.2]),
    )
    monkeypatch.setattr(ai_service, "get_client", lambda: client)
    return client


class TestResponseSchemas:
    """Tests for default filling and required fields"""

    def test_nulls_become_defaults(self):
        candidate = ExtractedCandidate.model_validate({
            "name": "Jane Doe",
            "email": None,
            "skills": None,
            "experience": [{"title": "Engineer", "company": None}],
        })
        assert candidate.email == ""
        assert candidate.skills == []
        assert candidate.experience[0].company == ""
        assert candidate.certifications == []

    def test_blank_skills_dropped(self):
        candidate = ExtractedCandidate.model_validate({"name": "Jane", "skills": ["Python", " ", ""]})
        assert candidate.skills == ["Python"]

    def test_candidate_name_required(self):
        with pytest.raises(ValidationError):
            ExtractedCandidate.model_validate({"email": "a@b.com"})
        with pytest.raises(ValidationError):
            ExtractedCandidate.model_validate({"name": None})
        with pytest.raises(ValidationError):
            ExtractedCandidate.model_validate({"name": "   "})

    def test_job_title_required(self):
        with pytest.raises(ValidationError):
            ExtractedJob.model_validate({"company": "Acme"})

    def test_assessment_defaults(self):
        assessment = QualitativeAssessment.model_validate({"match_score": None})
        assert assessment.match_score == 0
        assert assessment.is_match is False
        assert assessment.recommendation == "No recommendation available"

    def test_alignment_defaults_nested(self):
        analysis = CvAlignmentAnalysis.model_validate({"keyword_matches": None})
        assert analysis.keyword_matches.missing == []
        assert analysis.experience_alignment.relevant_experience == []


class TestCompleteJson:
    """Tests for JSON-mode completions"""

    def test_valid_response(self, monkeypatch):
        payload = {"title": "Backend Engineer", "company": "Acme"}
        completions = FakeCompletions(json.dumps(payload))
        install_client(monkeypatch, completions=completions)

        result = asyncio.run(ai_service.extract_job_info("Backend Engineer at Acme"))

        assert result.title == "Backend Engineer"
        assert result.description == ""
        assert completions.requests[0]["response_format"] == {"type": "json_object"}
        assert completions.requests[0]["temperature"] == settings.OPENAI_EXTRACTION_TEMPERATURE

    def test_empty_content(self, monkeypatch):
        install_client(monkeypatch, completions=FakeCompletions(None))
        with pytest.raises(AIServiceError, match="empty response"):
            asyncio.run(ai_service.extract_job_info("text"))

    def test_malformed_json(self, monkeypatch):
        install_client(monkeypatch, completions=FakeCompletions("{not json"))
        with pytest.raises(AIServiceError, match="invalid JSON"):
            asyncio.run(ai_service.extract_candidate_info("text"))

    def test_non_object_json(self, monkeypatch):
        install_client(monkeypatch, completions=FakeCompletions("[1, 2]"))
        with pytest.raises(AIServiceError, match="expected a JSON object"):
            asyncio.run(ai_service.analyze_candidate_match("cv", "job", "Jane"))

    def test_schema_violation(self, monkeypatch):
        install_client(monkeypatch, completions=FakeCompletions(json.dumps({"email": "a@b.com"})))
        with pytest.raises(AIServiceError, match="did not match schema"):
            asyncio.run(ai_service.extract_candidate_info("text"))

    def test_api_error(self, monkeypatch):
        install_client(monkeypatch, completions=FakeCompletions(error=OpenAIError("rate limited")))
        with pytest.raises(AIServiceError, match="rate limited"):
            asyncio.run(ai_service.extract_job_info("text"))

    def test_timeout(self, monkeypatch):
        monkeypatch.setattr(settings, "AI_REQUEST_TIMEOUT_SECONDS", 0.01)
        install_client(monkeypatch, completions=FakeCompletions("{}", delay=1.0))
        with pytest.raises(AIServiceError, match="timed out"):
            asyncio.run(ai_service.extract_job_info("text"))


class TestGenerateEmbedding:
    """Tests for embedding calls"""

    def test_returns_vector(self, monkeypatch):
        install_client(monkeypatch, embeddings=FakeEmbeddings([0.5, -0.5]))
        assert asyncio.run(ai_service.generate_embedding("text")) == [0.5, -0.5]

    def test_no_vector(self, monkeypatch):
        install_client(monkeypatch, embeddings=FakeEmbeddings(None))
        with pytest.raises(AIServiceError):
            asyncio.run(ai_service.generate_embedding("text"))
