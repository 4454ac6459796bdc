"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Mock Celery tasks
- A fake AI service and text extractor, so no external calls are made
"""

import re
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.database import Base, get_db
from app.core.storage import storage
from app.models import Candidate, CandidateStatus, JobPosting, MatchAnalysis
from app.schemas.ai import EducationEntry, ExperienceEntry, ExtractedCandidate, ExtractedJob, QualitativeAssessment
from app.services import ai_service, file_parser, record_shaper
from app.services.ai_service import AIServiceError
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

JOB_TITLE = "Backend Engineer"
JOB_VECTOR = [1.0, 0.0]
# Orthogonal to the job vector: geometric score 50
CANDIDATE_VECTOR = [0.0, 1.0]


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def disable_rate_limit(monkeypatch):
    """Tests never talk to Redis."""
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", False)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Stage uploads in a per-test directory so leftovers can be detected."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(storage, "base_dir", str(path))
    return path


@pytest.fixture
def mock_celery(monkeypatch):
    """
    Mock Celery task execution for testing without Redis.
    Executes tasks synchronously in tests, against the test database.
    """
    from app.tasks import cv_optimization_tasks

    def mock_delay(self, *args, **kwargs):
        """Execute task eagerly instead of queuing"""
        return self.apply(args=args, kwargs=kwargs)

    monkeypatch.setattr("celery.Task.delay", mock_delay)
    monkeypatch.setattr(cv_optimization_tasks, "SessionLocal", TestingSessionLocal)
    return mock_delay


class FakeAI:
    """
    Stand-in for the OpenAI-backed calls.

    Resume text conventions understood by the fake:
    - first line: candidate name
    - "skills: a, b"   -> extracted skills
    - "score=NN"       -> qualitative match score (default 70)
    - "FAIL"           -> candidate extraction raises AIServiceError
    Job description text containing "FAIL" makes job extraction fail.
    """

    def __init__(self):
        self.calls = []

    async def extract_candidate_info(self, cv_text):
        self.calls.append("extract_candidate")
        if "FAIL" in cv_text:
            raise AIServiceError("Candidate extraction failed: upstream error")
        lines = [line.strip() for line in cv_text.splitlines() if line.strip()]
        skills_match = re.search(r"skills:\s*(.+)", cv_text)
        skills = [s.strip() for s in skills_match.group(1).split(",")] if skills_match else []
        return ExtractedCandidate(
            name=lines[0],
            email=f"{lines[0].split()[0].lower()}@example.com",
            summary="Experienced professional",
            skills=skills,
            experience=[ExperienceEntry(title="Developer", company="Acme", description="Built APIs")],
            education=[EducationEntry(degree="BSc Computer Science", institution="State University")],
        )

    async def extract_job_info(self, jd_text):
        self.calls.append("extract_job")
        if "FAIL" in jd_text:
            raise AIServiceError("Job description extraction failed: upstream error")
        return ExtractedJob(
            title=JOB_TITLE,
            company="Acme",
            location="Remote",
            description=jd_text.strip(),
            requirements="Python, SQL",
        )

    async def analyze_candidate_match(self, candidate_text, job_description_text, candidate_name):
        self.calls.append("analyze")
        score_match = re.search(r"score=(\d+)", candidate_text)
        score = float(score_match.group(1)) if score_match else 70.0
        return QualitativeAssessment(
            match_score=score,
            skills_match=score,
            experience_match=60,
            education_match=80,
            industry_match=55,
            strengths=["Python"],
            weaknesses=["No Kubernetes"],
            recommendation="Interview",
            detailed_analysis="Solid backend background.",
            is_match=score >= 70,
        )

    async def generate_embedding(self, text):
        self.calls.append("embed")
        if text.startswith(JOB_TITLE):
            return list(JOB_VECTOR)
        return list(CANDIDATE_VECTOR)


@pytest.fixture
def fake_ai(monkeypatch):
    """Patch every AI call used by the pipelines with FakeAI."""
    fake = FakeAI()
    monkeypatch.setattr(ai_service, "extract_candidate_info", fake.extract_candidate_info)
    monkeypatch.setattr(ai_service, "extract_job_info", fake.extract_job_info)
    monkeypatch.setattr(ai_service, "analyze_candidate_match", fake.analyze_candidate_match)
    monkeypatch.setattr(ai_service, "generate_embedding", fake.generate_embedding)
    return fake


@pytest.fixture
def plain_text_parser(monkeypatch):
    """
    Treat every staged upload as UTF-8 text, whatever its extension, so PDF
    and DOCX uploads can be simulated with plain bytes.
    """
    def extract(file_path, file_name):
        with open(file_path, "rb") as f:
            text = f.read().decode("utf-8")
        if not text.strip():
            raise file_parser.FileParsingError(f"No text could be extracted from {file_name}.")
        return text

    monkeypatch.setattr(file_parser, "extract_text", extract)
    return extract


def _make_job_posting(db, title=JOB_TITLE, active=True):
    job_posting = JobPosting(
        title=title,
        company="Acme",
        description="Build and run backend services",
        requirements="Python, SQL",
        file_name="job.txt",
        is_active=active,
        embedding=record_shaper.serialize_embedding(JOB_VECTOR),
    )
    db.add(job_posting)
    db.commit()
    db.refresh(job_posting)
    return job_posting


def _make_candidate(db, job_posting, name, skills=(), score=None, status=CandidateStatus.PENDING, email=None):
    """Insert a candidate directly; score=None leaves it without an analysis."""
    candidate = Candidate(
        job_posting_id=job_posting.id,
        name=name,
        email=email,
        skills=list(skills),
        skills_text=record_shaper.skills_search_text(skills),
        experience=[],
        education=[],
        certifications=[],
        raw_text=f"{name} resume",
        file_name=f"{name.lower().replace(' ', '_')}.pdf",
        status=status,
    )
    db.add(candidate)
    db.flush()
    if score is not None:
        db.add(MatchAnalysis(
            candidate_id=candidate.id,
            job_posting_id=job_posting.id,
            match_score=score,
            strengths=[],
            weaknesses=[],
            is_match=score >= 70,
        ))
    db.commit()
    db.refresh(candidate)
    return candidate


@pytest.fixture
def job_posting_factory(db_session):
    def factory(**kwargs):
        return _make_job_posting(db_session, **kwargs)
    return factory


@pytest.fixture
def candidate_factory(db_session):
    def factory(job_posting, name, **kwargs):
        return _make_candidate(db_session, job_posting, name, **kwargs)
    return factory


@pytest.fixture
def active_job(db_session):
    return _make_job_posting(db_session)
