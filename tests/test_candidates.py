"""
Test suite for candidate endpoints.

Tests cover:
- Resume batch upload with partial failures
- Ranked, filtered, paginated listing
- Status and interview note updates
"""

import pytest
from app.models import Candidate, CandidateStatus


def resume(name, content):
    return ("files", (name, content.encode("utf-8"), "application/pdf"))


class TestCandidateUpload:
    """Tests for POST /candidates/upload"""

    def test_batch_with_one_failure(self, client, db_session, active_job, fake_ai, plain_text_parser, upload_dir):
        response = client.post("/api/v1/candidates/upload", files=[
            resume("alice.pdf", "Alice Smith\nskills: Python, SQL\nscore=85"),
            resume("bob.pdf", "Bob Jones\nFAIL"),
            resume("carol.pdf", "Carol White\nscore=60"),
        ])

        assert response.status_code == 200
        data = response.json()
        assert len(data["results"]) == 2
        assert len(data["errors"]) == 1
        assert data["errors"][0]["fileName"] == "bob.pdf"
        assert "upstream error" in data["errors"][0]["error"]

        first = data["results"][0]
        assert first["candidate"]["name"] == "Alice Smith"
        assert first["candidate"]["skills"] == ["Python", "SQL"]
        assert first["candidate"]["status"] == "pending"
        assert first["analysis"]["match_score"] == 85
        assert first["analysis"]["candidate_id"] == first["candidate"]["id"]
        assert data["results"][1]["candidate"]["name"] == "Carol White"

        assert db_session.query(Candidate).count() == 2
        assert list(upload_dir.iterdir()) == []

    def test_defaults_to_active_job(self, client, active_job, fake_ai, plain_text_parser):
        response = client.post("/api/v1/candidates/upload", files=[resume("a.pdf", "Ann Lee")])

        assert response.json()["results"][0]["candidate"]["job_posting_id"] == active_job.id

    def test_explicit_job_id(self, client, active_job, job_posting_factory, fake_ai, plain_text_parser):
        other = job_posting_factory(title="Data Engineer", active=False)

        response = client.post(
            "/api/v1/candidates/upload",
            files=[resume("a.pdf", "Ann Lee")],
            data={"job_id": str(other.id)}
        )

        assert response.json()["results"][0]["analysis"]["job_posting_id"] == other.id

    def test_unknown_job_id(self, client, active_job, fake_ai, plain_text_parser):
        response = client.post(
            "/api/v1/candidates/upload",
            files=[resume("a.pdf", "Ann Lee")],
            data={"job_id": "99999"}
        )

        assert response.status_code == 404
        assert fake_ai.calls == []

    def test_no_active_job(self, client, db_session, fake_ai, plain_text_parser):
        response = client.post("/api/v1/candidates/upload", files=[resume("a.pdf", "Ann Lee")])

        assert response.status_code == 400
        assert "No active job" in response.json()["detail"]
        assert db_session.query(Candidate).count() == 0

    def test_too_many_files(self, client, active_job, fake_ai, plain_text_parser, monkeypatch):
        from app.core.config import settings
        monkeypatch.setattr(settings, "MAX_CANDIDATE_FILES", 2)

        response = client.post("/api/v1/candidates/upload", files=[
            resume(f"c{i}.pdf", f"Person {i}") for i in range(3)
        ])

        assert response.status_code == 400
        assert fake_ai.calls == []

    def test_wrong_type_reported_per_file(self, client, active_job, fake_ai, plain_text_parser):
        response = client.post("/api/v1/candidates/upload", files=[
            ("files", ("notes.txt", b"Ann Lee", "text/plain")),
            resume("b.pdf", "Ben Ray"),
        ])

        data = response.json()
        assert [e["fileName"] for e in data["errors"]] == ["notes.txt"]
        assert len(data["results"]) == 1


@pytest.fixture
def ranked_candidates(active_job, candidate_factory):
    """Five candidates with mixed scores, skills and statuses."""
    return {
        "alice": candidate_factory(active_job, "Alice Smith", skills=["Python", "Data Engineering"], score=92),
        "bob": candidate_factory(active_job, "Bob Jones", skills=["Java"], score=75,
                                 status=CandidateStatus.SHORTLISTED, email="bob@corp.com"),
        "carol": candidate_factory(active_job, "Carol White", skills=["Software Engineering"], score=81),
        "dan": candidate_factory(active_job, "Dan Brown", skills=["Sales"], score=40,
                                 status=CandidateStatus.REJECTED),
        "erin": candidate_factory(active_job, "Erin Unscored", skills=["Python"]),
    }


class TestCandidateListing:
    """Tests for GET /candidates/"""

    def test_ordered_by_score_unscored_last(self, client, ranked_candidates):
        data = client.get("/api/v1/candidates/").json()

        names = [c["name"] for c in data["candidates"]]
        assert names == ["Alice Smith", "Carol White", "Bob Jones", "Dan Brown", "Erin Unscored"]
        assert data["total"] == 5
        assert data["hasMore"] is False
        assert data["candidates"][-1]["analysis"] is None

    def test_search_matches_skills_case_insensitive(self, client, ranked_candidates):
        data = client.get("/api/v1/candidates/", params={"search": "engineer"}).json()

        assert {c["name"] for c in data["candidates"]} == {"Alice Smith", "Carol White"}

    def test_search_matches_name_and_email(self, client, ranked_candidates):
        by_name = client.get("/api/v1/candidates/", params={"search": "jONES"}).json()
        by_email = client.get("/api/v1/candidates/", params={"search": "corp.com"}).json()

        assert [c["name"] for c in by_name["candidates"]] == ["Bob Jones"]
        assert [c["name"] for c in by_email["candidates"]] == ["Bob Jones"]

    def test_search_wildcards_are_literal(self, client, ranked_candidates):
        data = client.get("/api/v1/candidates/", params={"search": "%"}).json()

        assert data["total"] == 0

    def test_min_score_excludes_unscored(self, client, ranked_candidates):
        data = client.get("/api/v1/candidates/", params={"min_score": 80}).json()

        assert [c["name"] for c in data["candidates"]] == ["Alice Smith", "Carol White"]
        assert all(c["analysis"]["match_score"] >= 80 for c in data["candidates"])

    def test_score_range(self, client, ranked_candidates):
        data = client.get("/api/v1/candidates/", params={"min_score": 50, "max_score": 81}).json()

        assert [c["name"] for c in data["candidates"]] == ["Carol White", "Bob Jones"]

    def test_max_score_excludes_unscored(self, client, ranked_candidates):
        data = client.get("/api/v1/candidates/", params={"max_score": 100}).json()

        assert data["total"] == 4

    def test_status_filter(self, client, ranked_candidates):
        data = client.get("/api/v1/candidates/", params={"status": "shortlisted"}).json()

        assert [c["name"] for c in data["candidates"]] == ["Bob Jones"]

    def test_invalid_status_filter(self, client, ranked_candidates):
        response = client.get("/api/v1/candidates/", params={"status": "archived"})

        assert response.status_code == 422

    def test_job_filter(self, client, ranked_candidates, job_posting_factory, candidate_factory):
        other = job_posting_factory(title="Other", active=False)
        candidate_factory(other, "Zed Other", score=99)

        data = client.get("/api/v1/candidates/", params={"job_id": other.id}).json()

        assert [c["name"] for c in data["candidates"]] == ["Zed Other"]

    def test_pagination(self, client, ranked_candidates):
        page1 = client.get("/api/v1/candidates/", params={"page": 1, "limit": 2}).json()
        page3 = client.get("/api/v1/candidates/", params={"page": 3, "limit": 2}).json()

        assert [c["name"] for c in page1["candidates"]] == ["Alice Smith", "Carol White"]
        assert page1["total"] == 5
        assert page1["hasMore"] is True
        assert [c["name"] for c in page3["candidates"]] == ["Erin Unscored"]
        assert page3["hasMore"] is False

    def test_page_beyond_last(self, client, ranked_candidates):
        data = client.get("/api/v1/candidates/", params={"page": 10, "limit": 2}).json()

        assert data["candidates"] == []
        assert data["total"] == 5
        assert data["hasMore"] is False

    def test_huge_page_number_returns_empty_page(self, client, ranked_candidates):
        response = client.get("/api/v1/candidates/", params={"page": 10**18, "limit": 100})

        assert response.status_code == 200
        data = response.json()
        assert data["candidates"] == []
        assert data["total"] == 5
        assert data["hasMore"] is False

    @pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 101}, {"min_score": -1}])
    def test_invalid_paging_params(self, client, params):
        response = client.get("/api/v1/candidates/", params=params)

        assert response.status_code == 422


class TestCandidateDetail:
    """Tests for GET /candidates/{id}"""

    def test_get_with_analysis(self, client, ranked_candidates):
        alice = ranked_candidates["alice"]

        data = client.get(f"/api/v1/candidates/{alice.id}").json()

        assert data["name"] == "Alice Smith"
        assert data["analysis"]["match_score"] == 92
        assert data["raw_text"] == "Alice Smith resume"

    def test_get_without_analysis(self, client, ranked_candidates):
        erin = ranked_candidates["erin"]

        data = client.get(f"/api/v1/candidates/{erin.id}").json()

        assert data["analysis"] is None

    def test_get_nonexistent(self, client):
        response = client.get("/api/v1/candidates/99999")

        assert response.status_code == 404


class TestCandidateUpdates:
    """Tests for status and notes updates"""

    def test_update_status(self, client, ranked_candidates):
        alice = ranked_candidates["alice"]

        response = client.patch(f"/api/v1/candidates/{alice.id}/status", json={"status": "hired"})

        assert response.status_code == 200
        assert response.json()["status"] == "hired"

    def test_invalid_status_leaves_stored_status(self, client, ranked_candidates):
        bob = ranked_candidates["bob"]

        response = client.patch(f"/api/v1/candidates/{bob.id}/status", json={"status": "archived"})

        assert response.status_code == 422
        assert client.get(f"/api/v1/candidates/{bob.id}").json()["status"] == "shortlisted"

    def test_status_unknown_candidate(self, client):
        response = client.patch("/api/v1/candidates/99999/status", json={"status": "hired"})

        assert response.status_code == 404

    def test_update_notes(self, client, ranked_candidates):
        alice = ranked_candidates["alice"]

        response = client.patch(
            f"/api/v1/candidates/{alice.id}/notes",
            json={"interview_notes": "Strong system design answers."}
        )

        assert response.status_code == 200
        assert response.json()["interview_notes"] == "Strong system design answers."

    def test_clear_notes(self, client, ranked_candidates):
        alice = ranked_candidates["alice"]
        client.patch(f"/api/v1/candidates/{alice.id}/notes", json={"interview_notes": "temp"})

        response = client.patch(f"/api/v1/candidates/{alice.id}/notes", json={"interview_notes": None})

        assert response.json()["interview_notes"] is None

    def test_notes_too_long(self, client, ranked_candidates):
        from app.core.config import settings
        alice = ranked_candidates["alice"]

        response = client.patch(
            f"/api/v1/candidates/{alice.id}/notes",
            json={"interview_notes": "x" * (settings.MAX_NOTES_LENGTH + 1)}
        )

        assert response.status_code == 422

    def test_notes_unknown_candidate(self, client):
        response = client.patch("/api/v1/candidates/99999/notes", json={"interview_notes": "hi"})

        assert response.status_code == 404


class TestCandidateCrud:
    """Tests for direct candidate creation"""

    def test_unknown_status_coerced_to_pending(self, db_session, active_job):
        from app import crud
        from app.models import Candidate

        candidate = crud.candidate.create(db_session, Candidate(
            job_posting_id=active_job.id,
            name="Legacy Import",
            raw_text="text",
            file_name="legacy.pdf",
            status="archived",
        ))

        assert candidate.status == CandidateStatus.PENDING
