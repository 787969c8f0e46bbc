"""
Tests for the HTTP API.

Requests go through httpx.AsyncClient over ASGITransport against the real
app; the database is the in-memory fixture and every LLM/HTTP collaborator
is replaced through app.dependency_overrides.

Run with: cd backend && pytest tests/test_api.py -v
"""
import json

import httpx
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def embedder():
    embedder = MagicMock()
    embedder.embed_job = AsyncMock(return_value=[1.0, 0.0])
    embedder.embed_candidate = AsyncMock(return_value=[1.0, 0.0])
    return embedder


@pytest.fixture
def coordinator():
    coordinator = MagicMock()
    coordinator.ingest_company = AsyncMock(return_value=[])
    return coordinator


@pytest.fixture
def scheduler(session_factory):
    from jobradar.scheduler import DiscoveryScheduler

    ingestion = MagicMock()
    ingestion.ingest_company = AsyncMock(return_value=[])
    return DiscoveryScheduler(ingestion, session_factory=session_factory, sleep=AsyncMock())


@pytest_asyncio.fixture
async def client(session_factory, jd_parser, embedder, mock_llm, coordinator, scheduler):
    from jobradar import dependencies
    from jobradar.database import get_db
    from jobradar.main import app
    from jobradar.schemas import ParsedResume
    from jobradar.services.candidates import CandidateService
    from jobradar.services.company_discovery import CompanyDiscoveryAgent
    from jobradar.services.jobs import JobService
    from jobradar.services.match_explanation import MatchExplainer

    async def override_get_db():
        async with session_factory() as session:
            yield session

    resume_parser = MagicMock()
    resume_parser.parse = AsyncMock(return_value=ParsedResume(
        skills=["Go"], total_experience_years=3.0, primary_role="Backend Engineer",
    ))
    job_service = JobService(jd_parser, embedder)
    candidate_service = CandidateService(resume_parser, embedder)

    app.dependency_overrides.update({
        get_db: override_get_db,
        dependencies.get_job_service: lambda: job_service,
        dependencies.get_candidate_service: lambda: candidate_service,
        dependencies.get_match_explainer: lambda: MatchExplainer(mock_llm),
        dependencies.get_ingestion_coordinator: lambda: coordinator,
        dependencies.get_discovery_scheduler: lambda: scheduler,
        dependencies.get_company_discovery_agent: lambda: CompanyDiscoveryAgent(mock_llm, query_delay_seconds=0),
    })
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


async def create_job(client, text="Backend Developer\nGo", apply_url="https://acme.com/j/1"):
    response = await client.post("/jobs", json={"text": text, "company_name": "Acme", "apply_url": apply_url})
    assert response.status_code == 200
    return response.json()


class TestHealthAndMetrics:
    """Tests for operational endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_metrics_exposed(self, client):
        await client.get("/health")
        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text

    def test_endpoint_label_skips_entries_without_path(self):
        """Mounted-router entries have no path and must not break the label lookup."""
        from starlette.routing import Match

        from jobradar.middleware.metrics import PrometheusMiddleware

        included = MagicMock(spec=["matches"])
        included.matches.return_value = (Match.FULL, {})
        route = MagicMock(spec=["matches", "path"])
        route.path = "/jobs/{job_id}"
        route.matches.return_value = (Match.FULL, {})
        request = MagicMock()
        request.url.path = "/jobs/abc"
        middleware = PrometheusMiddleware(app=MagicMock())

        request.app.routes = [included, route]
        assert middleware._get_endpoint(request) == "/jobs/{job_id}"

        request.app.routes = [included]
        assert middleware._get_endpoint(request) == "/jobs/abc"
        included.matches.assert_not_called()


class TestJobsAPI:
    """Tests for /jobs."""

    @pytest.mark.asyncio
    async def test_create_list_get(self, client):
        created = await create_job(client)

        assert created["is_new"] is True
        assert created["title"] == "Backend Engineer"
        assert created["parsed_jd"]["minExperience"] == 2

        listing = (await client.get("/jobs", params={"role": "backend"})).json()
        assert listing["total"] == 1

        job = (await client.get(f"/jobs/{created['id']}")).json()
        assert job["source"] == "manual"
        assert "embedding" not in job

    @pytest.mark.asyncio
    async def test_missing_job_is_404(self, client):
        response = await client.get("/jobs/nope")
        assert response.status_code == 404
        assert "nope" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_unknown_source_is_422(self, client):
        assert (await client.get("/jobs", params={"source": "rss"})).status_code == 422


class TestCandidatesAndMatching:
    """Tests for /candidates and /match."""

    @pytest.mark.asyncio
    async def test_candidate_round_trip(self, client):
        created = (await client.post("/candidates", json={"text": "Go developer"})).json()

        assert created["parsed_resume"]["primaryRole"] == "Backend Engineer"
        assert "embedding" not in created
        assert (await client.get(f"/candidates/{created['id']}")).status_code == 200
        assert len((await client.get("/candidates")).json()) == 1
        assert (await client.get("/candidates/cand_0_missing")).status_code == 404

    @pytest.mark.asyncio
    async def test_match_job_to_candidates(self, client):
        job = await create_job(client)
        candidate = (await client.post("/candidates", json={"text": "Go developer"})).json()

        response = await client.post("/match", json={"job_id": job["id"], "top_k": 5})

        assert response.status_code == 200
        assert response.json() == [{"id": candidate["id"], "score": 1.0, "percentage": 100, "rank": 1}]

    @pytest.mark.asyncio
    async def test_match_candidate_to_jobs_with_threshold(self, client, embedder):
        await create_job(client)
        embedder.embed_job.return_value = [0.0, 1.0]
        await create_job(client, text="Data Scientist", apply_url="https://acme.com/j/2")
        candidate = (await client.post("/candidates", json={"text": "Go developer"})).json()

        everything = (await client.post("/match/candidate", json={"candidate_id": candidate["id"]})).json()
        filtered = (await client.post(
            "/match/candidate", json={"candidate_id": candidate["id"], "min_score": 0.5}
        )).json()

        assert [m["percentage"] for m in everything] == [100, 50]
        assert len(filtered) == 1
        assert filtered[0]["rank"] == 1

    @pytest.mark.asyncio
    async def test_explain(self, client, mock_llm):
        job = await create_job(client)
        candidate = (await client.post("/candidates", json={"text": "Go developer"})).json()
        mock_llm.complete.return_value = json.dumps({
            "strengths": "Strong Go background.",
            "missingSkills": ["SQL"],
            "overallFit": "Strong Match - core skills align",
        })

        response = await client.post(f"/match/{job['id']}/explain/{candidate['id']}")

        assert response.status_code == 200
        assert response.json()["missingSkills"] == ["SQL"]

    @pytest.mark.asyncio
    async def test_explain_upstream_failure_is_502(self, client, mock_llm):
        job = await create_job(client)
        candidate = (await client.post("/candidates", json={"text": "Go developer"})).json()
        mock_llm.complete.return_value = "not json"

        response = await client.post(f"/match/{job['id']}/explain/{candidate['id']}")
        assert response.status_code == 502


class TestSavedJobsAPI:
    """Tests for /saved-jobs."""

    @pytest.mark.asyncio
    async def test_save_flow(self, client):
        job = await create_job(client)
        body = {"user_id": "u1", "job_id": job["id"], "notes": "looks good"}

        assert (await client.post("/saved-jobs", json=body)).status_code == 200
        assert (await client.post("/saved-jobs", json=body)).status_code == 409

        check = await client.get(f"/saved-jobs/check/{job['id']}", params={"user_id": "u1"})
        assert check.json() == {"saved": True}

        patched = await client.patch(f"/saved-jobs/{job['id']}", json={"user_id": "u1", "notes": "applied"})
        assert patched.json()["notes"] == "applied"

        saved = (await client.get("/saved-jobs", params={"user_id": "u1"})).json()
        assert saved[0]["job"]["id"] == job["id"]

        assert (await client.delete(f"/saved-jobs/{job['id']}", params={"user_id": "u1"})).status_code == 200
        assert (await client.delete(f"/saved-jobs/{job['id']}", params={"user_id": "u1"})).status_code == 404

    @pytest.mark.asyncio
    async def test_save_missing_job_is_404(self, client):
        response = await client.post("/saved-jobs", json={"user_id": "u1", "job_id": "nope"})
        assert response.status_code == 404


class TestDiscoveryAPI:
    """Tests for /discovery and /companies."""

    @pytest.mark.asyncio
    async def test_seed_and_list_companies(self, client):
        from jobradar.seed_companies import SEED_COMPANIES

        first = (await client.post("/discovery/seed")).json()
        second = (await client.post("/discovery/seed")).json()

        assert first == {"created": len(SEED_COMPANIES), "total": len(SEED_COMPANIES)}
        assert second["created"] == 0
        assert len((await client.get("/companies")).json()) == len(SEED_COMPANIES)
        assert (await client.get("/companies/stripe")).json()["name"] == "Stripe"
        assert (await client.get("/companies/nobody")).status_code == 404

    @pytest.mark.asyncio
    async def test_detect_ats(self, client):
        response = await client.post("/discovery/detect-ats", json={"url": "https://jobs.lever.co/acme"})
        assert response.json() == {"url": "https://jobs.lever.co/acme", "ats_type": "lever"}

    @pytest.mark.asyncio
    async def test_ingest_creates_company_from_homepage(self, client, coordinator):
        response = await client.post("/discovery/ingest", json={"homepage_url": "https://www.initech.com"})

        assert response.status_code == 200
        assert response.json()["company"] == "initech.com"
        assert response.json()["total"] == 0
        coordinator.ingest_company.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_ingest_requires_a_company(self, client):
        assert (await client.post("/discovery/ingest", json={})).status_code == 422
        assert (await client.post("/discovery/ingest", json={"company_name": "Nobody"})).status_code == 404

    @pytest.mark.asyncio
    async def test_run_and_overlap(self, client, scheduler):
        response = await client.post("/discovery/run", json={"target_successful": 3})
        assert response.status_code == 200
        assert response.json()["target_successful"] == 3

        scheduler.discovery_guard.try_acquire()
        assert (await client.post("/discovery/run")).status_code == 409
        status = (await client.get("/discovery/status")).json()
        assert status["discovery_running"] is True
        assert status["cleanup_running"] is False

    @pytest.mark.asyncio
    async def test_cleanup(self, client):
        response = await client.post("/discovery/cleanup")
        assert response.json() == {"deleted_jobs": 0, "deleted_companies": 0, "deleted_company_names": []}

    @pytest.mark.asyncio
    async def test_discover_companies_with_query(self, client, mock_llm):
        mock_llm.complete.return_value = json.dumps({
            "companies": [{"name": "Linear", "homepageUrl": "https://linear.app", "industry": "SaaS"}]
        })

        response = await client.post("/discovery/discover-companies", json={"query": "productivity tools"})

        assert response.json()["saved"] == 1
        assert response.json()["discovered"][0]["name"] == "Linear"
