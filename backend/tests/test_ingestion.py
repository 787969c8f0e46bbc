"""
Tests for the ingestion pipeline: career page resolution, deduplication,
per-job failure isolation and check stamping.

Run with: cd backend && pytest tests/test_ingestion.py -v
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from sqlalchemy import func, select


def listing(title, apply_url, description=None, location="Remote", origin="greenhouse"):
    from jobradar.schemas import FetchedJobListing

    return FetchedJobListing(
        title=title,
        location=location,
        description=description if description is not None else f"{title}\nBuild things.",
        apply_url=apply_url,
        origin=origin,
    )


def make_fetcher(listings):
    fetcher = MagicMock()
    fetcher.supports = MagicMock(side_effect=lambda ats: ats in {"greenhouse", "lever", "ashby", "smartrecruiters"})
    fetcher.fetch_listings = AsyncMock(return_value=listings)
    return fetcher


def make_locator(career_page_url=None):
    locator = MagicMock()
    locator.locate = AsyncMock(return_value=career_page_url)
    return locator


async def add_company(db, name="Acme", career_page_url=None, ats_type=None):
    from jobradar.models import Company

    company = Company(
        name=name,
        homepage_url=f"https://{name.lower()}.com",
        career_page_url=career_page_url,
        ats_type=ats_type,
    )
    db.add(company)
    await db.commit()
    return company


async def count_jobs(db):
    from jobradar.models import Job

    return (await db.execute(select(func.count(Job.id)))).scalar()


class TestAtsIngestion:
    """Tests for JobIngestionService."""

    @pytest.mark.asyncio
    async def test_ingests_and_deduplicates(self, db_session, jd_parser):
        """Running the same company twice stores each posting once."""
        from jobradar.services.ingestion import JobIngestionService

        listings = [
            listing("Backend Engineer", "https://boards.greenhouse.io/acme/jobs/1"),
            listing("Data Scientist", "https://boards.greenhouse.io/acme/jobs/2"),
        ]
        service = JobIngestionService(jd_parser, make_locator(), make_fetcher(listings))
        company = await add_company(db_session, career_page_url="https://boards.greenhouse.io/acme")

        first = await service.ingest_company(db_session, company)
        second = await service.ingest_company(db_session, company)

        assert [j.is_new for j in first] == [True, True]
        assert [j.is_new for j in second] == [False, False]
        assert [j.id for j in first] == [j.id for j in second]
        assert first[0].source == "ats_api"
        assert first[0].title == "Backend Engineer"
        assert await count_jobs(db_session) == 2

    @pytest.mark.asyncio
    async def test_stored_job_carries_normalized_fields(self, db_session):
        from jobradar.models import Job
        from jobradar.schemas import ParsedJobDescription
        from jobradar.services.ingestion import JobIngestionService

        parser = MagicMock()
        parser.parse = AsyncMock(return_value=ParsedJobDescription(
            role="Senior Front-End Developer", skills=["React", "react", "CSS"], location="WFH",
        ))
        service = JobIngestionService(
            parser, make_locator(), make_fetcher([listing("Sr FE", "https://jobs.lever.co/acme/1")])
        )
        company = await add_company(db_session, career_page_url="https://jobs.lever.co/acme")

        result = await service.ingest_company(db_session, company)

        job = (await db_session.execute(select(Job))).scalar_one()
        assert result[0].title == "Frontend Engineer"
        assert job.parsed_jd["role"] == "Frontend Engineer"
        assert job.parsed_jd["skills"] == ["React", "CSS"]
        assert job.parsed_jd["location"] == "Remote"
        assert job.company_name == "Acme"
        assert job.embedding is None

    @pytest.mark.asyncio
    async def test_listing_without_description_parses_header_text(self, db_session, jd_parser):
        from jobradar.services.ingestion import JobIngestionService

        service = JobIngestionService(
            jd_parser,
            make_locator(),
            make_fetcher([listing("QA Engineer", "https://jobs.smartrecruiters.com/Acme/1", description="")]),
        )
        company = await add_company(db_session, career_page_url="https://jobs.smartrecruiters.com/Acme")

        await service.ingest_company(db_session, company)

        text = jd_parser.parse.call_args[0][0]
        assert text.startswith("Title: QA Engineer\nCompany: Acme\nLocation: Remote")

    @pytest.mark.asyncio
    async def test_failing_job_is_skipped(self, db_session, jd_parser):
        """One bad posting never aborts the rest of the company."""
        from jobradar.exceptions import UpstreamFailure
        from jobradar.services.ingestion import JobIngestionService

        good = jd_parser.parse.side_effect

        def flaky(text):
            if text.startswith("Broken"):
                raise UpstreamFailure("model returned garbage")
            return good(text)

        jd_parser.parse.side_effect = flaky
        listings = [
            listing("Backend Engineer", "https://boards.greenhouse.io/acme/jobs/1"),
            listing("Broken Role", "https://boards.greenhouse.io/acme/jobs/2"),
            listing("Data Scientist", "https://boards.greenhouse.io/acme/jobs/3"),
        ]
        service = JobIngestionService(jd_parser, make_locator(), make_fetcher(listings))
        company = await add_company(db_session, career_page_url="https://boards.greenhouse.io/acme")

        result = await service.ingest_company(db_session, company)

        assert [j.title for j in result] == ["Backend Engineer", "Data Scientist"]
        assert await count_jobs(db_session) == 2
        assert company.last_checked_at is not None

    @pytest.mark.asyncio
    async def test_insert_race_reports_existing(self, db_session, jd_parser):
        """A unique-constraint collision on insert is reported as an existing job."""
        from jobradar.services.ingestion import JobIngestionService

        listings = [listing("Backend Engineer", "https://boards.greenhouse.io/acme/jobs/1")]
        service = JobIngestionService(jd_parser, make_locator(), make_fetcher(listings))
        company = await add_company(db_session, career_page_url="https://boards.greenhouse.io/acme")
        first = await service.ingest_company(db_session, company)

        # The pre-insert check misses the row another writer just committed
        missed = AsyncMock(return_value=None)
        with patch("jobradar.services.ingestion.find_job_by_hash", missed):
            second = await service.ingest_company(db_session, company)

        missed.assert_awaited_once()
        assert second[0].is_new is False
        assert second[0].id == first[0].id
        assert await count_jobs(db_session) == 1

    @pytest.mark.asyncio
    async def test_embedding_failure_stores_job_without_vector(self, db_session, jd_parser):
        from jobradar.exceptions import UpstreamFailure
        from jobradar.models import Job
        from jobradar.services.ingestion import JobIngestionService

        embedder = MagicMock()
        embedder.embed_job = AsyncMock(side_effect=UpstreamFailure("quota"))
        service = JobIngestionService(
            jd_parser,
            make_locator(),
            make_fetcher([listing("Backend Engineer", "https://boards.greenhouse.io/acme/jobs/1")]),
            embedder,
        )
        company = await add_company(db_session, career_page_url="https://boards.greenhouse.io/acme")

        result = await service.ingest_company(db_session, company)

        assert result[0].is_new is True
        job = (await db_session.execute(select(Job))).scalar_one()
        assert job.embedding is None


class TestCareerPageResolution:
    """Tests for career page caching and ATS tagging."""

    @pytest.mark.asyncio
    async def test_no_career_page_still_stamps_check(self, db_session, jd_parser):
        from jobradar.services.ingestion import JobIngestionService

        fetcher = make_fetcher([])
        service = JobIngestionService(jd_parser, make_locator(None), fetcher)
        company = await add_company(db_session)

        assert await service.ingest_company(db_session, company) == []
        assert company.last_checked_at is not None
        assert company.career_page_url is None
        fetcher.fetch_listings.assert_not_called()

    @pytest.mark.asyncio
    async def test_discovered_page_cached_and_ats_tagged(self, db_session, jd_parser):
        from jobradar.services.ingestion import JobIngestionService

        locator = make_locator("https://jobs.lever.co/acme")
        fetcher = make_fetcher([])
        service = JobIngestionService(jd_parser, locator, fetcher)
        company = await add_company(db_session)

        await service.ingest_company(db_session, company)
        await service.ingest_company(db_session, company)

        assert company.career_page_url == "https://jobs.lever.co/acme"
        assert company.ats_type == "lever"
        locator.locate.assert_awaited_once()
        fetcher.fetch_listings.assert_awaited_with("https://jobs.lever.co/acme", "lever")

    @pytest.mark.asyncio
    async def test_known_ats_type_not_overwritten(self, db_session, jd_parser):
        from jobradar.services.ingestion import JobIngestionService

        service = JobIngestionService(jd_parser, make_locator(), make_fetcher([]))
        company = await add_company(
            db_session, career_page_url="https://jobs.lever.co/acme", ats_type="ashby"
        )

        await service.ingest_company(db_session, company)
        assert company.ats_type == "ashby"

    @pytest.mark.asyncio
    async def test_unknown_host_leaves_ats_type_unset(self, db_session, jd_parser):
        from jobradar.services.ingestion import JobIngestionService

        service = JobIngestionService(jd_parser, make_locator(), make_fetcher([]))
        company = await add_company(db_session, career_page_url="https://acme.com/careers")

        await service.ingest_company(db_session, company)
        assert company.ats_type is None


class TestUniversalIngestion:
    """Tests for the render + extract path."""

    def make_service(self, jd_parser, page_text, extracted):
        from jobradar.services.ingestion import UniversalIngestionService

        renderer = MagicMock()
        renderer.render_text = AsyncMock(return_value=page_text)
        extractor = MagicMock()
        extractor.extract_jobs = AsyncMock(return_value=extracted)
        return UniversalIngestionService(jd_parser, make_locator(), renderer, extractor), extractor

    @pytest.mark.asyncio
    async def test_relative_apply_urls_resolved(self, db_session, jd_parser):
        extracted = [
            listing("Backend Engineer", "/jobs/1", origin="llm_extraction"),
            listing("Designer", "", origin="llm_extraction"),
        ]
        service, _ = self.make_service(jd_parser, "Open roles " * 50, extracted)
        company = await add_company(db_session, career_page_url="https://acme.com/careers")

        result = await service.ingest_company(db_session, company)

        assert [j.apply_url for j in result] == ["https://acme.com/jobs/1", "https://acme.com/careers"]
        assert {j.source for j in result} == {"company_website"}

    @pytest.mark.asyncio
    async def test_short_page_skips_extraction(self, db_session, jd_parser):
        service, extractor = self.make_service(jd_parser, "Loading...", [])
        company = await add_company(db_session, career_page_url="https://acme.com/careers")

        assert await service.ingest_company(db_session, company) == []
        extractor.extract_jobs.assert_not_called()

    @pytest.mark.asyncio
    async def test_render_failure_returns_empty(self, db_session, jd_parser):
        service, extractor = self.make_service(jd_parser, None, [])
        company = await add_company(db_session, career_page_url="https://acme.com/careers")

        assert await service.ingest_company(db_session, company) == []
        assert company.last_checked_at is not None


class TestIngestionCoordinator:
    """Tests for picking a strategy per company."""

    def make_coordinator(self, strategy, ats_result=None, universal_result=None, locator=None):
        from jobradar.services.ingestion import IngestionCoordinator

        ats = MagicMock()
        ats.fetcher = make_fetcher([])
        ats.ingest_company = AsyncMock(return_value=ats_result or [])
        ats.mark_checked = AsyncMock()
        ats.resolve_career_page = AsyncMock(return_value=locator)
        universal = MagicMock()
        universal.ingest_company = AsyncMock(return_value=universal_result or [])
        return IngestionCoordinator(ats, universal, strategy=strategy), ats, universal

    @pytest.mark.asyncio
    async def test_auto_uses_ats_for_supported_vendor(self, db_session):
        coordinator, ats, universal = self.make_coordinator("auto")
        company = await add_company(db_session, career_page_url="https://boards.greenhouse.io/acme")

        await coordinator.ingest_company(db_session, company)

        ats.ingest_company.assert_awaited_once()
        universal.ingest_company.assert_not_called()

    @pytest.mark.asyncio
    async def test_auto_falls_back_to_universal(self, db_session):
        coordinator, ats, universal = self.make_coordinator("auto")
        company = await add_company(db_session, career_page_url="https://acme.wd1.myworkdayjobs.com/ext")

        await coordinator.ingest_company(db_session, company)

        universal.ingest_company.assert_awaited_once()
        ats.ingest_company.assert_not_called()

    @pytest.mark.asyncio
    async def test_auto_without_career_page_marks_checked(self, db_session):
        coordinator, ats, universal = self.make_coordinator("auto", locator=None)
        company = await add_company(db_session)

        assert await coordinator.ingest_company(db_session, company) == []
        ats.mark_checked.assert_awaited_once()
        ats.ingest_company.assert_not_called()
        universal.ingest_company.assert_not_called()

    @pytest.mark.asyncio
    async def test_forced_strategies(self, db_session):
        company = await add_company(db_session, career_page_url="https://boards.greenhouse.io/acme")

        coordinator, ats, universal = self.make_coordinator("universal")
        await coordinator.ingest_company(db_session, company)
        universal.ingest_company.assert_awaited_once()

        coordinator, ats, universal = self.make_coordinator("ats")
        await coordinator.ingest_company(db_session, company)
        ats.ingest_company.assert_awaited_once()
