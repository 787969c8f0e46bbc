"""
Job Ingestion - company record in, deduplicated Job rows out

Two strategies share one pipeline:
    JobIngestionService        vendor ATS API -> listings        (source "ats_api")
    UniversalIngestionService  rendered page -> LLM -> listings  (source "company_website")

Per company:
    1. Resolve the career page (cached on the company, discovered once)
    2. Re-detect the ATS tag while it is unset or "other"
    3. Collect listings with the strategy
    4. For each listing: parse -> normalize + hash -> create or return existing
    5. Stamp company.last_checked_at, whatever happened above

Deduplication:
    job_hash carries a unique constraint. The select-then-insert race is
    backstopped by catching IntegrityError on insert and re-reading the row,
    which is then reported with is_new=False.

Failure isolation:
    A failing listing is logged and rolled back on its own; it never aborts
    the rest of the company. No career page is a normal outcome, not an error.
"""

import logging
from typing import List, Optional, Tuple
from urllib.parse import urljoin, urlparse

from sqlalchemy.ext.asyncio import AsyncSession

from jobradar.config import get_settings
from jobradar.database import utcnow
from jobradar.exceptions import UpstreamFailure
from jobradar.middleware.metrics import record_job_ingested
from jobradar.models import Company, Job
from jobradar.schemas import FetchedJobListing, IngestedJob, ParsedJobDescription
from jobradar.services.discovery import CareerPageLocator, detect_ats
from jobradar.services.embeddings import EmbeddingService
from jobradar.services.jd_parser import JDParser
from jobradar.services.jobs import find_job_by_hash, insert_job
from jobradar.services.llm_extractor import LLMJobExtractor
from jobradar.services.normalization import normalize
from jobradar.services.scrapers import JobFetcher, PageRenderer

logger = logging.getLogger(__name__)
settings = get_settings()

MIN_PAGE_TEXT_CHARS = 100


def listing_to_text(listing: FetchedJobListing, company_name: str) -> str:
    return (
        f"Title: {listing.title}\n"
        f"Company: {company_name}\n"
        f"Location: {listing.location}\n"
        f"Description: {listing.description}"
    ).strip()


def resolve_apply_url(apply_url: str, career_page_url: str) -> str:
    """Absolute apply URL; relative ones resolve against the career page origin."""
    if not apply_url:
        return career_page_url
    if apply_url.startswith("http"):
        return apply_url
    parsed = urlparse(career_page_url)
    if not parsed.scheme or not parsed.netloc:
        return career_page_url
    return urljoin(f"{parsed.scheme}://{parsed.netloc}", apply_url)


class IngestionPipeline:
    """Shared steps; subclasses supply collect_listings() and a source tag."""

    source: str = "company_website"

    def __init__(
        self,
        jd_parser: JDParser,
        locator: CareerPageLocator,
        embedder: Optional[EmbeddingService] = None,
    ):
        self.jd_parser = jd_parser
        self.locator = locator
        self.embedder = embedder

    async def collect_listings(
        self, company_name: str, career_page_url: str, ats_type: Optional[str]
    ) -> List[Tuple[FetchedJobListing, str]]:
        """(listing, text to parse) pairs for one company."""
        raise NotImplementedError

    def listing_apply_url(self, listing: FetchedJobListing, career_page_url: str) -> str:
        return listing.apply_url

    async def ingest_company(self, db: AsyncSession, company: Company) -> List[IngestedJob]:
        # Plain values survive the rollbacks below, ORM attributes do not
        company_name = company.name
        logger.info(f"Starting {self.source} ingestion for company: {company_name}")

        try:
            career_page_url = await self.resolve_career_page(db, company)
            if not career_page_url:
                return []
            ats_type = await self.refresh_ats_type(db, company, career_page_url)

            listings = await self.collect_listings(company_name, career_page_url, ats_type)
            results = []
            for listing, text in listings:
                apply_url = self.listing_apply_url(listing, career_page_url)
                try:
                    ingested = await self.store_job(db, company_name, listing, text, apply_url)
                except Exception:
                    logger.exception(f"Failed to process job '{listing.title}' for {company_name}")
                    await db.rollback()
                    continue
                record_job_ingested(ingested.source, ingested.is_new)
                results.append(ingested)

            new_count = sum(1 for r in results if r.is_new)
            logger.info(f"Ingested {len(results)} jobs ({new_count} new) for {company_name}")
            return results
        except Exception:
            await db.rollback()
            raise
        finally:
            await self.mark_checked(db, company)

    async def mark_checked(self, db: AsyncSession, company: Company) -> None:
        company.last_checked_at = utcnow()
        await db.commit()
        await db.refresh(company)

    async def resolve_career_page(self, db: AsyncSession, company: Company) -> Optional[str]:
        if company.career_page_url:
            return company.career_page_url

        career_page_url = await self.locator.locate(company.homepage_url)
        if not career_page_url:
            logger.warning(f"Could not find career page for {company.name}")
            return None

        company.career_page_url = career_page_url
        await db.commit()
        logger.info(f"Discovered career page for {company.name}: {career_page_url}")
        return career_page_url

    async def refresh_ats_type(self, db: AsyncSession, company: Company, career_page_url: str) -> Optional[str]:
        if company.ats_type and company.ats_type != "other":
            return company.ats_type

        detected = detect_ats(career_page_url)
        if detected != "unknown":
            company.ats_type = detected
            await db.commit()
            logger.info(f"Updated ATS type for {company.name} to {detected}")
        return company.ats_type

    async def store_job(
        self,
        db: AsyncSession,
        company_name: str,
        listing: FetchedJobListing,
        text: str,
        apply_url: str,
    ) -> IngestedJob:
        parsed = await self.jd_parser.parse(text)
        normalized = normalize(company_name, parsed, apply_url, listing.location)

        existing = await find_job_by_hash(db, normalized.job_hash)
        if existing:
            return self._existing(existing, normalized.role, normalized.location, apply_url)

        stored = parsed.model_copy(
            update={
                "role": normalized.role,
                "skills": normalized.skills,
                "location": normalized.location,
            }
        )
        job = Job(
            job_hash=normalized.job_hash,
            raw_jd=text,
            parsed_jd=stored.to_storage(),
            embedding=await self._embed(stored),
            company_name=company_name,
            apply_url=apply_url,
            source=self.source,
        )
        existing = await insert_job(db, job)
        if existing:
            return self._existing(existing, normalized.role, normalized.location, apply_url)

        return IngestedJob(
            id=job.id,
            title=normalized.role,
            company_name=company_name,
            location=normalized.location,
            apply_url=apply_url,
            parsed_jd=stored,
            source=self.source,
            is_new=True,
        )

    async def _embed(self, parsed: ParsedJobDescription) -> Optional[List[float]]:
        if self.embedder is None or not settings.embed_ingested_jobs:
            return None
        try:
            return await self.embedder.embed_job(parsed)
        except UpstreamFailure as e:
            logger.warning(f"Embedding failed, storing job without vector: {e}")
            return None

    def _existing(self, job: Job, role: str, location: str, apply_url: str) -> IngestedJob:
        return IngestedJob(
            id=job.id,
            title=role,
            company_name=job.company_name,
            location=location,
            apply_url=apply_url,
            parsed_jd=ParsedJobDescription.model_validate(job.parsed_jd),
            source=job.source,
            is_new=False,
        )


class JobIngestionService(IngestionPipeline):
    """Structured ingestion through a vendor's public postings API."""

    source = "ats_api"

    def __init__(
        self,
        jd_parser: JDParser,
        locator: CareerPageLocator,
        fetcher: JobFetcher,
        embedder: Optional[EmbeddingService] = None,
    ):
        super().__init__(jd_parser, locator, embedder)
        self.fetcher = fetcher

    async def collect_listings(self, company_name, career_page_url, ats_type):
        listings = await self.fetcher.fetch_listings(career_page_url, ats_type)
        logger.info(f"Fetched {len(listings)} jobs from {company_name} (ATS: {ats_type})")
        # Some vendors list postings without a body; parse the header fields instead
        return [
            (listing, listing.description or listing_to_text(listing, company_name))
            for listing in listings
        ]


class UniversalIngestionService(IngestionPipeline):
    """Ingestion for any career page: headless render, then LLM extraction."""

    source = "company_website"

    def __init__(
        self,
        jd_parser: JDParser,
        locator: CareerPageLocator,
        renderer: PageRenderer,
        extractor: LLMJobExtractor,
        embedder: Optional[EmbeddingService] = None,
    ):
        super().__init__(jd_parser, locator, embedder)
        self.renderer = renderer
        self.extractor = extractor

    async def collect_listings(self, company_name, career_page_url, ats_type):
        page_text = await self.renderer.render_text(career_page_url)
        if not page_text or len(page_text) < MIN_PAGE_TEXT_CHARS:
            logger.warning(f"Failed to scrape or empty content: {career_page_url}")
            return []

        listings = await self.extractor.extract_jobs(page_text, career_page_url)
        if not listings:
            logger.info(f"No jobs found on {career_page_url}")
        return [(listing, listing_to_text(listing, company_name)) for listing in listings]

    def listing_apply_url(self, listing: FetchedJobListing, career_page_url: str) -> str:
        return resolve_apply_url(listing.apply_url, career_page_url)


class IngestionCoordinator:
    """
    Picks a strategy per company according to settings.discovery_strategy:
        auto       ATS path when the company's tag has a fetcher, else universal
        ats        always the ATS path
        universal  always the universal path
    """

    def __init__(
        self,
        ats_service: JobIngestionService,
        universal_service: UniversalIngestionService,
        strategy: Optional[str] = None,
    ):
        self.ats_service = ats_service
        self.universal_service = universal_service
        self.strategy = strategy or settings.discovery_strategy

    def choose(self, company: Company) -> IngestionPipeline:
        if self.strategy == "ats":
            return self.ats_service
        if self.strategy == "universal":
            return self.universal_service

        ats_type = company.ats_type
        if company.career_page_url and (not ats_type or ats_type == "other"):
            ats_type = detect_ats(company.career_page_url)
        if self.ats_service.fetcher.supports(ats_type):
            return self.ats_service
        return self.universal_service

    async def ingest_company(self, db: AsyncSession, company: Company) -> List[IngestedJob]:
        # auto needs the career page before it can pick a strategy
        if self.strategy == "auto" and not company.career_page_url:
            found = await self.ats_service.resolve_career_page(db, company)
            if not found:
                await self.ats_service.mark_checked(db, company)
                return []
        return await self.choose(company).ingest_company(db, company)
