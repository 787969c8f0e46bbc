"""
Discovery API - manual triggers for the company and job discovery pipeline.

Endpoints:
    POST /discovery/seed               Insert the curated seed companies
    POST /discovery/discover-companies Ask the LLM for more companies and save the new ones
    POST /discovery/ingest             Ingest one company now
    POST /discovery/run                Run a discovery batch now (409 if one is running)
    POST /discovery/cleanup            Run cleanup now (409 if one is running)
    GET  /discovery/status             Counts plus the run guard state
    POST /discovery/locate             Find the career page of a homepage
    POST /discovery/detect-ats         Classify a career page URL
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from jobradar.database import get_db
from jobradar.dependencies import (
    get_career_page_locator,
    get_company_discovery_agent,
    get_discovery_scheduler,
    get_ingestion_coordinator,
)
from jobradar.exceptions import ConflictError, NotFoundError, ValidationFailure
from jobradar.schemas import (
    BatchRunSummary,
    CleanupResult,
    DiscoverCompaniesRequest,
    DiscoveredCompany,
    DiscoveryStatus,
    IngestedJob,
    IngestRequest,
    RunRequest,
    UrlRequest,
)
from jobradar.seed_companies import SEED_COMPANIES
from jobradar.services.companies import discovery_status, get_or_create_company, seed_companies
from jobradar.services.company_discovery import CompanyDiscoveryAgent
from jobradar.services.discovery import CareerPageLocator, detect_ats
from jobradar.services.ingestion import IngestionCoordinator
from jobradar.scheduler import DiscoveryScheduler

logger = logging.getLogger(__name__)
router = APIRouter()


# ==============================================================================
# Response Models
# ==============================================================================

class SeedResponse(BaseModel):
    created: int
    total: int


class DiscoverCompaniesResponse(BaseModel):
    discovered: List[DiscoveredCompany]
    saved: int


class IngestResponse(BaseModel):
    company: str
    career_page_url: Optional[str] = None
    ats_type: Optional[str] = None
    jobs: List[IngestedJob]
    total: int
    new: int


class LocateResponse(BaseModel):
    url: str
    career_page_url: Optional[str] = None
    ats_type: Optional[str] = None


class DetectAtsResponse(BaseModel):
    url: str
    ats_type: str


# ==============================================================================
# Endpoints
# ==============================================================================

@router.post("/seed", response_model=SeedResponse)
async def seed(db: AsyncSession = Depends(get_db)):
    created = await seed_companies(db, SEED_COMPANIES)
    return SeedResponse(created=created, total=len(SEED_COMPANIES))


@router.post("/discover-companies", response_model=DiscoverCompaniesResponse)
async def discover_companies(
    request: DiscoverCompaniesRequest,
    db: AsyncSession = Depends(get_db),
    agent: CompanyDiscoveryAgent = Depends(get_company_discovery_agent),
):
    if request.query:
        discovered = await agent.discover_from_query(db, request.query)
    else:
        discovered = await agent.discover_companies(db, request.count)
    saved = await agent.save_discovered(db, discovered)
    return DiscoverCompaniesResponse(discovered=discovered, saved=saved)


@router.post("/ingest", response_model=IngestResponse)
async def ingest(
    request: IngestRequest,
    db: AsyncSession = Depends(get_db),
    coordinator: IngestionCoordinator = Depends(get_ingestion_coordinator),
):
    if not request.company_name and not request.homepage_url:
        raise ValidationFailure("company_name or homepage_url is required")

    company = await get_or_create_company(db, request.company_name, request.homepage_url)
    if company is None:
        raise NotFoundError(f"Company {request.company_name} not found")

    jobs = await coordinator.ingest_company(db, company)
    return IngestResponse(
        company=company.name,
        career_page_url=company.career_page_url,
        ats_type=company.ats_type,
        jobs=jobs,
        total=len(jobs),
        new=sum(1 for job in jobs if job.is_new),
    )


@router.post("/run", response_model=BatchRunSummary)
async def run_batch(
    request: Optional[RunRequest] = None,
    scheduler: DiscoveryScheduler = Depends(get_discovery_scheduler),
):
    target = request.target_successful if request else None
    summary = await scheduler.run_scheduled_batch(target)
    if summary is None:
        raise ConflictError("A discovery batch is already running")
    return summary


@router.post("/cleanup", response_model=CleanupResult)
async def cleanup(scheduler: DiscoveryScheduler = Depends(get_discovery_scheduler)):
    result = await scheduler.run_cleanup()
    if result is None:
        raise ConflictError("Cleanup is already running")
    return result


@router.get("/status", response_model=DiscoveryStatus)
async def status(
    db: AsyncSession = Depends(get_db),
    scheduler: DiscoveryScheduler = Depends(get_discovery_scheduler),
):
    counts = await discovery_status(db)
    return DiscoveryStatus(
        **counts,
        discovery_running=scheduler.discovery_guard.running,
        cleanup_running=scheduler.cleanup_guard.running,
    )


@router.post("/locate", response_model=LocateResponse)
async def locate(
    request: UrlRequest,
    locator: CareerPageLocator = Depends(get_career_page_locator),
):
    career_page_url = await locator.locate(request.url)
    return LocateResponse(
        url=request.url,
        career_page_url=career_page_url,
        ats_type=detect_ats(career_page_url) if career_page_url else None,
    )


@router.post("/detect-ats", response_model=DetectAtsResponse)
async def detect(request: UrlRequest):
    return DetectAtsResponse(url=request.url, ats_type=detect_ats(request.url))
