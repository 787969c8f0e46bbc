"""
Service wiring for the API layer.

Each provider builds its service once per process (lru_cache) from the
shared LLM client and HTTP collaborators. Routers take them through
FastAPI's Depends, so tests swap any of them via app.dependency_overrides.
"""

from functools import lru_cache

from jobradar.services.candidates import CandidateService
from jobradar.services.company_discovery import CompanyDiscoveryAgent
from jobradar.services.discovery import CareerPageLocator
from jobradar.services.embeddings import EmbeddingService
from jobradar.services.ingestion import (
    IngestionCoordinator,
    JobIngestionService,
    UniversalIngestionService,
)
from jobradar.services.jd_parser import JDParser
from jobradar.services.jobs import JobService
from jobradar.services.llm import LLMClient
from jobradar.services.llm_extractor import LLMJobExtractor
from jobradar.services.match_explanation import MatchExplainer
from jobradar.services.resume_parser import ResumeParser
from jobradar.services.scrapers import JobFetcher, PageRenderer
from jobradar.scheduler import DiscoveryScheduler


@lru_cache
def get_llm_client() -> LLMClient:
    return LLMClient()


@lru_cache
def get_career_page_locator() -> CareerPageLocator:
    return CareerPageLocator()


@lru_cache
def get_job_fetcher() -> JobFetcher:
    return JobFetcher()


@lru_cache
def get_page_renderer() -> PageRenderer:
    return PageRenderer()


@lru_cache
def get_jd_parser() -> JDParser:
    return JDParser(get_llm_client())


@lru_cache
def get_embedding_service() -> EmbeddingService:
    return EmbeddingService(get_llm_client())


@lru_cache
def get_ats_ingestion() -> JobIngestionService:
    return JobIngestionService(
        get_jd_parser(), get_career_page_locator(), get_job_fetcher(), get_embedding_service()
    )


@lru_cache
def get_universal_ingestion() -> UniversalIngestionService:
    return UniversalIngestionService(
        get_jd_parser(),
        get_career_page_locator(),
        get_page_renderer(),
        LLMJobExtractor(get_llm_client()),
        get_embedding_service(),
    )


@lru_cache
def get_ingestion_coordinator() -> IngestionCoordinator:
    return IngestionCoordinator(get_ats_ingestion(), get_universal_ingestion())


@lru_cache
def get_discovery_scheduler() -> DiscoveryScheduler:
    return DiscoveryScheduler(get_ingestion_coordinator())


@lru_cache
def get_candidate_service() -> CandidateService:
    return CandidateService(ResumeParser(get_llm_client()), get_embedding_service())


@lru_cache
def get_job_service() -> JobService:
    return JobService(get_jd_parser(), get_embedding_service())


@lru_cache
def get_match_explainer() -> MatchExplainer:
    return MatchExplainer(get_llm_client())


@lru_cache
def get_company_discovery_agent() -> CompanyDiscoveryAgent:
    return CompanyDiscoveryAgent(get_llm_client())
