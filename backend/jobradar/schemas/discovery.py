from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Literal, Optional

RunStatus = Literal["success", "no_jobs", "no_career_page", "error"]


class CompanyRunLog(BaseModel):
    company: str
    status: RunStatus
    message: str
    jobs_found: int = 0
    new_jobs: int = 0
    career_page: Optional[str] = None
    timestamp: datetime


class BatchRunSummary(BaseModel):
    target_successful: int
    successful: int
    processed: int
    total_jobs: int
    total_new_jobs: int
    completed: bool
    logs: List[CompanyRunLog] = Field(default_factory=list)


class CleanupResult(BaseModel):
    deleted_jobs: int
    deleted_companies: int
    deleted_company_names: List[str] = Field(default_factory=list)


class IngestRequest(BaseModel):
    company_name: Optional[str] = None
    homepage_url: Optional[str] = None


class RunRequest(BaseModel):
    target_successful: Optional[int] = Field(None, ge=1)


class DiscoverCompaniesRequest(BaseModel):
    query: Optional[str] = None
    count: int = Field(30, ge=1, le=100)


class UrlRequest(BaseModel):
    url: str


class DiscoveryStatus(BaseModel):
    total_companies: int
    companies_with_career_page: int
    companies_checked_today: int
    pending_companies: int
    total_jobs: int
    discovery_running: bool
    cleanup_running: bool
