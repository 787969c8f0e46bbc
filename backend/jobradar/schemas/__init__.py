from jobradar.schemas.job import (
    FetchedJobListing,
    ParsedJobDescription,
    NormalizedJob,
    IngestedJob,
    JobCreate,
    JobResponse,
    JobListResponse,
)
from jobradar.schemas.candidate import ParsedResume, Candidate, CandidateCreate, CandidateResponse
from jobradar.schemas.match import (
    MatchResult,
    MatchRequest,
    CandidateMatchRequest,
    MatchResponse,
    MatchExplanation,
)
from jobradar.schemas.company import CompanySeed, CompanyResponse, DiscoveredCompany
from jobradar.schemas.discovery import (
    CompanyRunLog,
    BatchRunSummary,
    CleanupResult,
    IngestRequest,
    RunRequest,
    DiscoverCompaniesRequest,
    UrlRequest,
    DiscoveryStatus,
)
from jobradar.schemas.saved_job import SaveJobRequest, UpdateNotesRequest, SavedJobResponse

__all__ = [
    "FetchedJobListing",
    "ParsedJobDescription",
    "NormalizedJob",
    "IngestedJob",
    "JobCreate",
    "JobResponse",
    "JobListResponse",
    "ParsedResume",
    "Candidate",
    "CandidateCreate",
    "CandidateResponse",
    "MatchResult",
    "MatchRequest",
    "CandidateMatchRequest",
    "MatchResponse",
    "MatchExplanation",
    "CompanySeed",
    "CompanyResponse",
    "DiscoveredCompany",
    "CompanyRunLog",
    "BatchRunSummary",
    "CleanupResult",
    "IngestRequest",
    "RunRequest",
    "DiscoverCompaniesRequest",
    "UrlRequest",
    "DiscoveryStatus",
    "SaveJobRequest",
    "UpdateNotesRequest",
    "SavedJobResponse",
]
