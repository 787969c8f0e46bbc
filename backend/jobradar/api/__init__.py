from fastapi import APIRouter
from jobradar.api import candidates, companies, discovery, jobs, match, saved_jobs

api_router = APIRouter()
api_router.include_router(discovery.router, prefix="/discovery", tags=["discovery"])
api_router.include_router(companies.router, prefix="/companies", tags=["companies"])
api_router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
api_router.include_router(candidates.router, prefix="/candidates", tags=["candidates"])
api_router.include_router(match.router, prefix="/match", tags=["match"])
api_router.include_router(saved_jobs.router, prefix="/saved-jobs", tags=["saved-jobs"])
