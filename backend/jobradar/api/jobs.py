from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from jobradar.database import get_db
from jobradar.dependencies import get_job_service
from jobradar.schemas import IngestedJob, JobCreate, JobListResponse, JobResponse
from jobradar.services.jobs import JobService, LIST_LIMIT

router = APIRouter()


@router.post("", response_model=IngestedJob)
async def create_job(
    payload: JobCreate,
    db: AsyncSession = Depends(get_db),
    service: JobService = Depends(get_job_service),
):
    return await service.create_job(db, payload)


@router.get("", response_model=JobListResponse)
async def list_jobs(
    role: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    source: Optional[str] = Query(None),
    limit: int = Query(LIST_LIMIT, ge=1, le=LIST_LIMIT),
    db: AsyncSession = Depends(get_db),
    service: JobService = Depends(get_job_service),
):
    jobs = await service.list_jobs(db, role=role, location=location, source=source, limit=limit)
    return JobListResponse(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        total=len(jobs),
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    service: JobService = Depends(get_job_service),
):
    job = await service.get_job(db, job_id)
    return JobResponse.model_validate(job)
