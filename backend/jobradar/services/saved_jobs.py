import logging
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobradar.exceptions import ConflictError, NotFoundError
from jobradar.models import Job, SavedJob
from jobradar.schemas import JobResponse, SavedJobResponse

logger = logging.getLogger(__name__)


async def _find_saved(db: AsyncSession, user_id: str, job_id: str) -> Optional[SavedJob]:
    result = await db.execute(
        select(SavedJob).where(SavedJob.user_id == user_id, SavedJob.job_id == job_id)
    )
    return result.scalar_one_or_none()


async def save_job(db: AsyncSession, user_id: str, job_id: str, notes: Optional[str] = None) -> SavedJob:
    if await db.get(Job, job_id) is None:
        raise NotFoundError(f"Job with ID {job_id} not found")

    saved = SavedJob(user_id=user_id, job_id=job_id, notes=notes)
    db.add(saved)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError("Job already saved") from e

    logger.info(f"User {user_id} saved job {job_id}")
    return saved


async def unsave_job(db: AsyncSession, user_id: str, job_id: str) -> None:
    result = await db.execute(
        delete(SavedJob).where(SavedJob.user_id == user_id, SavedJob.job_id == job_id)
    )
    if not result.rowcount:
        await db.rollback()
        raise NotFoundError("Saved job not found")
    await db.commit()
    logger.info(f"User {user_id} unsaved job {job_id}")


async def list_saved_jobs(db: AsyncSession, user_id: str) -> List[SavedJobResponse]:
    """Newest first. A saved job whose job was cleaned up comes back with job=None."""
    result = await db.execute(
        select(SavedJob).where(SavedJob.user_id == user_id).order_by(SavedJob.created_at.desc())
    )
    saved_jobs = result.scalars().all()
    if not saved_jobs:
        return []

    jobs_result = await db.execute(select(Job).where(Job.id.in_([s.job_id for s in saved_jobs])))
    jobs = {job.id: job for job in jobs_result.scalars().all()}

    return [
        SavedJobResponse(
            id=saved.id,
            saved_at=saved.created_at,
            notes=saved.notes,
            job=JobResponse.model_validate(jobs[saved.job_id]) if saved.job_id in jobs else None,
        )
        for saved in saved_jobs
    ]


async def is_job_saved(db: AsyncSession, user_id: str, job_id: str) -> bool:
    return await _find_saved(db, user_id, job_id) is not None


async def update_notes(db: AsyncSession, user_id: str, job_id: str, notes: str) -> SavedJob:
    saved = await _find_saved(db, user_id, job_id)
    if saved is None:
        raise NotFoundError("Saved job not found")

    saved.notes = notes
    await db.commit()
    await db.refresh(saved)
    return saved


async def count_saved_jobs(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(select(func.count(SavedJob.id)).where(SavedJob.user_id == user_id))
    return result.scalar() or 0
