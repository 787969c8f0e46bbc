import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobradar.exceptions import NotFoundError, ValidationFailure
from jobradar.models import Job, JOB_SOURCES
from jobradar.schemas import IngestedJob, JobCreate, ParsedJobDescription
from jobradar.services.embeddings import EmbeddingService
from jobradar.services.jd_parser import JDParser
from jobradar.services.normalization import normalize

logger = logging.getLogger(__name__)

LIST_LIMIT = 50


async def find_job_by_hash(db: AsyncSession, job_hash: str) -> Optional[Job]:
    result = await db.execute(select(Job).where(Job.job_hash == job_hash))
    return result.scalar_one_or_none()


async def insert_job(db: AsyncSession, job: Job) -> Optional[Job]:
    """
    Commit a new job. Returns None when it was inserted, or the row that won
    when another writer committed the same hash between our check and insert.
    """
    job_hash = job.job_hash
    db.add(job)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        existing = await find_job_by_hash(db, job_hash)
        if existing is None:
            raise
        logger.info(f"Job {job_hash} was inserted concurrently, using existing row")
        return existing
    return None


class JobService:
    """Manual job creation and read access to stored jobs."""

    def __init__(self, jd_parser: JDParser, embedder: EmbeddingService):
        self.jd_parser = jd_parser
        self.embedder = embedder

    async def create_job(self, db: AsyncSession, payload: JobCreate) -> IngestedJob:
        """
        Parse pasted text and store it with source "manual".

        Goes through the same normalize + hash step as ingestion, so pasting a
        posting that was already ingested returns the existing row.
        """
        parsed = await self.jd_parser.parse(payload.text)
        normalized = normalize(payload.company_name, parsed, payload.apply_url)

        existing = await find_job_by_hash(db, normalized.job_hash)
        if existing:
            return self._existing(existing, normalized.role, normalized.location)

        stored = parsed.model_copy(
            update={"role": normalized.role, "skills": normalized.skills, "location": normalized.location}
        )
        job = Job(
            job_hash=normalized.job_hash,
            raw_jd=payload.text,
            parsed_jd=stored.to_storage(),
            embedding=await self.embedder.embed_job(stored),
            company_name=payload.company_name,
            apply_url=payload.apply_url,
            source="manual",
        )
        existing = await insert_job(db, job)
        if existing:
            return self._existing(existing, normalized.role, normalized.location)
        logger.info(f"Created manual job {job.id} ({normalized.role})")

        return IngestedJob(
            id=job.id,
            title=normalized.role,
            company_name=payload.company_name,
            location=normalized.location,
            apply_url=payload.apply_url,
            parsed_jd=stored,
            source="manual",
            is_new=True,
        )

    def _existing(self, job: Job, role: str, location: str) -> IngestedJob:
        return IngestedJob(
            id=job.id,
            title=role,
            company_name=job.company_name,
            location=location,
            apply_url=job.apply_url,
            parsed_jd=ParsedJobDescription.model_validate(job.parsed_jd),
            source=job.source,
            is_new=False,
        )

    async def list_jobs(
        self,
        db: AsyncSession,
        role: Optional[str] = None,
        location: Optional[str] = None,
        source: Optional[str] = None,
        limit: int = LIST_LIMIT,
    ) -> List[Job]:
        """Newest first; role and location match case-insensitively as substrings."""
        if source and source not in JOB_SOURCES:
            raise ValidationFailure(f"Unknown job source: {source}")

        query = select(Job).order_by(Job.created_at.desc()).limit(limit)
        if source:
            query = query.where(Job.source == source)
        if role:
            query = query.where(func.lower(Job.parsed_jd["role"].as_string()).contains(role.lower()))
        if location:
            query = query.where(
                func.lower(Job.parsed_jd["location"].as_string()).contains(location.lower())
            )

        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_job(self, db: AsyncSession, job_id: str) -> Job:
        job = await db.get(Job, job_id)
        if job is None:
            raise NotFoundError(f"Job with ID {job_id} not found")
        return job

    async def ensure_embedding(self, db: AsyncSession, job: Job) -> List[float]:
        """Embed a job stored without a vector (embedding failed or was disabled at ingestion)."""
        if job.embedding:
            return job.embedding

        job.embedding = await self.embedder.embed_job(ParsedJobDescription.model_validate(job.parsed_jd))
        await db.commit()
        logger.info(f"Backfilled embedding for job {job.id}")
        return job.embedding

    async def jobs_with_embeddings(self, db: AsyncSession) -> List[dict]:
        result = await db.execute(
            select(Job.id, Job.embedding).where(Job.embedding.is_not(None)).order_by(Job.created_at.desc())
        )
        return [{"id": row.id, "embedding": row.embedding} for row in result.all() if row.embedding]
