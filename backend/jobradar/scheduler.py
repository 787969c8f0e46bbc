"""
Background Discovery Scheduler - periodic company sweeps and housekeeping

This module manages automated job discovery using APScheduler.

Discovery batch (every DISCOVERY_INTERVAL_HOURS, default 6):
    1. Select companies never checked or last checked over 24h ago,
       never-checked first, then oldest, capped at 50
    2. Ingest them one by one, 2s apart
    3. Stop once 10 companies produced at least one job; companies with
       zero jobs do not count towards the cap
    4. Failures are logged per company and the batch moves on

Cleanup (daily at CLEANUP_CRON_HOUR:00, default midnight):
    1. Delete jobs older than 7 days
    2. Delete companies left with no jobs (live count by company name)

Both routines sit behind a RunGuard: an invocation that overlaps a running
one is skipped, not queued.
"""

import asyncio
import logging
from datetime import timedelta
from typing import Awaitable, Callable, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from jobradar.config import get_settings
from jobradar.database import async_session, utcnow
from jobradar.middleware.metrics import record_company_outcome
from jobradar.models import Company, Job
from jobradar.schemas import BatchRunSummary, CleanupResult, CompanyRunLog

logger = logging.getLogger(__name__)
settings = get_settings()

MAX_REPORTED_COMPANY_NAMES = 20


class RunGuard:
    """Single-slot in-flight flag. Single event loop, so no lock is needed."""

    def __init__(self, name: str):
        self.name = name
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def try_acquire(self) -> bool:
        if self._running:
            return False
        self._running = True
        return True

    def release(self) -> None:
        self._running = False


class DiscoveryScheduler:
    def __init__(
        self,
        ingestion,
        session_factory: async_sessionmaker = async_session,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.ingestion = ingestion
        self.session_factory = session_factory
        self._sleep = sleep
        self.discovery_guard = RunGuard("discovery")
        self.cleanup_guard = RunGuard("cleanup")
        self._scheduler: Optional[AsyncIOScheduler] = None

    async def select_pending_companies(self, db: AsyncSession) -> List[str]:
        cutoff = utcnow() - timedelta(hours=settings.freshness_window_hours)
        result = await db.execute(
            select(Company.id)
            .where((Company.last_checked_at.is_(None)) | (Company.last_checked_at < cutoff))
            # NULLs first on every backend: False sorts before True
            .order_by(Company.last_checked_at.is_not(None), Company.last_checked_at.asc(), Company.id)
            .limit(settings.discovery_batch_size)
        )
        return [row[0] for row in result.all()]

    async def run_scheduled_batch(self, target_successful: Optional[int] = None) -> Optional[BatchRunSummary]:
        if not self.discovery_guard.try_acquire():
            logger.warning("Discovery batch is already running, skipping this iteration")
            return None

        target = target_successful or settings.max_successful_ingestions
        try:
            logger.info("Starting discovery batch")
            return await self._run_batch(target)
        finally:
            self.discovery_guard.release()
            logger.info("Discovery batch finished")

    async def _run_batch(self, target: int) -> BatchRunSummary:
        async with self.session_factory() as db:
            company_ids = await self.select_pending_companies(db)

        summary = BatchRunSummary(
            target_successful=target,
            successful=0,
            processed=0,
            total_jobs=0,
            total_new_jobs=0,
            completed=False,
        )
        if not company_ids:
            logger.info("No pending companies to check")
            return summary

        logger.info(f"Found {len(company_ids)} candidate companies to check")

        for index, company_id in enumerate(company_ids):
            if index > 0:
                await self._sleep(settings.politeness_delay_seconds)

            entry = await self._process_company(company_id)
            if entry is None:
                continue
            summary.processed += 1
            summary.logs.append(entry)
            summary.total_jobs += entry.jobs_found
            summary.total_new_jobs += entry.new_jobs
            record_company_outcome(entry.status)

            if entry.status == "success":
                summary.successful += 1
                logger.info(f"[{summary.successful}/{target}] {entry.company}: {entry.jobs_found} jobs found")
                if summary.successful >= target:
                    logger.info(f"Reached {target} successful ingestions, stopping")
                    break
            else:
                logger.info(f"{entry.company}: {entry.message} (not counted towards limit)")

        summary.completed = summary.successful >= target
        logger.info(f"Completed with {summary.successful} successful ingestions")
        return summary

    async def _process_company(self, company_id: str) -> Optional[CompanyRunLog]:
        async with self.session_factory() as db:
            company = await db.get(Company, company_id)
            if company is None:
                return None
            name = company.name

            try:
                jobs = await self.ingestion.ingest_company(db, company)
            except Exception as e:
                logger.exception(f"Failed to ingest company {name}")
                await db.rollback()
                return CompanyRunLog(
                    company=name,
                    status="error",
                    message=str(e)[:100],
                    timestamp=utcnow(),
                )

            career_page = company.career_page_url
            if jobs:
                new_jobs = sum(1 for j in jobs if j.is_new)
                return CompanyRunLog(
                    company=name,
                    status="success",
                    message=f"Found {len(jobs)} jobs ({new_jobs} new)",
                    jobs_found=len(jobs),
                    new_jobs=new_jobs,
                    career_page=career_page,
                    timestamp=utcnow(),
                )
            return CompanyRunLog(
                company=name,
                status="no_jobs" if career_page else "no_career_page",
                message="No jobs found on career page" if career_page else "Could not find career page",
                career_page=career_page,
                timestamp=utcnow(),
            )

    async def run_cleanup(self) -> Optional[CleanupResult]:
        if not self.cleanup_guard.try_acquire():
            logger.warning("Cleanup is already running, skipping this iteration")
            return None

        try:
            logger.info("Starting scheduled cleanup")
            async with self.session_factory() as db:
                cutoff = utcnow() - timedelta(days=settings.job_retention_days)
                deleted = await db.execute(delete(Job).where(Job.created_at < cutoff))
                deleted_jobs = deleted.rowcount or 0
                logger.info(f"Deleted {deleted_jobs} jobs older than {settings.job_retention_days} days")

                has_jobs = select(Job.id).where(Job.company_name == Company.name).exists()
                result = await db.execute(
                    select(Company.id, Company.name).where(~has_jobs).order_by(Company.name)
                )
                empty = result.all()
                if empty:
                    await db.execute(delete(Company).where(Company.id.in_([row.id for row in empty])))
                for row in empty:
                    logger.info(f"Deleted company with 0 jobs: {row.name}")

                await db.commit()

            logger.info(f"Cleanup completed: {deleted_jobs} jobs, {len(empty)} companies deleted")
            return CleanupResult(
                deleted_jobs=deleted_jobs,
                deleted_companies=len(empty),
                deleted_company_names=[row.name for row in empty][:MAX_REPORTED_COMPANY_NAMES],
            )
        finally:
            self.cleanup_guard.release()

    def start(self) -> None:
        """Start the background scheduler"""
        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self.run_scheduled_batch,
            trigger=IntervalTrigger(hours=settings.discovery_interval_hours),
            id="discover_jobs",
            replace_existing=True,
        )
        self._scheduler.add_job(
            self.run_cleanup,
            trigger=CronTrigger(hour=settings.cleanup_cron_hour, minute=0),
            id="cleanup_jobs",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(
            f"Scheduler started: discovery every {settings.discovery_interval_hours} hours, "
            f"cleanup daily at {settings.cleanup_cron_hour:02d}:00"
        )

    def stop(self) -> None:
        """Stop the background scheduler"""
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
