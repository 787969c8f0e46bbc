import logging
from datetime import timedelta
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urlparse

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobradar.config import get_settings
from jobradar.database import utcnow
from jobradar.exceptions import ValidationFailure
from jobradar.models import Company, Job

logger = logging.getLogger(__name__)
settings = get_settings()


async def list_companies(db: AsyncSession) -> List[Company]:
    result = await db.execute(select(Company).order_by(Company.name))
    return list(result.scalars().all())


async def get_company_by_name(db: AsyncSession, name: str) -> Optional[Company]:
    """Case-insensitive exact name lookup."""
    result = await db.execute(select(Company).where(func.lower(Company.name) == name.strip().lower()))
    return result.scalars().first()


async def add_company(db: AsyncSession, name: str, homepage_url: str) -> Optional[Company]:
    """Insert a company unless one with the same name (any casing) exists; returns the new row or None."""
    if await get_company_by_name(db, name):
        return None

    company = Company(name=name.strip(), homepage_url=homepage_url.strip())
    db.add(company)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        return None
    return company


async def seed_companies(db: AsyncSession, companies: Iterable[Tuple[str, str]]) -> int:
    created = 0
    for name, homepage_url in companies:
        if await add_company(db, name, homepage_url):
            created += 1
    logger.info(f"Seeded {created} new companies")
    return created


def name_from_homepage(homepage_url: str) -> str:
    url = homepage_url if "://" in homepage_url else f"https://{homepage_url}"
    host = urlparse(url).hostname or ""
    if host.startswith("www."):
        host = host[4:]
    if not host:
        raise ValidationFailure(f"Cannot derive a company name from {homepage_url}")
    return host


async def get_or_create_company(
    db: AsyncSession, name: Optional[str], homepage_url: Optional[str]
) -> Optional[Company]:
    """Look a company up by name, creating it from the homepage URL when missing."""
    company = await get_company_by_name(db, name) if name else None
    if company is None and homepage_url:
        company_name = name or name_from_homepage(homepage_url)
        company = await add_company(db, company_name, homepage_url)
        if company is None:
            company = await get_company_by_name(db, company_name)
    return company


async def discovery_status(db: AsyncSession) -> dict:
    cutoff = utcnow() - timedelta(hours=settings.freshness_window_hours)
    total = (await db.execute(select(func.count(Company.id)))).scalar() or 0
    with_page = (
        await db.execute(select(func.count(Company.id)).where(Company.career_page_url.is_not(None)))
    ).scalar() or 0
    checked_today = (
        await db.execute(select(func.count(Company.id)).where(Company.last_checked_at >= cutoff))
    ).scalar() or 0
    total_jobs = (await db.execute(select(func.count(Job.id)))).scalar() or 0
    return {
        "total_companies": total,
        "companies_with_career_page": with_page,
        "companies_checked_today": checked_today,
        "pending_companies": total - checked_today,
        "total_jobs": total_jobs,
    }
