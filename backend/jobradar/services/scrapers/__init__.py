import logging
from typing import Dict, List, Optional

import httpx

from jobradar.schemas import FetchedJobListing
from jobradar.services.scrapers.base import BaseFetcher, strip_html
from jobradar.services.scrapers.greenhouse import GreenhouseFetcher
from jobradar.services.scrapers.lever import LeverFetcher
from jobradar.services.scrapers.ashby import AshbyFetcher
from jobradar.services.scrapers.smartrecruiters import SmartRecruitersFetcher
from jobradar.services.scrapers.renderer import PageRenderer, extract_visible_text

logger = logging.getLogger(__name__)

FETCHER_CLASSES = [GreenhouseFetcher, LeverFetcher, AshbyFetcher, SmartRecruitersFetcher]


class JobFetcher:
    """Dispatch a career page to the vendor fetcher for its ATS tag."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._fetchers: Dict[str, BaseFetcher] = {
            cls.ats_type: cls(transport) for cls in FETCHER_CLASSES
        }

    def supports(self, ats_type: Optional[str]) -> bool:
        return ats_type in self._fetchers

    async def fetch_listings(self, career_page_url: str, ats_type: Optional[str]) -> List[FetchedJobListing]:
        fetcher = self._fetchers.get(ats_type)
        if fetcher is None:
            logger.warning(f"Unsupported ATS type: {ats_type}")
            return []
        return await fetcher.fetch_jobs(career_page_url)


__all__ = [
    "BaseFetcher",
    "GreenhouseFetcher",
    "LeverFetcher",
    "AshbyFetcher",
    "SmartRecruitersFetcher",
    "JobFetcher",
    "PageRenderer",
    "extract_visible_text",
    "strip_html",
]
