import logging
import re
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import httpx
from bs4 import BeautifulSoup

from jobradar.config import get_settings
from jobradar.schemas import FetchedJobListing

logger = logging.getLogger(__name__)
settings = get_settings()

_WHITESPACE = re.compile(r"\s+")


def strip_html(html: str) -> str:
    """Visible text of an HTML fragment with whitespace collapsed."""
    if not html:
        return ""
    text = BeautifulSoup(html, "html.parser").get_text(" ", strip=True)
    return _WHITESPACE.sub(" ", text).strip()


class BaseFetcher(ABC):
    """Base class for ATS vendor API fetchers"""

    ats_type: str = "unknown"
    slug_pattern: re.Pattern

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    def extract_slug(self, career_page_url: str) -> Optional[str]:
        match = self.slug_pattern.search(career_page_url)
        return match.group(1) if match else None

    @abstractmethod
    def api_url(self, slug: str) -> str:
        """Public postings endpoint for a board slug"""

    @abstractmethod
    def parse_jobs(self, data: Any, slug: str) -> List[FetchedJobListing]:
        """Map the vendor payload to common listings"""

    async def fetch_jobs(self, career_page_url: str) -> List[FetchedJobListing]:
        slug = self.extract_slug(career_page_url)
        if not slug:
            logger.warning(f"Could not extract {self.ats_type} board from: {career_page_url}")
            return []

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    self.api_url(slug),
                    timeout=settings.ats_api_timeout_seconds,
                )
                response.raise_for_status()
                jobs = self.parse_jobs(response.json(), slug)
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Failed to fetch {self.ats_type} jobs for {slug}: {e}")
            return []

        logger.info(f"Fetched {len(jobs)} {self.ats_type} jobs for {slug}")
        return jobs
