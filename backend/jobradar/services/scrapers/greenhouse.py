import re
from typing import Any, List, Optional
from urllib.parse import parse_qs, urlparse

from jobradar.schemas import FetchedJobListing
from jobradar.services.scrapers.base import BaseFetcher, strip_html

# Path words on greenhouse.io that are never a board token
RESERVED_SLUGS = {"embed", "jobs", "job", "departments", "department", "board", "boards"}


class GreenhouseFetcher(BaseFetcher):
    ats_type = "greenhouse"
    slug_pattern = re.compile(r"(?:boards\.)?greenhouse\.io/([a-zA-Z0-9_-]+)", re.I)

    def extract_slug(self, career_page_url: str) -> Optional[str]:
        slug = super().extract_slug(career_page_url)
        if slug and slug.lower() not in RESERVED_SLUGS:
            return slug
        # Embedded boards carry the token in ?for=
        query = parse_qs(urlparse(career_page_url).query)
        values = query.get("for")
        return values[0] if values else None

    def api_url(self, slug: str) -> str:
        return f"https://boards-api.greenhouse.io/v1/boards/{slug}/jobs?content=true"

    def parse_jobs(self, data: Any, slug: str) -> List[FetchedJobListing]:
        listings = []
        for job in data.get("jobs") or []:
            location = (job.get("location") or {}).get("name") or "Not specified"
            listings.append(
                FetchedJobListing(
                    title=job.get("title") or "",
                    location=location,
                    description=strip_html(job.get("content") or ""),
                    apply_url=job.get("absolute_url")
                    or f"https://boards.greenhouse.io/{slug}/jobs/{job.get('id')}",
                    origin="greenhouse",
                )
            )
        return listings
