import re
from typing import Any, List

from jobradar.schemas import FetchedJobListing
from jobradar.services.scrapers.base import BaseFetcher, strip_html


class LeverFetcher(BaseFetcher):
    ats_type = "lever"
    slug_pattern = re.compile(r"(?:jobs\.)?lever\.co/([a-zA-Z0-9_-]+)", re.I)

    def api_url(self, slug: str) -> str:
        return f"https://api.lever.co/v0/postings/{slug}"

    def parse_jobs(self, data: Any, slug: str) -> List[FetchedJobListing]:
        listings = []
        for job in data or []:
            categories = job.get("categories") or {}
            listings.append(
                FetchedJobListing(
                    title=job.get("text") or "",
                    location=categories.get("location") or "Not specified",
                    description=strip_html(job.get("descriptionPlain") or job.get("description") or ""),
                    apply_url=job.get("applyUrl") or job.get("hostedUrl") or "",
                    origin="lever",
                )
            )
        return listings
