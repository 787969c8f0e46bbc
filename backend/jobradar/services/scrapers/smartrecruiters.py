import re
from typing import Any, List

from jobradar.schemas import FetchedJobListing
from jobradar.services.scrapers.base import BaseFetcher


def format_location(location: dict) -> str:
    if location.get("remote"):
        return "Remote"
    parts = [location.get(key) for key in ("city", "region", "country")]
    return ", ".join(p for p in parts if p) or "Not specified"


class SmartRecruitersFetcher(BaseFetcher):
    """The postings list carries no description; ingestion builds one from the title."""

    ats_type = "smartrecruiters"
    slug_pattern = re.compile(r"(?:jobs|careers)\.smartrecruiters\.com/([a-zA-Z0-9_-]+)", re.I)

    def api_url(self, slug: str) -> str:
        return f"https://api.smartrecruiters.com/v1/companies/{slug}/postings"

    def parse_jobs(self, data: Any, slug: str) -> List[FetchedJobListing]:
        listings = []
        for job in data.get("content") or []:
            listings.append(
                FetchedJobListing(
                    title=job.get("name") or "",
                    location=format_location(job.get("location") or {}),
                    description="",
                    apply_url=f"https://jobs.smartrecruiters.com/{slug}/{job.get('id')}",
                    origin="smartrecruiters",
                )
            )
        return listings
