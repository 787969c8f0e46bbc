import re
from typing import Any, List

from jobradar.schemas import FetchedJobListing
from jobradar.services.scrapers.base import BaseFetcher, strip_html


class AshbyFetcher(BaseFetcher):
    ats_type = "ashby"
    slug_pattern = re.compile(r"jobs\.ashbyhq\.com/([a-zA-Z0-9_.-]+)", re.I)

    def api_url(self, slug: str) -> str:
        return f"https://api.ashbyhq.com/posting-api/job-board/{slug}"

    def parse_jobs(self, data: Any, slug: str) -> List[FetchedJobListing]:
        listings = []
        for job in data.get("jobs") or []:
            if job.get("isListed") is False:
                continue
            listings.append(
                FetchedJobListing(
                    title=job.get("title") or "",
                    location=job.get("location") or "Not specified",
                    description=strip_html(job.get("descriptionHtml") or job.get("descriptionPlain") or ""),
                    apply_url=job.get("jobUrl") or job.get("applyUrl") or "",
                    origin="ashby",
                )
            )
        return listings
