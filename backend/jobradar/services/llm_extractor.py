"""
LLM Job Extractor - turn rendered career page text into job listings

The model output is untrusted: code fences are stripped, the outermost JSON
object is pulled out with a regex, and every entry is validated on its own.
Bad entries are dropped; a bad response yields an empty list. This module
never raises.
"""

import logging
from typing import Any, List

from jobradar.config import get_settings
from jobradar.exceptions import UpstreamFailure
from jobradar.middleware.metrics import record_llm_failure
from jobradar.schemas import FetchedJobListing
from jobradar.services.llm import LLMClient, parse_json_object

logger = logging.getLogger(__name__)
settings = get_settings()

MAX_JOBS = 50
MAX_DESCRIPTION_CHARS = 200

SYSTEM_PROMPT = """You are a job listing extractor. Given the text content of a company's career page, extract all job postings.

CRITICAL: You MUST respond with ONLY valid JSON. No markdown, no code blocks, no explanations.

OUTPUT SCHEMA:
{
  "jobs": [
    {
      "title": "Job Title",
      "location": "City, Country or Remote",
      "description": "Brief job description (max 200 chars)",
      "applyUrl": "URL to apply or empty string if not found"
    }
  ]
}

RULES:
1. Extract ALL job listings visible on the page
2. If location is not specified, use "Not specified"
3. Keep description brief - just the key requirements or summary
4. If applyUrl is relative, leave it as-is
5. If no jobs are found, return {"jobs": []}
6. Maximum 50 jobs per page
7. Normalize job titles (e.g., "Sr. SDE" -> "Senior Software Engineer")"""


def _as_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def validate_entries(entries: Any) -> List[FetchedJobListing]:
    """Keep well-formed entries (non-empty string title), capped at MAX_JOBS."""
    if not isinstance(entries, list):
        return []

    listings = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        title = _as_text(entry.get("title"))
        if not title:
            continue
        listings.append(
            FetchedJobListing(
                title=title,
                location=_as_text(entry.get("location")) or "Not specified",
                description=_as_text(entry.get("description"))[:MAX_DESCRIPTION_CHARS],
                apply_url=_as_text(entry.get("applyUrl")),
                origin="llm_extraction",
            )
        )
        if len(listings) >= MAX_JOBS:
            break
    return listings


class LLMJobExtractor:
    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def extract_jobs(self, page_text: str, page_url: str) -> List[FetchedJobListing]:
        truncated = page_text[: settings.llm_page_text_limit]

        try:
            content = await self.llm.complete(
                [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": f"Career page URL: {page_url}\n\nPage content:\n{truncated}"},
                ],
                temperature=0.0,
            )
            data = parse_json_object(content)
        except (UpstreamFailure, ValueError) as e:
            logger.warning(f"Job extraction failed for {page_url}: {e}")
            record_llm_failure("extract_jobs")
            return []

        jobs = validate_entries(data.get("jobs"))
        logger.info(f"Extracted {len(jobs)} jobs from {page_url}")
        return jobs
