"""
Job Description Parser - raw posting text to structured fields

The model carries the heavy rules (title normalization, experience inference,
skill aliasing). Locally we only reject empty input, parse the reply and
validate its shape; ParsedJobDescription also swaps min/max experience when
they come back inverted.
"""

import logging

from pydantic import ValidationError

from jobradar.exceptions import UpstreamFailure, ValidationFailure
from jobradar.middleware.metrics import record_llm_failure
from jobradar.schemas import ParsedJobDescription
from jobradar.services.llm import LLMClient, parse_json_object

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert job description parser. Extract and normalize structured information from job descriptions.

CRITICAL: You MUST respond with ONLY valid JSON. No markdown, no code blocks, no explanations, no text before or after the JSON.

OUTPUT SCHEMA:
{
  "role": "string",
  "minExperience": number | null,
  "maxExperience": number | null,
  "skills": ["string"],
  "location": "string | null",
  "employmentType": "string | null"
}

RULES:

1. JOB TITLE NORMALIZATION:
   - Normalize to standard titles: "Software Engineer", "Senior Software Engineer", "Staff Software Engineer", "Principal Software Engineer", "Engineering Manager", "Product Manager", "Data Scientist", "Data Engineer", "DevOps Engineer", "Frontend Engineer", "Backend Engineer", "Full Stack Engineer", "Mobile Engineer", "QA Engineer", "Security Engineer", "ML Engineer", "Cloud Engineer", "Site Reliability Engineer"
   - Map variations: "SDE" -> "Software Engineer", "SWE" -> "Software Engineer", "Dev" -> "Software Engineer", "Programmer" -> "Software Engineer"
   - Preserve seniority: "Sr.", "Senior", "Lead", "Staff", "Principal", "Junior", "Associate"
   - Example: "Sr. SDE II" -> "Senior Software Engineer", "Lead Dev" -> "Lead Software Engineer"

2. EXPERIENCE INFERENCE:
   - If explicit (e.g., "3-5 years"): minExperience=3, maxExperience=5
   - If single value (e.g., "5+ years"): minExperience=5, maxExperience=null
   - If only max (e.g., "up to 3 years"): minExperience=0, maxExperience=3
   - INFER from title if not stated:
     * Junior/Associate: minExperience=0, maxExperience=2
     * Mid-level (no prefix): minExperience=2, maxExperience=5
     * Senior: minExperience=5, maxExperience=8
     * Staff/Lead: minExperience=8, maxExperience=12
     * Principal/Architect: minExperience=10, maxExperience=null
   - If truly unknown and cannot infer: null

3. SKILLS PROCESSING:
   - Extract ALL technical skills: languages, frameworks, tools, platforms, methodologies
   - DEDUPLICATE: Remove exact duplicates (case-insensitive)
   - NORMALIZE names: "JS" -> "JavaScript", "TS" -> "TypeScript", "k8s" -> "Kubernetes", "Mongo" -> "MongoDB", "Postgres" -> "PostgreSQL", "AWS" -> "Amazon Web Services"
   - Return unique skills only, properly capitalized
   - Order by relevance (most important first)

4. LOCATION:
   - Normalize format: "City, Country" or "Remote"
   - "WFH", "Work from home" -> "Remote"
   - Hybrid -> include both location and note (e.g., "Bangalore, India (Hybrid)")

5. EMPLOYMENT TYPE:
   - Normalize to exactly one of: "Full-time", "Part-time", "Contract", "Internship", "Freelance"
   - "Permanent" -> "Full-time"
   - "Remote" is NOT an employment type, it's a location
   - If not mentioned, infer "Full-time" as default for standard job posts"""


class JDParser:
    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def parse(self, raw_text: str) -> ParsedJobDescription:
        """
        Structure a job description.

        Raises:
            ValidationFailure: empty input
            UpstreamFailure: model unavailable, malformed JSON or missing fields
        """
        if not raw_text or not raw_text.strip():
            raise ValidationFailure("Job description text is required")

        try:
            content = await self.llm.complete(
                [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": raw_text},
                ],
                temperature=0.0,
            )
        except UpstreamFailure:
            record_llm_failure("parse_jd")
            raise

        try:
            return ParsedJobDescription.model_validate(parse_json_object(content))
        except (ValueError, ValidationError) as e:
            record_llm_failure("parse_jd")
            logger.warning(f"Unusable job description parse: {e}")
            raise UpstreamFailure(f"Failed to parse job description response: {e}") from e
