import logging

from pydantic import ValidationError

from jobradar.exceptions import UpstreamFailure, ValidationFailure
from jobradar.middleware.metrics import record_llm_failure
from jobradar.schemas import ParsedResume
from jobradar.services.llm import LLMClient, parse_json_object

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert resume parser. Extract and normalize structured information from resumes.

CRITICAL: You MUST respond with ONLY valid JSON. No markdown, no code blocks, no explanations, no text before or after the JSON.

OUTPUT SCHEMA:
{
  "skills": ["string"],
  "totalExperienceYears": number | null,
  "primaryRole": "string",
  "summary": "string"
}

RULES:

1. SKILLS EXTRACTION:
   - Extract ALL technical and professional skills mentioned
   - Include: programming languages, frameworks, tools, platforms, methodologies, soft skills
   - DEDUPLICATE: Remove exact duplicates (case-insensitive)
   - NORMALIZE names: "JS" -> "JavaScript", "TS" -> "TypeScript", "k8s" -> "Kubernetes", "Mongo" -> "MongoDB", "Postgres" -> "PostgreSQL"
   - Order by relevance/proficiency (most prominent first)
   - Limit to top 20 most relevant skills

2. TOTAL EXPERIENCE:
   - Calculate total years of professional work experience
   - Sum up all work experience durations
   - Round to nearest 0.5 years
   - If currently employed, calculate up to current date
   - Exclude internships shorter than 3 months
   - If cannot determine: null

3. PRIMARY ROLE:
   - Identify the candidate's primary/current job title or target role
   - Normalize to standard titles: "Software Engineer", "Senior Software Engineer", "Frontend Engineer", "Backend Engineer", "Full Stack Engineer", "DevOps Engineer", "Data Scientist", "Data Engineer", "Product Manager", "Engineering Manager", etc.
   - If multiple roles, choose the most recent or most prominent one

4. SUMMARY:
   - Create a 2-3 sentence professional summary
   - Highlight: primary role, years of experience, key skills/technologies, notable achievements or domain expertise
   - Keep it concise and impactful
   - Write in third person"""


class ResumeParser:
    """Structure resume text into skills, experience, role and summary."""

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def parse(self, resume_text: str) -> ParsedResume:
        if not resume_text or not resume_text.strip():
            raise ValidationFailure("Resume text is required")

        try:
            content = await self.llm.complete(
                [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": resume_text},
                ],
                temperature=0.0,
            )
        except UpstreamFailure:
            record_llm_failure("parse_resume")
            raise

        try:
            return ParsedResume.model_validate(parse_json_object(content))
        except (ValueError, ValidationError) as e:
            record_llm_failure("parse_resume")
            logger.warning(f"Unusable resume parse: {e}")
            raise UpstreamFailure(f"Failed to parse resume response: {e}") from e
