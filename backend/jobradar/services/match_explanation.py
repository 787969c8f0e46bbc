import logging
from typing import Optional

from pydantic import ValidationError

from jobradar.exceptions import UpstreamFailure
from jobradar.middleware.metrics import record_llm_failure
from jobradar.schemas import MatchExplanation, ParsedJobDescription, ParsedResume
from jobradar.services.embeddings import format_years
from jobradar.services.llm import LLMClient, parse_json_object

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a recruiting assistant that explains job-candidate matches.

CRITICAL: You MUST respond with ONLY valid JSON. No markdown, no code blocks, no explanations.

OUTPUT SCHEMA:
{
  "strengths": "string - 2-3 sentences highlighting why this candidate is a good fit",
  "missingSkills": ["array", "of", "missing", "skills"],
  "overallFit": "string - one sentence summary: 'Strong Match', 'Good Match', 'Partial Match', or 'Weak Match' with brief reason"
}

RULES:
1. STRENGTHS: Focus on overlapping skills, relevant experience, and role alignment. Be specific about matching skills.
2. MISSING SKILLS: List only skills from the JD that the candidate does NOT have. If all skills match, return empty array.
3. OVERALL FIT: Consider skill overlap percentage, experience match, and role relevance.
4. Be concise and actionable. Recruiters need quick insights.
5. If experience is slightly below requirement but skills are strong, still consider it a good match."""


def experience_range(min_years: Optional[int], max_years: Optional[int]) -> str:
    if min_years is None and max_years is None:
        return "Not specified"
    if max_years is None:
        return f"{min_years}+ years"
    if min_years is None:
        return f"Up to {max_years} years"
    return f"{min_years}-{max_years} years"


def build_prompt(job: ParsedJobDescription, candidate: ParsedResume) -> str:
    candidate_years = (
        f"{format_years(candidate.total_experience_years)} years"
        if candidate.total_experience_years is not None
        else "Not specified"
    )
    return (
        "JOB REQUIREMENTS:\n"
        f"Role: {job.role}\n"
        f"Required Skills: {', '.join(job.skills)}\n"
        f"Experience: {experience_range(job.min_experience, job.max_experience)}\n"
        f"Location: {job.location or 'Not specified'}\n"
        f"Type: {job.employment_type or 'Not specified'}\n"
        "\n"
        "CANDIDATE PROFILE:\n"
        f"Role: {candidate.primary_role}\n"
        f"Skills: {', '.join(candidate.skills)}\n"
        f"Experience: {candidate_years}\n"
        f"Summary: {candidate.summary}\n"
        "\n"
        "Analyze this match and provide strengths, missing skills, and overall fit."
    )


class MatchExplainer:
    """Plain-language explanation of why a candidate fits a job."""

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def explain(self, job: ParsedJobDescription, candidate: ParsedResume) -> MatchExplanation:
        try:
            content = await self.llm.complete(
                [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(job, candidate)},
                ],
                temperature=0.3,
            )
            return MatchExplanation.model_validate(parse_json_object(content))
        except (ValueError, ValidationError) as e:
            record_llm_failure("explain_match")
            raise UpstreamFailure(f"Failed to parse match explanation: {e}") from e
        except UpstreamFailure:
            record_llm_failure("explain_match")
            raise
