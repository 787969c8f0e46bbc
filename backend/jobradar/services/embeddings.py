"""
Embedding Service - structured records to vectors

Jobs and candidates are embedded from their structured fields only, never
from raw text, so two postings that parse the same embed the same:

    Job:       "Role: Backend Engineer. Skills: Go, SQL. Location: Remote. Type: Full-time. Experience: 3-5 years"
    Candidate: "Role: Backend Engineer. Skills: Go, SQL. Experience: 4 years. Summary: ..."

Text is lowercased and whitespace-collapsed before it goes to the model.
"""

import re
import time
from typing import List

from jobradar.middleware.metrics import record_embedding_latency
from jobradar.schemas import ParsedJobDescription, ParsedResume
from jobradar.services.llm import LLMClient

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text.lower()).strip()


def format_years(value: float) -> str:
    """4.0 -> "4", 4.5 -> "4.5"."""
    return str(int(value)) if float(value).is_integer() else str(value)


def job_to_text(parsed: ParsedJobDescription) -> str:
    parts = [f"Role: {parsed.role}", f"Skills: {', '.join(parsed.skills)}"]

    if parsed.location:
        parts.append(f"Location: {parsed.location}")
    if parsed.employment_type:
        parts.append(f"Type: {parsed.employment_type}")
    if parsed.min_experience is not None:
        if parsed.max_experience:
            parts.append(f"Experience: {parsed.min_experience}-{parsed.max_experience} years")
        else:
            parts.append(f"Experience: {parsed.min_experience}+ years")

    return ". ".join(parts)


def candidate_to_text(parsed: ParsedResume) -> str:
    parts = [f"Role: {parsed.primary_role}", f"Skills: {', '.join(parsed.skills)}"]

    if parsed.total_experience_years is not None:
        parts.append(f"Experience: {format_years(parsed.total_experience_years)} years")
    if parsed.summary:
        parts.append(f"Summary: {parsed.summary}")

    return ". ".join(parts)


class EmbeddingService:
    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def embed(self, text: str) -> List[float]:
        return (await self.embed_batch([text]))[0]

    async def embed_batch(self, texts: List[str]) -> List[List[float]]:
        start = time.perf_counter()
        vectors = await self.llm.embed([normalize_text(t) for t in texts])
        record_embedding_latency(time.perf_counter() - start)
        return vectors

    async def embed_job(self, parsed: ParsedJobDescription) -> List[float]:
        return await self.embed(job_to_text(parsed))

    async def embed_candidate(self, parsed: ParsedResume) -> List[float]:
        return await self.embed(candidate_to_text(parsed))

