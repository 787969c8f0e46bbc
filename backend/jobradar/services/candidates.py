"""
Candidate store

Candidates live in process memory behind CandidateRepository; they are lost
on restart. Swapping in a persistent store means implementing the same
four methods.
"""

import logging
import random
import string
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from jobradar.exceptions import NotFoundError
from jobradar.schemas import Candidate
from jobradar.services.embeddings import EmbeddingService
from jobradar.services.resume_parser import ResumeParser

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_candidate_id() -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=6))
    return f"cand_{int(time.time() * 1000)}_{suffix}"


class CandidateRepository(ABC):
    @abstractmethod
    def add(self, candidate: Candidate) -> None:
        pass

    @abstractmethod
    def get(self, candidate_id: str) -> Optional[Candidate]:
        pass

    @abstractmethod
    def list(self) -> List[Candidate]:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class InMemoryCandidateRepository(CandidateRepository):
    def __init__(self):
        self._candidates: Dict[str, Candidate] = {}

    def add(self, candidate: Candidate) -> None:
        self._candidates[candidate.id] = candidate

    def get(self, candidate_id: str) -> Optional[Candidate]:
        return self._candidates.get(candidate_id)

    def list(self) -> List[Candidate]:
        return list(self._candidates.values())

    def clear(self) -> None:
        self._candidates.clear()


class CandidateService:
    def __init__(
        self,
        resume_parser: ResumeParser,
        embedder: EmbeddingService,
        repository: Optional[CandidateRepository] = None,
    ):
        self.resume_parser = resume_parser
        self.embedder = embedder
        self.repository = repository or InMemoryCandidateRepository()

    async def create_candidate(self, resume_text: str) -> Candidate:
        parsed = await self.resume_parser.parse(resume_text)
        embedding = await self.embedder.embed_candidate(parsed)

        candidate = Candidate(
            id=generate_candidate_id(),
            raw_resume=resume_text,
            parsed_resume=parsed,
            embedding=embedding,
        )
        self.repository.add(candidate)
        logger.info(f"Created candidate {candidate.id} ({parsed.primary_role})")
        return candidate

    def list_candidates(self) -> List[Candidate]:
        return self.repository.list()

    def get_candidate(self, candidate_id: str) -> Candidate:
        candidate = self.repository.get(candidate_id)
        if candidate is None:
            raise NotFoundError(f"Candidate with ID {candidate_id} not found")
        return candidate

    def candidates_with_embeddings(self) -> List[dict]:
        return [{"id": c.id, "embedding": c.embedding} for c in self.repository.list()]
