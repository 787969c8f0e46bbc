"""
Matching Service - rank one embedded record against many

A job is scored against candidates (or a candidate against jobs) by cosine
similarity of their structured-field embeddings.

Ranking rules:
    - Scores sorted descending; equal scores keep input order (stable sort)
    - Ranks are 1-based and assigned before top_k truncation
    - Threshold filtering happens after ranking, so ranks never renumber

Score Range: cosine in [-1, 1]; score_to_percentage maps it onto 0-100.

Complexity: O(n log n) for n candidates (one dot product each plus a sort)
"""

import math
from typing import Dict, List, Optional, Sequence

from jobradar.schemas import MatchResult
from jobradar.services.similarity import cosine_similarity


def match_one_to_many(
    query: List[float],
    candidates: Sequence[Dict],
    top_k: Optional[int] = None,
) -> List[MatchResult]:
    """
    Score every candidate against the query vector.

    Args:
        query: Embedding of the job (or candidate)
        candidates: Items shaped {"id": str, "embedding": List[float]}
        top_k: Keep only the best k results (None or 0 keeps all)

    Raises:
        ValueError: a candidate embedding differs in length from the query
    """
    scored = [
        (candidate["id"], cosine_similarity(query, candidate["embedding"]))
        for candidate in candidates
    ]
    scored.sort(key=lambda item: item[1], reverse=True)

    results = [
        MatchResult(id=item_id, score=score, rank=index + 1)
        for index, (item_id, score) in enumerate(scored)
    ]
    if top_k:
        return results[:top_k]
    return results


def match_job_to_candidates(
    job_embedding: List[float],
    candidates: Sequence[Dict],
    top_k: Optional[int] = None,
) -> List[MatchResult]:
    return match_one_to_many(job_embedding, candidates, top_k)


def match_candidate_to_jobs(
    candidate_embedding: List[float],
    jobs: Sequence[Dict],
    top_k: Optional[int] = None,
) -> List[MatchResult]:
    return match_one_to_many(candidate_embedding, jobs, top_k)


def filter_by_threshold(results: List[MatchResult], min_score: float) -> List[MatchResult]:
    return [r for r in results if r.score >= min_score]


def score_to_percentage(score: float) -> int:
    """Map cosine [-1, 1] to 0-100, halves rounded up."""
    return int(math.floor((score + 1) / 2 * 100 + 0.5))
