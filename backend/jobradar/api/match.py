"""
Matching API - rank candidates for a job, or jobs for a candidate.

Endpoints:
    POST /match                                    job -> candidates
    POST /match/candidate                          candidate -> jobs
    POST /match/{job_id}/explain/{candidate_id}    LLM explanation of one pair

Scores are raw cosine similarities; percentage is the same score mapped
onto 0-100. min_score filters after ranking, so ranks keep their gaps.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jobradar.database import get_db
from jobradar.dependencies import get_candidate_service, get_job_service, get_match_explainer
from jobradar.schemas import (
    CandidateMatchRequest,
    MatchExplanation,
    MatchRequest,
    MatchResponse,
    MatchResult,
    ParsedJobDescription,
)
from jobradar.services.candidates import CandidateService
from jobradar.services.jobs import JobService
from jobradar.services.match_explanation import MatchExplainer
from jobradar.services.matcher import (
    filter_by_threshold,
    match_candidate_to_jobs,
    match_job_to_candidates,
    score_to_percentage,
)

router = APIRouter()


def _to_responses(results: List[MatchResult], min_score: Optional[float]) -> List[MatchResponse]:
    if min_score is not None:
        results = filter_by_threshold(results, min_score)
    return [
        MatchResponse(id=r.id, score=r.score, percentage=score_to_percentage(r.score), rank=r.rank)
        for r in results
    ]


@router.post("", response_model=List[MatchResponse])
async def match_job(
    request: MatchRequest,
    db: AsyncSession = Depends(get_db),
    jobs: JobService = Depends(get_job_service),
    candidates: CandidateService = Depends(get_candidate_service),
):
    job = await jobs.get_job(db, request.job_id)
    job_embedding = await jobs.ensure_embedding(db, job)

    results = match_job_to_candidates(job_embedding, candidates.candidates_with_embeddings(), request.top_k)
    return _to_responses(results, request.min_score)


@router.post("/candidate", response_model=List[MatchResponse])
async def match_candidate(
    request: CandidateMatchRequest,
    db: AsyncSession = Depends(get_db),
    jobs: JobService = Depends(get_job_service),
    candidates: CandidateService = Depends(get_candidate_service),
):
    candidate = candidates.get_candidate(request.candidate_id)
    job_embeddings = await jobs.jobs_with_embeddings(db)

    results = match_candidate_to_jobs(candidate.embedding, job_embeddings, request.top_k)
    return _to_responses(results, request.min_score)


@router.post("/{job_id}/explain/{candidate_id}", response_model=MatchExplanation)
async def explain_match(
    job_id: str,
    candidate_id: str,
    db: AsyncSession = Depends(get_db),
    jobs: JobService = Depends(get_job_service),
    candidates: CandidateService = Depends(get_candidate_service),
    explainer: MatchExplainer = Depends(get_match_explainer),
):
    job = await jobs.get_job(db, job_id)
    candidate = candidates.get_candidate(candidate_id)
    return await explainer.explain(
        ParsedJobDescription.model_validate(job.parsed_jd), candidate.parsed_resume
    )
