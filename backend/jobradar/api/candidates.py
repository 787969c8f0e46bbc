from typing import List

from fastapi import APIRouter, Depends

from jobradar.dependencies import get_candidate_service
from jobradar.schemas import Candidate, CandidateCreate, CandidateResponse
from jobradar.services.candidates import CandidateService

router = APIRouter()


def _to_response(candidate: Candidate) -> CandidateResponse:
    # Embeddings stay server-side
    return CandidateResponse(
        id=candidate.id,
        raw_resume=candidate.raw_resume,
        parsed_resume=candidate.parsed_resume,
    )


@router.post("", response_model=CandidateResponse)
async def create_candidate(
    payload: CandidateCreate,
    service: CandidateService = Depends(get_candidate_service),
):
    candidate = await service.create_candidate(payload.text)
    return _to_response(candidate)


@router.get("", response_model=List[CandidateResponse])
async def list_candidates(service: CandidateService = Depends(get_candidate_service)):
    return [_to_response(c) for c in service.list_candidates()]


@router.get("/{candidate_id}", response_model=CandidateResponse)
async def get_candidate(
    candidate_id: str,
    service: CandidateService = Depends(get_candidate_service),
):
    return _to_response(service.get_candidate(candidate_id))
