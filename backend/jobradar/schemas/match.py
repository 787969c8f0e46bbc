from pydantic import BaseModel, Field
from typing import List, Optional


class MatchResult(BaseModel):
    id: str
    score: float
    rank: int


class MatchRequest(BaseModel):
    job_id: str
    top_k: Optional[int] = Field(None, ge=1)
    min_score: Optional[float] = None


class CandidateMatchRequest(BaseModel):
    candidate_id: str
    top_k: Optional[int] = Field(None, ge=1)
    min_score: Optional[float] = None


class MatchResponse(BaseModel):
    id: str
    score: float
    percentage: int
    rank: int


class MatchExplanation(BaseModel):
    strengths: str
    missing_skills: List[str] = Field(default_factory=list, alias="missingSkills")
    overall_fit: str = Field(alias="overallFit")

    class Config:
        populate_by_name = True
