from pydantic import BaseModel, Field, field_validator
from typing import Any, List, Optional


class ParsedResume(BaseModel):
    skills: List[str] = Field(default_factory=list)
    total_experience_years: Optional[float] = Field(None, alias="totalExperienceYears", allow_inf_nan=False)
    primary_role: str = Field(alias="primaryRole")
    summary: str = ""

    class Config:
        populate_by_name = True

    @field_validator("skills", mode="before")
    @classmethod
    def clean_skills(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("skills must be a list")
        return [s.strip() for s in v if isinstance(s, str) and s.strip()]

    @field_validator("total_experience_years")
    @classmethod
    def round_half_year(cls, v: Optional[float]) -> Optional[float]:
        # Nearest 0.5 year
        return None if v is None else round(v * 2) / 2

    @field_validator("summary", mode="before")
    @classmethod
    def none_summary(cls, v: Any) -> Any:
        return "" if v is None else v


class Candidate(BaseModel):
    id: str
    raw_resume: str
    parsed_resume: ParsedResume
    embedding: List[float]


class CandidateCreate(BaseModel):
    text: str


class CandidateResponse(BaseModel):
    id: str
    raw_resume: str
    parsed_resume: ParsedResume
