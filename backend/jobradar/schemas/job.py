import math

from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime
from typing import Any, List, Literal, Optional

ListingOrigin = Literal["greenhouse", "lever", "ashby", "smartrecruiters", "llm_extraction"]


class FetchedJobListing(BaseModel):
    """The one shape every job source (ATS API, rendered page + LLM) hands downstream."""

    title: str
    location: str = "Not specified"
    description: str = ""
    apply_url: str = ""
    origin: ListingOrigin


def _coerce_years(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError("experience must be a number")
    if isinstance(value, str):
        value = float(value.strip().rstrip("+"))
    if not isinstance(value, (int, float)):
        raise ValueError("experience must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("experience must be finite")
    return int(round(value))


class ParsedJobDescription(BaseModel):
    """Structured job fields as produced by the JD parser (camelCase on the wire)."""

    role: str
    min_experience: Optional[int] = Field(None, alias="minExperience")
    max_experience: Optional[int] = Field(None, alias="maxExperience")
    skills: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    employment_type: Optional[str] = Field(None, alias="employmentType")

    class Config:
        populate_by_name = True

    @field_validator("role")
    @classmethod
    def strip_role(cls, v: str) -> str:
        return v.strip()

    @field_validator("min_experience", "max_experience", mode="before")
    @classmethod
    def coerce_years(cls, v: Any) -> Optional[int]:
        return _coerce_years(v)

    @field_validator("skills", mode="before")
    @classmethod
    def clean_skills(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("skills must be a list")
        return [s.strip() for s in v if isinstance(s, str) and s.strip()]

    @model_validator(mode="after")
    def order_experience(self) -> "ParsedJobDescription":
        if (
            self.min_experience is not None
            and self.max_experience is not None
            and self.min_experience > self.max_experience
        ):
            self.min_experience, self.max_experience = self.max_experience, self.min_experience
        return self

    def to_storage(self) -> dict:
        return self.model_dump(by_alias=True)


class NormalizedJob(BaseModel):
    role: str
    skills: List[str]
    location: str
    job_hash: str


class IngestedJob(BaseModel):
    id: str
    title: str
    company_name: str
    location: str
    apply_url: str
    parsed_jd: ParsedJobDescription
    source: str
    is_new: bool


class JobCreate(BaseModel):
    text: str
    company_name: str = ""
    apply_url: str = ""


class JobResponse(BaseModel):
    id: str
    job_hash: str
    raw_jd: str
    parsed_jd: ParsedJobDescription
    company_name: str
    apply_url: str
    source: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class JobListResponse(BaseModel):
    jobs: list[JobResponse]
    total: int
