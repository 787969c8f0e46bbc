from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class CompanySeed(BaseModel):
    name: str
    homepage_url: str


class CompanyResponse(BaseModel):
    id: str
    name: str
    homepage_url: str
    career_page_url: Optional[str] = None
    ats_type: Optional[str] = None
    last_checked_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DiscoveredCompany(BaseModel):
    name: str
    homepage_url: str
    industry: str = "Other"
    is_new: bool = True
