from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from jobradar.schemas.job import JobResponse


class SaveJobRequest(BaseModel):
    user_id: str
    job_id: str
    notes: Optional[str] = None


class UpdateNotesRequest(BaseModel):
    user_id: str
    notes: str


class SavedJobResponse(BaseModel):
    id: str
    saved_at: datetime
    notes: Optional[str] = None
    job: Optional[JobResponse] = None
