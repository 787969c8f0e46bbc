from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobradar.database import get_db
from jobradar.schemas import SaveJobRequest, SavedJobResponse, UpdateNotesRequest
from jobradar.services import saved_jobs

router = APIRouter()


@router.post("", response_model=SavedJobResponse)
async def save_job(request: SaveJobRequest, db: AsyncSession = Depends(get_db)):
    saved = await saved_jobs.save_job(db, request.user_id, request.job_id, request.notes)
    return SavedJobResponse(id=saved.id, saved_at=saved.created_at, notes=saved.notes)


@router.delete("/{job_id}")
async def unsave_job(
    job_id: str,
    user_id: str = Query(...),
    db: AsyncSession = Depends(get_db),
):
    await saved_jobs.unsave_job(db, user_id, job_id)
    return {"success": True}


@router.get("", response_model=List[SavedJobResponse])
async def list_saved_jobs(user_id: str = Query(...), db: AsyncSession = Depends(get_db)):
    return await saved_jobs.list_saved_jobs(db, user_id)


@router.get("/check/{job_id}")
async def check_saved(
    job_id: str,
    user_id: str = Query(...),
    db: AsyncSession = Depends(get_db),
):
    return {"saved": await saved_jobs.is_job_saved(db, user_id, job_id)}


@router.patch("/{job_id}", response_model=SavedJobResponse)
async def update_notes(
    job_id: str,
    request: UpdateNotesRequest,
    db: AsyncSession = Depends(get_db),
):
    saved = await saved_jobs.update_notes(db, request.user_id, job_id, request.notes)
    return SavedJobResponse(id=saved.id, saved_at=saved.created_at, notes=saved.notes)
