from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jobradar.database import get_db
from jobradar.exceptions import NotFoundError
from jobradar.schemas import CompanyResponse
from jobradar.services.companies import get_company_by_name, list_companies

router = APIRouter()


@router.get("", response_model=List[CompanyResponse])
async def get_companies(db: AsyncSession = Depends(get_db)):
    companies = await list_companies(db)
    return [CompanyResponse.model_validate(c) for c in companies]


@router.get("/{name}", response_model=CompanyResponse)
async def get_company(name: str, db: AsyncSession = Depends(get_db)):
    company = await get_company_by_name(db, name)
    if not company:
        raise NotFoundError(f"Company {name} not found")
    return CompanyResponse.model_validate(company)
