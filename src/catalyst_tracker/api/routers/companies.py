"""Companies router"""

from fastapi import APIRouter, Depends

from catalyst_tracker.api.dependencies import get_company_repo
from catalyst_tracker.db.repository import CompanyRepository
from catalyst_tracker.errors import CompanyNotFound
from catalyst_tracker.models.event import Company

router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("", response_model=list[Company])
async def list_companies(repo: CompanyRepository = Depends(get_company_repo)):
    return await repo.list()


@router.get("/{company_id}", response_model=Company)
async def get_company(company_id: str, repo: CompanyRepository = Depends(get_company_repo)):
    company = await repo.get(company_id)
    if company is None:
        raise CompanyNotFound(company_id)
    return company
