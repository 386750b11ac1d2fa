from typing import Annotated
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import require_logged_in
from app.crud import company as company_crud
from app.schemas.company import CompanyNew, CompanySearch, CompanyUpdate

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("", status_code=201, dependencies=[Depends(require_logged_in)])
def create_company(request: CompanyNew, db: Session = Depends(get_db)):
    """
    Create a company.

    Returns { company: { handle, name, description, numEmployees, logoUrl } }
    """
    company = company_crud.create(db, request.model_dump(by_alias=True))
    return {"company": company}


@router.get("")
def list_companies(
    filters: Annotated[CompanySearch, Query()],
    db: Session = Depends(get_db)
):
    """
    List companies ordered by name.

    Optional query filters: name (partial, case-insensitive),
    minEmployees, maxEmployees.
    """
    companies = company_crud.find_all(db, filters.model_dump(by_alias=True, exclude_none=True))
    return {"companies": companies}


@router.get("/{handle}")
def get_company(handle: str, db: Session = Depends(get_db)):
    """
    Retrieve a company with its jobs.

    Returns { company: { handle, name, description, numEmployees, logoUrl, jobs } }
    """
    return {"company": company_crud.get(db, handle)}


@router.patch("/{handle}", dependencies=[Depends(require_logged_in)])
def update_company(handle: str, request: CompanyUpdate, db: Session = Depends(get_db)):
    """
    Partially update a company.

    Fields can be: { name, description, numEmployees, logoUrl }
    """
    company = company_crud.update(db, handle, request.model_dump(by_alias=True, exclude_unset=True))
    return {"company": company}


@router.delete("/{handle}", dependencies=[Depends(require_logged_in)])
def delete_company(handle: str, db: Session = Depends(get_db)):
    """Delete a company and its jobs."""
    company_crud.remove(db, handle)
    return {"deleted": handle}
