from typing import Annotated
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import require_admin
from app.crud import job as job_crud
from app.schemas.job import JobNew, JobSearch, JobUpdate

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("", status_code=201, dependencies=[Depends(require_admin)])
def create_job(request: JobNew, db: Session = Depends(get_db)):
    """
    Create a job for an existing company.

    Returns { job: { id, title, salary, equity, companyHandle } }
    """
    job = job_crud.create(db, request.model_dump(by_alias=True))
    return {"job": job}


@router.get("")
def list_jobs(
    filters: Annotated[JobSearch, Query()],
    db: Session = Depends(get_db)
):
    """
    List jobs ordered by title, each with its company's name.

    Optional query filters: minSalary, hasEquity, title (partial, case-insensitive).
    """
    jobs = job_crud.find_all(db, filters.model_dump(by_alias=True, exclude_none=True))
    return {"jobs": jobs}


@router.get("/{job_id}")
def get_job(job_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a job with its company's details.

    Returns { job: { id, title, salary, equity, company } }
    """
    return {"job": job_crud.get(db, job_id)}


@router.patch("/{job_id}", dependencies=[Depends(require_admin)])
def update_job(job_id: int, request: JobUpdate, db: Session = Depends(get_db)):
    """
    Partially update a job.

    Fields can be: { title, salary, equity }
    """
    job = job_crud.update(db, job_id, request.model_dump(exclude_unset=True))
    return {"job": job}


@router.delete("/{job_id}", dependencies=[Depends(require_admin)])
def delete_job(job_id: int, db: Session = Depends(get_db)):
    """Delete a job by ID."""
    job_crud.remove(db, job_id)
    return {"deleted": job_id}
