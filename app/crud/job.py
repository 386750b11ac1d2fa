"""
CRUD operations for jobs.

Every statement is hand-written SQL with positional parameters, executed
through app.core.database.execute_sql. Projections use the API's camelCase
names.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional
from sqlalchemy.orm import Session

from app.core.database import execute_sql
from app.core.errors import NotFoundError
from app.core.sql import FilterKind, sql_for_filters, sql_for_partial_update

logger = logging.getLogger(__name__)

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'

# Search filter name -> (column, predicate kind)
SEARCH_FILTERS = {
    "minSalary": ("j.salary", FilterKind.MIN),
    "hasEquity": ("j.equity", FilterKind.FLAG),
    "title": ("j.title", FilterKind.CONTAINS),
}


def job_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert a result row to a plain dict.

    Equity comes back as Decimal (PostgreSQL) or a number (SQLite) and is
    always exposed as a decimal string.
    """
    job = dict(row)
    if job.get("equity") is not None:
        job["equity"] = str(job["equity"])
    return job


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a job attached to an existing company.

    Args:
        db: Database session
        data: {title, salary, equity, companyHandle}

    Returns:
        {id, title, salary, equity, companyHandle}

    Raises:
        NotFoundError: If the company does not exist
    """
    company_handle = data["companyHandle"]
    company_check = execute_sql(
        db,
        "SELECT handle FROM companies WHERE handle = $1",
        [company_handle]
    ).first()
    if not company_check:
        raise NotFoundError(f"No company: {company_handle}")

    result = execute_sql(
        db,
        f"""INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {JOB_COLUMNS}""",
        [data["title"], data.get("salary"), data.get("equity"), company_handle]
    )
    job = job_row(result.mappings().first())
    db.commit()

    logger.info(f"Created job {job['id']}: {job['title']} ({company_handle})")
    return job


def find_all(db: Session, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Find all jobs, optionally filtered, ordered by title.

    filters (all optional):
        - minSalary: salary >= minSalary
        - hasEquity: True keeps only jobs with equity > 0; False is ignored
        - title: case-insensitive partial match

    Returns:
        [{id, title, salary, equity, companyHandle, companyName}, ...]
    """
    where_clause, values = sql_for_filters(filters, SEARCH_FILTERS)

    result = execute_sql(
        db,
        f"""SELECT j.id,
                   j.title,
                   j.salary,
                   j.equity,
                   j.company_handle AS "companyHandle",
                   c.name AS "companyName"
            FROM jobs AS j
            LEFT JOIN companies AS c ON c.handle = j.company_handle
            {where_clause}
            ORDER BY j.title, j.id""",
        values
    )
    return [job_row(row) for row in result.mappings().all()]


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Retrieve a job with its company's details.

    Returns:
        {id, title, salary, equity, company}
        where company is {handle, name, description, numEmployees, logoUrl}

    Raises:
        NotFoundError: If no such job
    """
    row = execute_sql(
        db,
        f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = $1",
        [job_id]
    ).mappings().first()

    if not row:
        raise NotFoundError(f"No job: {job_id}")

    job = job_row(row)
    company_handle = job.pop("companyHandle")

    company = execute_sql(
        db,
        """SELECT handle,
                  name,
                  description,
                  num_employees AS "numEmployees",
                  logo_url AS "logoUrl"
           FROM companies
           WHERE handle = $1""",
        [company_handle]
    ).mappings().first()

    job["company"] = dict(company) if company else None
    return job


def update(db: Session, job_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job; only the provided fields change.

    Args:
        data: Any of {title, salary, equity}

    Returns:
        {id, title, salary, equity, companyHandle}

    Raises:
        BadRequestError: If data is empty
        NotFoundError: If no such job
    """
    set_cols, values = sql_for_partial_update(data)
    id_idx = len(values) + 1

    result = execute_sql(
        db,
        f"""UPDATE jobs
            SET {set_cols}
            WHERE id = ${id_idx}
            RETURNING {JOB_COLUMNS}""",
        [*values, job_id]
    )
    row = result.mappings().first()
    db.commit()

    if not row:
        raise NotFoundError(f"No job: {job_id}")

    logger.info(f"Updated job {job_id}: {sorted(data)}")
    return job_row(row)


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job by id.

    Raises:
        NotFoundError: If no such job
    """
    result = execute_sql(
        db,
        "DELETE FROM jobs WHERE id = $1 RETURNING id",
        [job_id]
    )
    row = result.first()
    db.commit()

    if not row:
        raise NotFoundError(f"No job: {job_id}")

    logger.info(f"Deleted job {job_id}")
