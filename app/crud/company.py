"""
CRUD operations for companies.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import execute_sql
from app.core.errors import BadRequestError, NotFoundError
from app.core.sql import FilterKind, sql_for_filters, sql_for_partial_update
from app.crud.job import job_row

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = (
    'handle, name, description, '
    'num_employees AS "numEmployees", logo_url AS "logoUrl"'
)

# API field name -> column name, for fields that differ
JS_TO_SQL = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

# Search filter name -> (column, predicate kind)
SEARCH_FILTERS = {
    "minEmployees": ("num_employees", FilterKind.MIN),
    "maxEmployees": ("num_employees", FilterKind.MAX),
    "name": ("name", FilterKind.CONTAINS),
}


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a company.

    Args:
        db: Database session
        data: {handle, name, description, numEmployees, logoUrl}

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        BadRequestError: If the handle or the name is already taken
    """
    handle = data["handle"]
    duplicate_check = execute_sql(
        db,
        "SELECT handle FROM companies WHERE handle = $1",
        [handle]
    ).first()

    if duplicate_check:
        raise BadRequestError(f"Duplicate company: {handle}")

    try:
        result = execute_sql(
            db,
            f"""INSERT INTO companies (handle, name, description, num_employees, logo_url)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {COMPANY_COLUMNS}""",
            [
                handle,
                data["name"],
                data.get("description"),
                data.get("numEmployees"),
                data.get("logoUrl"),
            ]
        )
        company = dict(result.mappings().first())
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestError(f"Duplicate company name: {data['name']}")

    logger.info(f"Created company {handle}")
    return company


def find_all(db: Session, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Find all companies, optionally filtered, ordered by name.

    filters (all optional):
        - name: case-insensitive partial match
        - minEmployees / maxEmployees: inclusive bounds on numEmployees

    Raises:
        BadRequestError: If minEmployees > maxEmployees
    """
    where_clause, values = sql_for_filters(filters, SEARCH_FILTERS)

    result = execute_sql(
        db,
        f"SELECT {COMPANY_COLUMNS} FROM companies{where_clause} ORDER BY name",
        values
    )
    return [dict(row) for row in result.mappings().all()]


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Retrieve a company and its jobs.

    Returns:
        {handle, name, description, numEmployees, logoUrl, jobs}
        where jobs is [{id, title, salary, equity}, ...]

    Raises:
        NotFoundError: If no such company
    """
    row = execute_sql(
        db,
        f"SELECT {COMPANY_COLUMNS} FROM companies WHERE handle = $1",
        [handle]
    ).mappings().first()

    if not row:
        raise NotFoundError(f"No company: {handle}")

    company = dict(row)
    jobs = execute_sql(
        db,
        """SELECT id, title, salary, equity
           FROM jobs
           WHERE company_handle = $1
           ORDER BY id""",
        [handle]
    ).mappings().all()
    company["jobs"] = [job_row(job) for job in jobs]

    return company


def update(db: Session, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company; only the provided fields change.

    Args:
        data: Any of {name, description, numEmployees, logoUrl}

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        BadRequestError: If data is empty or the new name is already taken
        NotFoundError: If no such company
    """
    set_cols, values = sql_for_partial_update(data, JS_TO_SQL)
    handle_idx = len(values) + 1

    try:
        result = execute_sql(
            db,
            f"""UPDATE companies
                SET {set_cols}
                WHERE handle = ${handle_idx}
                RETURNING {COMPANY_COLUMNS}""",
            [*values, handle]
        )
        row = result.mappings().first()
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestError(f"Duplicate company name: {data.get('name')}")

    if not row:
        raise NotFoundError(f"No company: {handle}")

    logger.info(f"Updated company {handle}: {sorted(data)}")
    return dict(row)


def remove(db: Session, handle: str) -> None:
    """
    Delete a company (and, by cascade, its jobs).

    Raises:
        NotFoundError: If no such company
    """
    result = execute_sql(
        db,
        "DELETE FROM companies WHERE handle = $1 RETURNING handle",
        [handle]
    )
    row = result.first()
    db.commit()

    if not row:
        raise NotFoundError(f"No company: {handle}")

    logger.info(f"Deleted company {handle}")
