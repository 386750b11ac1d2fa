"""
CRUD operations for users and their job applications.

Password hashes are written but never selected into a returned projection,
except by authenticate() which needs the hash to compare against.
"""

import logging
from typing import Any, Dict, List, Mapping
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import execute_sql
from app.core.errors import BadRequestError, NotFoundError, UnauthorizedError
from app.core.security import get_password_hash, verify_password
from app.core.sql import sql_for_partial_update

logger = logging.getLogger(__name__)

USER_COLUMNS = (
    'username, first_name AS "firstName", last_name AS "lastName", '
    'email, is_admin AS "isAdmin"'
)

# API field name -> column name, for fields that differ
JS_TO_SQL = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
}


def user_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert a result row to a dict; SQLite hands booleans back as 0/1."""
    user = dict(row)
    user["isAdmin"] = bool(user["isAdmin"])
    return user


def authenticate(db: Session, username: str, password: str) -> Dict[str, Any]:
    """
    Check a username/password pair.

    Returns:
        {username, firstName, lastName, email, isAdmin}

    Raises:
        UnauthorizedError: If the user is missing or the password is wrong
    """
    row = execute_sql(
        db,
        f"SELECT {USER_COLUMNS}, password FROM users WHERE username = $1",
        [username]
    ).mappings().first()

    if row:
        user = user_row(row)
        hashed_password = user.pop("password")
        if verify_password(password, hashed_password):
            return user

    logger.warning(f"Failed login for username {username}")
    raise UnauthorizedError("Invalid username/password")


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Register a user with a hashed password.

    Args:
        data: {username, password, firstName, lastName, email, isAdmin}

    Returns:
        {username, firstName, lastName, email, isAdmin}

    Raises:
        BadRequestError: If the username is taken
    """
    username = data["username"]
    try:
        result = execute_sql(
            db,
            f"""INSERT INTO users (username, password, first_name, last_name, email, is_admin)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {USER_COLUMNS}""",
            [
                username,
                get_password_hash(data["password"]),
                data["firstName"],
                data["lastName"],
                data["email"],
                data.get("isAdmin", False),
            ]
        )
        user = user_row(result.mappings().first())
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestError(f"Duplicate username: {username}")

    logger.info(f"Registered user {username} (admin: {user['isAdmin']})")
    return user


def find_all(db: Session) -> List[Dict[str, Any]]:
    """
    Find all users, ordered by username.

    Returns:
        [{username, firstName, lastName, email, isAdmin}, ...]
    """
    result = execute_sql(
        db,
        f"SELECT {USER_COLUMNS} FROM users ORDER BY username"
    )
    return [user_row(row) for row in result.mappings().all()]


def get(db: Session, username: str) -> Dict[str, Any]:
    """
    Retrieve a user and the ids of the jobs they applied to.

    Returns:
        {username, firstName, lastName, email, isAdmin, applications}

    Raises:
        NotFoundError: If no such user
    """
    row = execute_sql(
        db,
        f"SELECT {USER_COLUMNS} FROM users WHERE username = $1",
        [username]
    ).mappings().first()

    if not row:
        raise NotFoundError(f"No user: {username}")

    user = user_row(row)
    applications = execute_sql(
        db,
        "SELECT job_id FROM applications WHERE username = $1 ORDER BY job_id",
        [username]
    ).scalars().all()
    user["applications"] = list(applications)

    return user


def update(db: Session, username: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a user; only the provided fields change.

    A new password is hashed before it is stored.

    Args:
        data: Any of {firstName, lastName, password, email, isAdmin}

    Returns:
        {username, firstName, lastName, email, isAdmin}

    Raises:
        BadRequestError: If data is empty
        NotFoundError: If no such user
    """
    data = dict(data)
    if data.get("password") is not None:
        data["password"] = get_password_hash(data["password"])

    set_cols, values = sql_for_partial_update(data, JS_TO_SQL)
    username_idx = len(values) + 1

    result = execute_sql(
        db,
        f"""UPDATE users
            SET {set_cols}
            WHERE username = ${username_idx}
            RETURNING {USER_COLUMNS}""",
        [*values, username]
    )
    row = result.mappings().first()
    db.commit()

    if not row:
        raise NotFoundError(f"No user: {username}")

    logger.info(f"Updated user {username}: {sorted(data)}")
    return user_row(row)


def remove(db: Session, username: str) -> None:
    """
    Delete a user (and, by cascade, their applications).

    Raises:
        NotFoundError: If no such user
    """
    result = execute_sql(
        db,
        "DELETE FROM users WHERE username = $1 RETURNING username",
        [username]
    )
    row = result.first()
    db.commit()

    if not row:
        raise NotFoundError(f"No user: {username}")

    logger.info(f"Deleted user {username}")


def apply_to_job(db: Session, username: str, job_id: int) -> None:
    """
    Record that a user applied to a job.

    Applying twice to the same job is a no-op.

    Raises:
        NotFoundError: If the job or the user does not exist
    """
    job_check = execute_sql(
        db,
        "SELECT id FROM jobs WHERE id = $1",
        [job_id]
    ).first()
    if not job_check:
        raise NotFoundError(f"No job: {job_id}")

    user_check = execute_sql(
        db,
        "SELECT username FROM users WHERE username = $1",
        [username]
    ).first()
    if not user_check:
        raise NotFoundError(f"No username: {username}")

    execute_sql(
        db,
        """INSERT INTO applications (job_id, username)
           VALUES ($1, $2)
           ON CONFLICT (username, job_id) DO NOTHING""",
        [job_id, username]
    )
    db.commit()

    logger.info(f"User {username} applied to job {job_id}")
