"""
User management endpoints.

- POST /users: admin creates a user (possibly another admin), gets a token back
- GET /users: admin lists all users
- GET/PATCH/DELETE /users/{username}: that user or an admin
- POST /users/{username}/jobs/{job_id}: apply to a job, that user or an admin
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import require_admin, require_self_or_admin
from app.core.security import Identity, TokenCodec, get_token_codec
from app.crud import user as user_crud
from app.schemas.user import UserNew, UserUpdate

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201)
def create_user(
    request: UserNew,
    db: Session = Depends(get_db),
    admin: Identity = Depends(require_admin),
    codec: TokenCodec = Depends(get_token_codec)
):
    """
    Add a new user. This is not registration: only admins may call it, and
    the new user may itself be an admin.

    Returns { user: { username, firstName, lastName, email, isAdmin }, token }
    """
    user = user_crud.create(db, request.model_dump(by_alias=True))
    token = codec.create_token(Identity(username=user["username"], is_admin=user["isAdmin"]))

    logger.info(f"Admin {admin.username} created user {user['username']}")
    return {"user": user, "token": token}


@router.get("", dependencies=[Depends(require_admin)])
def list_users(db: Session = Depends(get_db)):
    """
    List all users.

    Returns { users: [ { username, firstName, lastName, email, isAdmin }, ... ] }
    """
    return {"users": user_crud.find_all(db)}


@router.get("/{username}", dependencies=[Depends(require_self_or_admin)])
def get_user(username: str, db: Session = Depends(get_db)):
    """
    Retrieve a user and the ids of the jobs they applied to.

    Returns { user: { username, firstName, lastName, email, isAdmin, applications } }
    """
    return {"user": user_crud.get(db, username)}


@router.patch("/{username}", dependencies=[Depends(require_self_or_admin)])
def update_user(username: str, request: UserUpdate, db: Session = Depends(get_db)):
    """
    Partially update a user.

    Fields can be: { firstName, lastName, password, email }
    """
    user = user_crud.update(db, username, request.model_dump(by_alias=True, exclude_unset=True))
    return {"user": user}


@router.delete("/{username}", dependencies=[Depends(require_self_or_admin)])
def delete_user(username: str, db: Session = Depends(get_db)):
    """Delete a user and their applications."""
    user_crud.remove(db, username)
    return {"deleted": username}


@router.post("/{username}/jobs/{job_id}", dependencies=[Depends(require_self_or_admin)])
def apply_to_job(username: str, job_id: int, db: Session = Depends(get_db)):
    """
    Apply to a job.

    Returns { applied: job_id }
    """
    user_crud.apply_to_job(db, username, job_id)
    return {"applied": job_id}
