"""
Authentication endpoints.

- POST /auth/token: exchange username/password for a token
- POST /auth/register: create a (non-admin) account and receive a token
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import Identity, TokenCodec, get_token_codec
from app.crud import user as user_crud
from app.schemas.user import TokenResponse, UserAuth, UserRegister

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/token", response_model=TokenResponse)
def get_token(
    request: UserAuth,
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec)
):
    """
    Authenticate and return a token for use on other requests.

    Raises 401 on unknown user or wrong password.
    """
    user = user_crud.authenticate(db, request.username, request.password)
    token = codec.create_token(Identity(username=user["username"], is_admin=user["isAdmin"]))

    logger.info(f"User logged in: {user['username']}")
    return TokenResponse(token=token)


@router.post("/register", status_code=201, response_model=TokenResponse)
def register(
    request: UserRegister,
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec)
):
    """
    Register a new user account.

    Self-registered users are never admins. Returns a token for immediate use.
    """
    user = user_crud.create(db, {**request.model_dump(by_alias=True), "isAdmin": False})
    token = codec.create_token(Identity(username=user["username"], is_admin=False))

    return TokenResponse(token=token)
