"""
FastAPI dependencies for authentication and authorization.

get_identity is soft: a missing or bad token simply means "anonymous".
The require_* gates are what enforce access, each raising UnauthorizedError
before the endpoint body runs.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from app.core.errors import UnauthorizedError
from app.core.security import Identity, TokenCodec, get_token_codec

# HTTP Bearer token scheme (Authorization: Bearer <token>), never auto-rejects
security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)


def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    codec: TokenCodec = Depends(get_token_codec)
) -> Optional[Identity]:
    """
    Extract the caller's identity from the bearer token, if any.

    Returns None when no token was sent or the token is invalid or expired.
    """
    if not credentials:
        return None

    try:
        return codec.decode_token(credentials.credentials)
    except JWTError as e:
        logger.warning(f"Ignoring invalid bearer token: {e}")
        return None


def require_logged_in(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    """
    Require any authenticated user.

    Raises:
        UnauthorizedError: If no valid token was provided
    """
    if identity is None:
        raise UnauthorizedError()
    return identity


def require_admin(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    """
    Require an authenticated admin.

    Raises:
        UnauthorizedError: If anonymous or not an admin
    """
    if identity is None or not identity.is_admin:
        raise UnauthorizedError()
    return identity


def require_self_or_admin(
    username: str,
    identity: Optional[Identity] = Depends(get_identity)
) -> Identity:
    """
    Require the user named in the path, or an admin.

    ``username`` is read from the route's path parameter of the same name.

    Raises:
        UnauthorizedError: If anonymous, or neither the same user nor an admin
    """
    if identity is None:
        raise UnauthorizedError()
    if not (identity.is_admin or identity.username == username):
        raise UnauthorizedError()
    return identity
