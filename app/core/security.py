"""
Security utilities for JWT authentication and password hashing.

Tokens are signed with HS256 using the configured SECRET_KEY.
Passwords are hashed using bcrypt for security.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from app.core.config import Settings, settings

# Password hashing context (bcrypt)
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_WORK_FACTOR,
)


@dataclass(frozen=True)
class Identity:
    """Decoded token payload: who is calling and whether they are an admin."""
    username: str
    is_admin: bool = False


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    # Bcrypt has a 72-byte limit - truncate if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    return pwd_context.verify(password_bytes, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    Note: Bcrypt has a 72-byte limit. Passwords longer than 72 bytes
    are automatically truncated to comply with this limitation.
    """
    # Bcrypt has a 72-byte limit - truncate if necessary
    password_bytes = password.encode('utf-8')[:72]
    return pwd_context.hash(password_bytes)


class TokenCodec:
    """
    Signs and verifies access tokens.

    Built once from Settings at startup and handed to request handlers via
    the get_token_codec dependency, so tests can swap in their own secret.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, config: Settings) -> "TokenCodec":
        return cls(
            secret_key=config.SECRET_KEY,
            algorithm=config.ALGORITHM,
            expire_minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES,
        )

    def create_token(self, identity: Identity, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed access token for a user.

        Args:
            identity: Username and admin flag to encode
            expires_delta: Optional lifetime (default: expire_minutes)

        Returns:
            Encoded JWT token as a string
        """
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=self.expire_minutes))
        to_encode = {
            "sub": identity.username,
            "is_admin": identity.is_admin,
            "exp": expire,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Identity:
        """
        Decode and validate a JWT token.

        Raises:
            JWTError: If token is invalid, expired or carries no subject
        """
        payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        username = payload.get("sub")
        if not username:
            raise JWTError("Token has no subject")
        return Identity(username=username, is_admin=bool(payload.get("is_admin", False)))


token_codec = TokenCodec.from_settings(settings)


def get_token_codec() -> TokenCodec:
    """Dependency returning the process-wide token codec."""
    return token_codec
