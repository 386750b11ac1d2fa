"""
Pydantic schemas for user accounts and authentication.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional


class UserRegister(BaseModel):
    """Request schema for self-service registration (never an admin)."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(
        ...,
        min_length=5,
        max_length=72,  # bcrypt limit
    )
    first_name: str = Field(..., min_length=1, max_length=30, alias="firstName")
    last_name: str = Field(..., min_length=1, max_length=30, alias="lastName")
    email: EmailStr


class UserNew(UserRegister):
    """Request schema for an admin creating a user, possibly another admin."""
    is_admin: bool = Field(False, alias="isAdmin")


class UserUpdate(BaseModel):
    """
    Partial profile update.

    Username and admin flag cannot be changed through this schema.
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    password: Optional[str] = Field(None, min_length=5, max_length=72)
    first_name: Optional[str] = Field(None, min_length=1, max_length=30, alias="firstName")
    last_name: Optional[str] = Field(None, min_length=1, max_length=30, alias="lastName")
    email: Optional[EmailStr] = None

    @field_validator("password", "first_name", "last_name", "email")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v


class UserAuth(BaseModel):
    """Request schema for POST /auth/token."""
    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=1, max_length=72)


class TokenResponse(BaseModel):
    """Signed access token."""
    token: str
