"""
Pydantic schemas for company requests.

Field names follow the JSON API (camelCase) through aliases.
"""

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from typing import Optional

_url_adapter = TypeAdapter(AnyHttpUrl)


def check_url(v: Optional[str]) -> Optional[str]:
    """Validate an http(s) URL but keep the caller's spelling."""
    if v is not None:
        _url_adapter.validate_python(v)
    return v


class CompanyNew(BaseModel):
    """Schema for creating a company"""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    check_logo_url = field_validator("logo_url")(check_url)


class CompanyUpdate(BaseModel):
    """Schema for a partial company update; the handle cannot change"""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    check_logo_url = field_validator("logo_url")(check_url)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("name cannot be null")
        return v


class CompanySearch(BaseModel):
    """Query-string filters for GET /companies"""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: Optional[str] = None
    min_employees: Optional[int] = Field(None, ge=0, alias="minEmployees")
    max_employees: Optional[int] = Field(None, ge=0, alias="maxEmployees")
