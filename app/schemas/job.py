from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

# A fraction between 0 and 1, written as a decimal string ("0", "0.25", "1.0")
EQUITY_PATTERN = r"^(0(\.\d+)?|1(\.0+)?)$"


class JobNew(BaseModel):
    """Schema for creating a job"""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[str] = Field(None, pattern=EQUITY_PATTERN)
    company_handle: str = Field(..., min_length=1, max_length=25, alias="companyHandle")


class JobUpdate(BaseModel):
    """Schema for a partial job update; id and company cannot change"""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[str] = Field(None, pattern=EQUITY_PATTERN)

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("title cannot be null")
        return v


class JobSearch(BaseModel):
    """Query-string filters for GET /jobs"""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    title: Optional[str] = None
    min_salary: Optional[int] = Field(None, ge=0, alias="minSalary")
    has_equity: Optional[bool] = Field(None, alias="hasEquity")
