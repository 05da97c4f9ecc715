"""
Site schemas.
"""

from typing import Optional

from pydantic import Field, field_validator

from orgaccess.schemas.base import AuditFields, BaseCreateSchema, BaseSchema, BaseUpdateSchema, SearchFilters, not_null


class Site(BaseSchema, AuditFields):
    id: str
    label: str


class SiteCreate(BaseCreateSchema):
    label: str = Field(..., min_length=1, max_length=100)


class SiteUpdate(BaseUpdateSchema):
    label: Optional[str] = Field(default=None, min_length=1, max_length=100)

    @field_validator("label")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


class SiteFilters(SearchFilters):
    pass
