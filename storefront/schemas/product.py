"""
Schemas for product records coming from the commerce platform.
"""

from typing import Optional

from pydantic import Field, field_validator

from storefront.schemas.base import BaseSchema


class ProductRecord(BaseSchema):
    """The slice of a platform product that is mirrored into the content store."""

    id: str = Field(min_length=1)
    title: str
    description: Optional[str] = None

    @field_validator('description', mode='before')
    @classmethod
    def blank_description_is_missing(cls, v):
        if v is None:
            return None
        v = str(v)
        return v if v.strip() else None
