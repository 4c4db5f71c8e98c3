"""
Base schemas with common functionality.
"""
from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema for inbound payloads.

    Host platforms send more than we read, so unknown keys are kept rather
    than rejected.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        extra="allow",
    )
