"""
Base schemas with standardized configuration for consistent API responses.
"""

from pydantic import BaseModel, ConfigDict


class StandardizedModel(BaseModel):
    """Base model for responses built from ORM rows."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class StrictRequestModel(BaseModel):
    """Request base: forbid unknown fields."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)
