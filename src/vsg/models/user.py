"""User data model."""

from typing import Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from .scene import new_id


class User(BaseModel):
    """The signed-in user and their generation credential."""

    id: str = Field(default_factory=new_id, description="User identifier")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    api_key: Optional[str] = Field(None, description="Generation service API key", repr=False)

    class Config:
        """Pydantic config."""
        frozen = True
        alias_generator = to_camel
        populate_by_name = True
