"""Library story model."""

from typing import Tuple
from pydantic import BaseModel, Field

from .scene import Scene


class Story(BaseModel):
    """A ready-made story that can seed a new project."""

    id: str = Field(..., description="Story identifier")
    title: str = Field(..., description="Story title")
    synopsis: str = Field(..., description="Short summary")
    category: str = Field(..., description="Library category")
    format: str = Field(..., description="Content format")
    scenes: Tuple[Scene, ...] = Field(default_factory=tuple, description="Example scenes")

    class Config:
        """Pydantic config."""
        frozen = True
