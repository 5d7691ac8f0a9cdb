"""Project data models."""

from datetime import datetime, timezone
from typing import Optional, Tuple
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from .scene import Scene


class ProjectDraft(BaseModel):
    """User-supplied fields of a new project."""

    title: str = Field(..., description="Project title")
    description: str = Field(default="", description="What the video is about")
    target_audience: str = Field(default="general", description="Intended audience")
    story_style: str = Field(default="educational", description="Story style, e.g. comedy or drama")
    format: str = Field(default="short-video", description="Content format, e.g. reels")
    duration: str = Field(default="1-2 minutes", description="Duration bucket")

    class Config:
        """Pydantic config."""
        frozen = True
        alias_generator = to_camel
        populate_by_name = True


class Project(ProjectDraft):
    """A project and its ordered scenes."""

    id: str = Field(..., description="Unique project identifier")
    created_at: datetime = Field(..., description="Creation time (UTC)")
    updated_at: datetime = Field(..., description="Last modification time (UTC)")
    scenes: Tuple[Scene, ...] = Field(..., description="Scenes in play order", min_length=1)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def get_scene(self, scene_id: str) -> Optional[Scene]:
        """Return the scene with the given id, if any."""
        for scene in self.scenes:
            if scene.id == scene_id:
                return scene
        return None
