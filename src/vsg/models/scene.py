"""Scene data model."""

import uuid
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from .voice_over import VoiceOver


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return str(uuid.uuid4())


class Scene(BaseModel):
    """Represents a single scene in a project."""

    id: str = Field(default_factory=new_id, description="Unique scene identifier")
    order: int = Field(..., description="Zero-based position in the project", ge=0)
    script: str = Field(default="", description="Narration or dialogue")
    visual_description: str = Field(default="", description="What the viewer sees")
    image_prompt: str = Field(default="", description="Prompt for an image generator")
    video_prompt: str = Field(default="", description="Prompt for a video/motion generator")
    voice_over: VoiceOver = Field(default_factory=VoiceOver, description="Voice-over direction")

    class Config:
        """Pydantic config."""
        frozen = True
        alias_generator = to_camel
        populate_by_name = True

    @classmethod
    def empty(cls, order: int) -> "Scene":
        """Create a blank scene with a new id and default voice-over."""
        return cls(order=order)
