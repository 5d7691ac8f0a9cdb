"""Voice-over data model."""

from enum import Enum
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class Gender(str, Enum):
    """Voice gender."""
    MALE = "male"
    FEMALE = "female"
    NEUTRAL = "neutral"


class VoiceOver(BaseModel):
    """Voice-over direction attached to a scene."""

    gender: Gender = Field(default=Gender.NEUTRAL, description="Voice gender")
    emotion: str = Field(default="neutral", description="Emotional tone of the read")
    style: str = Field(default="narrator", description="Delivery style")
    text: str = Field(default="", description="Text to be read")

    class Config:
        """Pydantic config."""
        frozen = True
        alias_generator = to_camel
        populate_by_name = True
