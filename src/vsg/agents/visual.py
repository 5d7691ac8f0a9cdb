"""Visual prompt agent: image and video prompts for one scene."""

from dataclasses import dataclass, field
from typing import List

from ..parsing import MarkerParser, Section
from .base import BaseAgent

SYSTEM_PROMPT = """You are a prompt engineer for AI image and video generators.
You turn scene descriptions into precise, richly detailed prompts and always
answer using the exact section markers you are given."""

VISUAL_PROMPT = """Based on this scene:
"{scene}"

And this visual description:
"{visual_description}"

Generate two detailed prompts:
1. A comprehensive image generation prompt for AI tools like Midjourney or DALL-E, including:
   - Scene composition
   - Lighting and atmosphere
   - Key visual elements
   - Style and artistic direction

2. A detailed video motion prompt describing:
   - Camera movements and angles
   - Transitions and effects
   - Timing and pacing
   - Any special visual treatments

Format the output as:

IMAGE PROMPT:
[detailed image prompt]

VIDEO PROMPT:
[detailed video motion prompt]"""

PROMPTS_PARSER = MarkerParser([
    Section("image_prompt", "IMAGE PROMPT:"),
    Section("video_prompt", "VIDEO PROMPT:"),
])


@dataclass
class VisualPromptRequest:
    """Input data for the visual prompt agent."""

    scene: str
    visual_description: str


@dataclass
class VisualPrompts:
    """Generated prompts; empty strings where the reply had no section."""

    image_prompt: str
    video_prompt: str
    defaulted: List[str] = field(default_factory=list)


class VisualPromptAgent(BaseAgent[VisualPromptRequest, VisualPrompts]):
    """Agent for writing image and video generator prompts for a scene."""

    @property
    def name(self) -> str:
        return "VisualPromptAgent"

    @property
    def system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def run(self, input_data: VisualPromptRequest) -> VisualPrompts:
        """Generate image and video prompts for a scene.

        Raises:
            GenerationError: If the generation service call fails.
        """
        prompt = VISUAL_PROMPT.format(
            scene=input_data.scene,
            visual_description=input_data.visual_description,
        )
        response = self._create_message(prompt=prompt, max_tokens=2048)

        parsed = PROMPTS_PARSER.parse(response)
        if parsed.defaulted:
            self._logger.warning(f"Missing sections in reply: {', '.join(parsed.defaulted)}")

        return VisualPrompts(
            image_prompt=parsed["image_prompt"],
            video_prompt=parsed["video_prompt"],
            defaulted=parsed.defaulted,
        )
