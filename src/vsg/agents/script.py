"""Script agent: synopsis and scene breakdown for a project."""

from dataclasses import dataclass, field
from typing import List, Tuple

from ..models import ProjectDraft, Scene, VoiceOver
from ..parsing import MarkerParser, Section, split_blocks
from .base import BaseAgent


@dataclass(frozen=True)
class SceneCountRange:
    """Inclusive range of scenes to ask for."""

    min: int
    max: int


# Scene counts per duration bucket offered by the project form
SCENE_COUNTS = {
    "30-60 seconds": SceneCountRange(2, 4),
    "1-2 minutes": SceneCountRange(3, 6),
    "2-5 minutes": SceneCountRange(5, 10),
    "5-10 minutes": SceneCountRange(8, 15),
    "10+ minutes": SceneCountRange(12, 20),
}
DEFAULT_SCENE_COUNT = SceneCountRange(3, 6)


def scene_count_range(duration: str) -> SceneCountRange:
    """Return the scene count range for a duration bucket."""
    return SCENE_COUNTS.get((duration or "").strip(), DEFAULT_SCENE_COUNT)


SYSTEM_PROMPT = """You are a professional scriptwriter for short-form video.
You write vivid, well-paced scripts and always follow the requested output
format exactly, using the section markers you are given."""

SCRIPT_PROMPT = """Create a complete, professional {format} script titled "{title}" with {min_scenes}-{max_scenes} distinct scenes.

Project Details:
- Description: {description}
- Target Audience: {target_audience}
- Style: {story_style}
- Duration: {duration}

Requirements:
1. Generate exactly {min_scenes}-{max_scenes} scenes to properly pace the content
2. Each scene should be 10-20 seconds in length
3. Ensure smooth transitions between scenes
4. Include varied shot types (wide, medium, close-up) across scenes
5. Balance dialogue/narration with visual elements

Content Guidelines:
- Opening Scene: Hook the audience with a strong visual or statement
- Middle Scenes: Develop the core message/story with supporting points
- Closing Scene: Clear call-to-action or memorable conclusion

Please provide:
1. A compelling synopsis (2-3 sentences)
2. {min_scenes}-{max_scenes} detailed scenes, each including:
   - Scene description and purpose
   - Specific script/narration text
   - Detailed visual description
   - Emotional tone and pacing notes

Format Requirements:

SYNOPSIS:
[2-3 sentence synopsis]

SCENES:

---SCENE 1---
DESCRIPTION: [scene purpose and narrative context]
SCRIPT: [exact narration/dialogue text]
VISUAL: [detailed visual description]
TONE: [emotional tone and pacing]
---END SCENE---

[Repeat for each scene, maintaining story flow]

Additional Notes:
- For {format}, optimize scene length and pacing
- Target {target_audience} with appropriate language and visuals
- Maintain {story_style} style throughout
- Total duration should fit within {duration}"""

SYNOPSIS_PARSER = MarkerParser(
    [Section("synopsis", "SYNOPSIS:")],
    stops=("SCENES:", "---"),
)

SCENE_PARSER = MarkerParser([
    Section("description", "DESCRIPTION:"),
    Section("script", "SCRIPT:"),
    Section("visual", "VISUAL:"),
    Section("tone", "TONE:"),
])


@dataclass
class ScriptResult:
    """Parsed script: synopsis, scenes and the fields that fell back to defaults."""

    synopsis: str
    scenes: List[Scene]
    defaulted: List[str] = field(default_factory=list)
    padded: int = 0


class ScriptAgent(BaseAgent[ProjectDraft, ScriptResult]):
    """Agent for turning project parameters into a synopsis and scenes."""

    @property
    def name(self) -> str:
        """Return the agent's name."""
        return "ScriptAgent"

    @property
    def system_prompt(self) -> str:
        """Return the system prompt for script generation."""
        return SYSTEM_PROMPT

    def run(self, input_data: ProjectDraft) -> ScriptResult:
        """Generate a synopsis and scenes for a project.

        Args:
            input_data: Project parameters (title, audience, style, format, duration).

        Returns:
            ScriptResult with at least the minimum scene count for the duration.

        Raises:
            GenerationError: If the generation service call fails.
        """
        counts = scene_count_range(input_data.duration)
        self._logger.info(
            f"Generating script for '{input_data.title}' "
            f"({input_data.duration}, {counts.min}-{counts.max} scenes)"
        )

        prompt = self.build_prompt(input_data)
        response = self._create_message(prompt=prompt, max_tokens=8192, temperature=0.8)
        result = self.parse_response(response, counts)

        self._logger.info(f"Generated {len(result.scenes)} scenes ({result.padded} padded)")
        return result

    def build_prompt(self, input_data: ProjectDraft) -> str:
        """Build the user prompt for script generation."""
        counts = scene_count_range(input_data.duration)
        return SCRIPT_PROMPT.format(
            title=input_data.title,
            description=input_data.description,
            target_audience=input_data.target_audience,
            story_style=input_data.story_style,
            format=input_data.format,
            duration=input_data.duration,
            min_scenes=counts.min,
            max_scenes=counts.max,
        )

    def parse_response(self, response: str, counts: SceneCountRange) -> ScriptResult:
        """Parse the model's reply into a ScriptResult.

        Missing sections become empty strings and the scene list is padded
        with blank scenes up to ``counts.min``. Parsed scenes are never
        dropped, even past ``counts.max``.
        """
        synopsis = SYNOPSIS_PARSER.parse(response)
        defaulted = list(synopsis.defaulted)

        scenes: List[Scene] = []
        for index, block in enumerate(split_blocks(response)):
            scene, missing = self._build_scene(index, block)
            scenes.append(scene)
            defaulted.extend(f"scene {index + 1}.{name}" for name in missing)

        if len(scenes) > counts.max:
            self._logger.warning(
                f"Model returned {len(scenes)} scenes, more than the requested {counts.max}"
            )

        padded = 0
        while len(scenes) < counts.min:
            scenes.append(Scene.empty(order=len(scenes)))
            padded += 1

        if defaulted:
            self._logger.debug(f"Defaulted fields: {', '.join(defaulted)}")

        return ScriptResult(
            synopsis=synopsis["synopsis"],
            scenes=scenes,
            defaulted=defaulted,
            padded=padded,
        )

    @staticmethod
    def _build_scene(index: int, block: str) -> Tuple[Scene, List[str]]:
        parsed = SCENE_PARSER.parse(block)
        script = parsed["script"]
        visual = parsed["visual"]
        tone = parsed["tone"]

        # Tone only qualifies a visual description; on its own it is dropped
        if visual and tone:
            visual_description = f"{visual}\n\nTone: {tone}"
        else:
            visual_description = visual

        scene = Scene(
            order=index,
            script=script,
            visual_description=visual_description,
            voice_over=VoiceOver(text=script),
        )
        return scene, parsed.defaulted
