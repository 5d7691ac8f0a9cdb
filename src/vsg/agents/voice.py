"""Voice-over agent: casting and delivery recommendations for a script."""

import re
from dataclasses import dataclass

from ..models import Gender, VoiceOver
from ..parsing import MarkerParser, Section
from .base import BaseAgent

SYSTEM_PROMPT = """You are a voice-over director.
You recommend voices and delivery for narration and always answer using the
exact section markers you are given."""

VOICE_PROMPT = """For this script:
"{script}"

Target audience: {target_audience}
Style: {story_style}

Provide detailed voice-over recommendations that will best convey the message and engage the audience. Include:

1. Voice characteristics
2. Performance direction
3. Optimized script for vocal delivery

Format your response exactly as:

GENDER: [male/female/neutral]
EMOTION: [detailed emotional tone]
STYLE: [specific voice style]
DIRECTION: [performance notes and guidance]
MODIFIED SCRIPT: [script optimized for voice-over delivery]"""

VOICE_PARSER = MarkerParser([
    Section("gender", "GENDER:", default=Gender.NEUTRAL.value, multiline=False),
    Section("emotion", "EMOTION:", default="neutral", multiline=False),
    Section("style", "STYLE:", default="narrator", multiline=False),
    Section("text", "MODIFIED SCRIPT:"),
], stops=("DIRECTION:",))


def parse_gender(value: str) -> Gender:
    """Map a free-text answer such as 'Female (warm)' onto a Gender."""
    word = value.strip(" \t*[]()\"'").lower()
    for gender in Gender:
        if re.match(rf"{gender.value}\b", word):
            return gender
    return Gender.NEUTRAL


@dataclass
class VoiceOverRequest:
    """Input data for the voice-over agent."""

    script: str
    target_audience: str
    story_style: str


class VoiceOverAgent(BaseAgent[VoiceOverRequest, VoiceOver]):
    """Agent for recommending a voice-over for a scene script."""

    @property
    def name(self) -> str:
        return "VoiceOverAgent"

    @property
    def system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def run(self, input_data: VoiceOverRequest) -> VoiceOver:
        """Recommend a voice-over for the given script.

        Unparsed fields fall back to neutral/narrator and the text falls back
        to the original script.

        Raises:
            GenerationError: If the generation service call fails.
        """
        prompt = VOICE_PROMPT.format(
            script=input_data.script,
            target_audience=input_data.target_audience,
            story_style=input_data.story_style,
        )
        response = self._create_message(prompt=prompt, max_tokens=2048)

        parsed = VOICE_PARSER.parse(response)
        if parsed.defaulted:
            self._logger.debug(f"Defaulted voice-over fields: {', '.join(parsed.defaulted)}")

        return VoiceOver(
            gender=parse_gender(parsed["gender"]),
            emotion=parsed["emotion"],
            style=parsed["style"],
            text=parsed["text"] or input_data.script,
        )
