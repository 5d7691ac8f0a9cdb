"""Generation client: the four generation operations behind one facade.

Each operation performs exactly one request to the configured text
generation service using the caller's credential. Failures of the request
itself raise `GenerationError`; malformed content in an otherwise successful
reply never raises and degrades to documented defaults instead.
"""

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from .agents import (
    ScriptAgent,
    ScriptResult,
    VisualPromptAgent,
    VisualPromptRequest,
    VisualPrompts,
    VoiceOverAgent,
    VoiceOverRequest,
)
from .errors import ValidationError
from .models import ProjectDraft, VoiceOver
from .services import TextClient, create_client

logger = logging.getLogger(__name__)


def _client(api_key: Optional[str], client: Optional[TextClient]) -> TextClient:
    return client if client is not None else create_client(api_key)


def generate_content(
    prompt: str,
    api_key: Optional[str],
    client: Optional[TextClient] = None,
) -> str:
    """Send a raw prompt and return the completion text.

    Raises:
        GenerationError: If the request fails or the reply is unusable.
    """
    return _client(api_key, client).create_message(prompt=prompt)


def generate_script(
    params: Union[ProjectDraft, Mapping[str, Any]],
    api_key: Optional[str],
    client: Optional[TextClient] = None,
) -> ScriptResult:
    """Generate a synopsis and scenes from project parameters.

    Args:
        params: Project parameters, as a draft or a mapping of its fields.
        api_key: The user's credential for the generation service.
        client: Optional pre-built client, mainly for tests.

    Returns:
        ScriptResult with at least the minimum scene count for the duration.

    Raises:
        ValidationError: If ``params`` is not a valid set of project fields.
        GenerationError: If the request fails.
    """
    if isinstance(params, ProjectDraft):
        draft = params
    else:
        try:
            draft = ProjectDraft.model_validate(dict(params))
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid project parameters: {e}") from e
    return ScriptAgent(_client(api_key, client)).run(draft)


def generate_visual_prompts(
    scene: str,
    visual_description: str,
    api_key: Optional[str],
    client: Optional[TextClient] = None,
) -> VisualPrompts:
    """Generate image and video prompts for a scene script."""
    agent = VisualPromptAgent(_client(api_key, client))
    return agent.run(VisualPromptRequest(scene=scene, visual_description=visual_description))


def generate_voice_over_recommendations(
    script: str,
    target_audience: str,
    story_style: str,
    api_key: Optional[str],
    client: Optional[TextClient] = None,
) -> VoiceOver:
    """Recommend gender, emotion, style and delivery text for a script."""
    agent = VoiceOverAgent(_client(api_key, client))
    return agent.run(VoiceOverRequest(
        script=script,
        target_audience=target_audience,
        story_style=story_style,
    ))
