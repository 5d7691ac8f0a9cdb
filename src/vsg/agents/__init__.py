"""Generation agents for scripts, visual prompts and voice-over."""

from .base import BaseAgent
from .script import ScriptAgent, ScriptResult, SceneCountRange, scene_count_range
from .visual import VisualPromptAgent, VisualPromptRequest, VisualPrompts
from .voice import VoiceOverAgent, VoiceOverRequest

__all__ = [
    "BaseAgent",
    "ScriptAgent",
    "ScriptResult",
    "SceneCountRange",
    "scene_count_range",
    "VisualPromptAgent",
    "VisualPromptRequest",
    "VisualPrompts",
    "VoiceOverAgent",
    "VoiceOverRequest",
]
