"""Data models for the video script generator."""

from .voice_over import Gender, VoiceOver
from .scene import Scene, new_id
from .project import Project, ProjectDraft
from .user import User
from .story import Story

__all__ = [
    "Gender",
    "VoiceOver",
    "Scene",
    "new_id",
    "Project",
    "ProjectDraft",
    "User",
    "Story",
]
