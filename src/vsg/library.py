"""Library of ready-made stories that can seed new projects."""

import logging
from pathlib import Path
from typing import List, Optional

import yaml

from .models import Project, ProjectDraft, Scene, Story
from .store import ProjectStore

logger = logging.getLogger(__name__)

LIBRARY_PATH = Path(__file__).parent / "data" / "library.yaml"


def load_library(path: Optional[Path] = None) -> List[Story]:
    """Load stories from a YAML file (the bundled library by default)."""
    path = path or LIBRARY_PATH
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    stories = [Story.model_validate(item) for item in data.get("stories", [])]
    logger.debug(f"Loaded {len(stories)} stories from {path}")
    return stories


def get_story(story_id: str, stories: Optional[List[Story]] = None) -> Optional[Story]:
    for story in stories if stories is not None else load_library():
        if story.id == story_id:
            return story
    return None


def search_stories(term: str, stories: Optional[List[Story]] = None) -> List[Story]:
    """Stories whose title or synopsis contains ``term``, ignoring case."""
    stories = stories if stories is not None else load_library()
    needle = (term or "").strip().lower()
    if not needle:
        return list(stories)
    return [
        story for story in stories
        if needle in story.title.lower() or needle in story.synopsis.lower()
    ]


def use_template(store: ProjectStore, story: Story) -> Project:
    """Create a project from a story, copying its scenes under fresh ids.

    The new project becomes the current project.
    """
    project = store.create_project(ProjectDraft(
        title=f"{story.title} (Copy)",
        description=story.synopsis,
        target_audience="General",
        story_style=story.category.lower(),
        format=story.format,
        duration="1-2 minutes",
    ))

    if story.scenes:
        scenes = [Scene(**scene.model_dump(exclude={"id"})) for scene in story.scenes]
        project = store.update_project(project.id, {"scenes": scenes})
    return project
