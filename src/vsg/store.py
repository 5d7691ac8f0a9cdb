"""Project store: all projects, their scenes and the current selection.

Every command replaces the affected Project and Scene objects instead of
changing them in place, so anyone holding an earlier snapshot keeps seeing
the old values. Commands with an unknown id change nothing and return
``None``; effective commands return the resulting project and notify
subscribers.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .models import Project, ProjectDraft, Scene, VoiceOver, new_id

logger = logging.getLogger(__name__)

Listener = Callable[["ProjectStore"], None]

READ_ONLY_PROJECT_FIELDS = frozenset({"id", "created_at", "updated_at"})
READ_ONLY_SCENE_FIELDS = frozenset({"id", "order"})


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def field_updates(model_cls: Type[BaseModel], updates: Mapping[str, Any]) -> Dict[str, Any]:
    """Key ``updates`` by attribute name, accepting camelCase labels too.

    Unknown keys are dropped with a warning.
    """
    aliases = {
        info.alias: name
        for name, info in model_cls.model_fields.items()
        if info.alias
    }
    result: Dict[str, Any] = {}
    for key, value in updates.items():
        name = key if key in model_cls.model_fields else aliases.get(key)
        if name is None:
            logger.warning(f"Ignoring unknown {model_cls.__name__} field '{key}'")
            continue
        result[name] = value
    return result


def merge(model: BaseModel, changes: Mapping[str, Any]) -> Any:
    """Return a validated copy of ``model`` with ``changes`` applied.

    Raises:
        ValidationError: If a changed value is malformed.
    """
    data = model.model_dump()
    data.update(changes)
    try:
        return type(model).model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid {type(model).__name__} update: {e}") from e


def renumber(scenes: Iterable[Scene]) -> Tuple[Scene, ...]:
    """Give scenes the orders 0..n-1 in their current sequence."""
    return tuple(
        scene if scene.order == index else scene.model_copy(update={"order": index})
        for index, scene in enumerate(scenes)
    )


def unique_scenes(scenes: Iterable[Union[Scene, Mapping[str, Any]]]) -> List[Union[Scene, Mapping[str, Any]]]:
    """Drop scenes whose id was already seen, keeping the first occurrence.

    Scene mappings without an id are kept; they get a fresh id on validation.
    """
    result = []
    seen = set()
    for scene in scenes:
        scene_id = scene.id if isinstance(scene, Scene) else scene.get("id")
        if scene_id is not None:
            if scene_id in seen:
                logger.warning(f"Dropping scene with duplicate id {scene_id}")
                continue
            seen.add(scene_id)
        result.append(scene)
    return result


class ProjectStore:
    """Single source of truth for projects and the current project.

    The current project is kept as an id and resolved against the collection
    on every read, so it can never point at a detached copy.
    """

    def __init__(
        self,
        projects: Iterable[Project] = (),
        current_project_id: Optional[str] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._projects: Tuple[Project, ...] = ()
        self._current_id: Optional[str] = None
        self._listeners: List[Listener] = []
        self._clock = clock
        self.load(projects, current_project_id)

    # Queries

    @property
    def projects(self) -> Tuple[Project, ...]:
        return self._projects

    @property
    def current_project_id(self) -> Optional[str]:
        return self._current_id

    @property
    def current_project(self) -> Optional[Project]:
        return self.get_project(self._current_id) if self._current_id else None

    def get_project(self, project_id: Optional[str]) -> Optional[Project]:
        index = self._index(project_id)
        return self._projects[index] if index != -1 else None

    # Observers

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(store)`` after every effective change.

        Returns:
            A function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def load(self, projects: Iterable[Project], current_project_id: Optional[str] = None) -> None:
        """Replace the whole state without notifying subscribers."""
        self._projects = tuple(projects)
        self._current_id = current_project_id if self._index(current_project_id) != -1 else None

    # Commands

    def create_project(self, draft: Union[ProjectDraft, Mapping[str, Any]]) -> Project:
        """Create a project with one blank scene and make it current."""
        if not isinstance(draft, ProjectDraft):
            try:
                draft = ProjectDraft.model_validate(dict(draft))
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid project: {e}") from e

        now = self._clock()
        project = Project(
            **draft.model_dump(),
            id=new_id(),
            created_at=now,
            updated_at=now,
            scenes=(Scene.empty(order=0),),
        )
        self._projects = self._projects + (project,)
        self._current_id = project.id
        logger.info(f"Created project '{project.title}' ({project.id})")
        self._notify()
        return project

    def update_project(self, project_id: str, updates: Mapping[str, Any]) -> Optional[Project]:
        """Merge ``updates`` into a project and refresh its ``updated_at``.

        ``id``, ``created_at`` and ``updated_at`` cannot be written. A
        ``scenes`` value replaces the scene list when it is not empty and is
        renumbered from zero.
        """
        index = self._index(project_id)
        if index == -1:
            logger.debug(f"update_project: no project {project_id}")
            return None

        changes = field_updates(Project, updates)
        for name in READ_ONLY_PROJECT_FIELDS & changes.keys():
            logger.warning(f"Ignoring read-only project field '{name}'")
            del changes[name]

        if "scenes" in changes:
            scenes = unique_scenes(changes["scenes"] or ())
            if not scenes:
                logger.warning("Ignoring empty scene list; a project keeps at least one scene")
                del changes["scenes"]
            else:
                changes["scenes"] = [
                    scene.model_copy(update={"order": i}) if isinstance(scene, Scene) else {**scene, "order": i}
                    for i, scene in enumerate(scenes)
                ]

        changes["updated_at"] = self._clock()
        return self._replace(index, merge(self._projects[index], changes))

    def delete_project(self, project_id: str) -> Optional[Project]:
        """Remove a project with its scenes; returns the removed project."""
        index = self._index(project_id)
        if index == -1:
            return None

        removed = self._projects[index]
        self._projects = self._projects[:index] + self._projects[index + 1:]
        if self._current_id == project_id:
            self._current_id = None
        logger.info(f"Deleted project '{removed.title}' ({removed.id})")
        self._notify()
        return removed

    def set_current_project(self, project_id: Optional[str]) -> Optional[Project]:
        """Select a project, or clear the selection when the id is unknown."""
        project = self.get_project(project_id)
        selected = project.id if project else None
        if selected != self._current_id:
            self._current_id = selected
            self._notify()
        return project

    def add_scene(self, project_id: str) -> Optional[Project]:
        """Append a blank scene at the end of a project."""
        index = self._index(project_id)
        if index == -1:
            return None

        project = self._projects[index]
        scene = Scene.empty(order=len(project.scenes))
        return self._replace(index, project.model_copy(update={
            "scenes": project.scenes + (scene,),
            "updated_at": self._clock(),
        }))

    def update_scene(
        self,
        project_id: str,
        scene_id: str,
        updates: Mapping[str, Any],
    ) -> Optional[Project]:
        """Merge ``updates`` into one scene.

        ``id`` and ``order`` cannot be written; use `reorder_scenes` to move
        a scene. A mapping given for ``voice_over`` is merged into the
        existing voice-over. An unknown project or scene changes nothing,
        not even ``updated_at``.
        """
        index = self._index(project_id)
        if index == -1:
            return None

        project = self._projects[index]
        position = next((i for i, s in enumerate(project.scenes) if s.id == scene_id), -1)
        if position == -1:
            logger.debug(f"update_scene: no scene {scene_id} in project {project_id}")
            return None

        scene = project.scenes[position]
        changes = field_updates(Scene, updates)
        for name in READ_ONLY_SCENE_FIELDS & changes.keys():
            logger.warning(f"Ignoring read-only scene field '{name}'")
            del changes[name]

        voice_over = changes.get("voice_over")
        if isinstance(voice_over, Mapping):
            changes["voice_over"] = {
                **scene.voice_over.model_dump(),
                **field_updates(VoiceOver, voice_over),
            }

        scenes = list(project.scenes)
        scenes[position] = merge(scene, changes)
        return self._replace(index, project.model_copy(update={
            "scenes": tuple(scenes),
            "updated_at": self._clock(),
        }))

    def delete_scene(self, project_id: str, scene_id: str) -> Optional[Project]:
        """Remove a scene and renumber the rest.

        Refused when it is the project's only scene.
        """
        index = self._index(project_id)
        if index == -1:
            return None

        project = self._projects[index]
        if project.get_scene(scene_id) is None:
            return None
        if len(project.scenes) <= 1:
            logger.info(f"Refusing to delete the only scene of project {project_id}")
            return None

        remaining = [scene for scene in project.scenes if scene.id != scene_id]
        if not remaining:
            logger.info(f"Refusing to delete the last scene of project {project_id}")
            return None
        return self._replace(index, project.model_copy(update={
            "scenes": renumber(remaining),
            "updated_at": self._clock(),
        }))

    def reorder_scenes(self, project_id: str, scene_ids: Sequence[str]) -> Optional[Project]:
        """Put scenes in the order of ``scene_ids``.

        Ids that do not belong to the project are skipped, and scenes whose
        ids are not listed are removed from the project. Callers should pass
        a full permutation. A reorder that would leave no scene is refused.
        """
        index = self._index(project_id)
        if index == -1:
            return None

        project = self._projects[index]
        by_id = {scene.id: scene for scene in project.scenes}

        ordered: List[Scene] = []
        seen = set()
        for scene_id in scene_ids:
            scene = by_id.get(scene_id)
            if scene is None:
                logger.warning(f"reorder_scenes: skipping unknown scene {scene_id}")
                continue
            if scene_id in seen:
                continue
            seen.add(scene_id)
            ordered.append(scene)

        if not ordered:
            logger.warning(f"reorder_scenes: refusing to leave project {project_id} without scenes")
            return None

        dropped = len(by_id) - len(ordered)
        if dropped:
            logger.warning(f"reorder_scenes: {dropped} scene(s) not listed were removed")

        return self._replace(index, project.model_copy(update={
            "scenes": renumber(ordered),
            "updated_at": self._clock(),
        }))

    # Internals

    def _index(self, project_id: Optional[str]) -> int:
        if project_id is None:
            return -1
        for i, project in enumerate(self._projects):
            if project.id == project_id:
                return i
        return -1

    def _replace(self, index: int, project: Project) -> Project:
        projects = list(self._projects)
        projects[index] = project
        self._projects = tuple(projects)
        self._notify()
        return project

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
