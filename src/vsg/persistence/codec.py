"""Versioned serialization of persisted state.

Payloads look like ``{"version": 1, "state": {...}}``. Version 0 is the
shape written by the earlier browser build of the app (the whole current
project embedded as ``currentProject``) and is migrated on read.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from ..errors import StorageError
from ..models import Project, Scene, User
from ..store import renumber, unique_scenes

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# Persisted label -> attribute name
TIMESTAMP_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def encode_timestamp(value: datetime) -> str:
    """Encode a datetime as ISO-8601 UTC with microseconds.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def decode_timestamp(value: Any) -> datetime:
    """Decode a timestamp written by `encode_timestamp` (or a JS ``toISOString``).

    Raises:
        StorageError: If the value is not a recognisable timestamp.
    """
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, str):
        try:
            result = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise StorageError(f"Invalid timestamp: {value!r}") from e
    else:
        raise StorageError(f"Invalid timestamp: {value!r}")

    if result.tzinfo is None:
        result = result.replace(tzinfo=timezone.utc)
    return result.astimezone(timezone.utc)


def encode_project(project: Project) -> Dict[str, Any]:
    """Encode a project as a field-labelled (camelCase) dict of plain values."""
    data = project.model_dump(mode="json", by_alias=True)
    data["createdAt"] = encode_timestamp(project.created_at)
    data["updatedAt"] = encode_timestamp(project.updated_at)
    return data


def decode_project(data: Mapping[str, Any]) -> Project:
    """Decode a project written by `encode_project`.

    Scenes are sorted by their stored order, repeated scene ids keep their
    first occurrence, and orders are renumbered from zero.

    Raises:
        StorageError: If the data does not describe a valid project.
    """
    if not isinstance(data, Mapping):
        raise StorageError(f"Expected a project mapping, got {type(data).__name__}")

    data = dict(data)
    for label, name in TIMESTAMP_FIELDS.items():
        for key in (label, name):
            if key in data:
                data[key] = decode_timestamp(data[key])

    if not data.get("scenes"):
        logger.warning(f"Project {data.get('id')} was stored without scenes; adding a blank one")
        data["scenes"] = [Scene.empty(order=0)]

    try:
        project = Project.model_validate(data)
    except PydanticValidationError as e:
        raise StorageError(f"Invalid stored project: {e}") from e

    # Scene orders must be 0..n-1 with unique ids
    scenes = renumber(unique_scenes(sorted(project.scenes, key=lambda scene: scene.order)))
    if scenes != project.scenes:
        logger.warning(f"Project {project.id} had gaps or duplicates in its scenes; renumbered")
        project = project.model_copy(update={"scenes": scenes})
    return project


def _check_version(payload: Mapping[str, Any]) -> int:
    if not isinstance(payload, Mapping):
        raise StorageError(f"Expected a mapping, got {type(payload).__name__}")
    version = payload.get("version", 0)
    if version not in (0, SCHEMA_VERSION):
        raise StorageError(f"Unsupported storage schema version: {version}")
    return version


def encode_projects(projects: Iterable[Project], current_project_id: Optional[str]) -> Dict[str, Any]:
    """Encode the project collection and the current selection."""
    return {
        "version": SCHEMA_VERSION,
        "state": {
            "projects": [encode_project(project) for project in projects],
            "currentProjectId": current_project_id,
        },
    }


def decode_projects(payload: Optional[Mapping[str, Any]]) -> Tuple[List[Project], Optional[str]]:
    """Decode a payload from `encode_projects`, migrating older versions.

    Returns:
        The projects and the current project id (None when nothing was stored).
    """
    if payload is None:
        return [], None

    version = _check_version(payload)
    state = payload.get("state") or {}

    if version == 0:
        current = state.get("currentProject")
        current_id = current.get("id") if isinstance(current, Mapping) else None
    else:
        current_id = state.get("currentProjectId")

    projects = [decode_project(item) for item in state.get("projects") or []]
    return projects, current_id


def encode_user(user: Optional[User]) -> Dict[str, Any]:
    """Encode the signed-in user (or the signed-out state)."""
    return {
        "version": SCHEMA_VERSION,
        "state": {
            "user": user.model_dump(mode="json", by_alias=True) if user else None,
        },
    }


def decode_user(payload: Optional[Mapping[str, Any]]) -> Optional[User]:
    """Decode a payload from `encode_user`, migrating older versions."""
    if payload is None:
        return None

    version = _check_version(payload)
    state = payload.get("state") or {}
    data = state.get("user")
    if not data or (version == 0 and not state.get("isAuthenticated", True)):
        return None

    data = dict(data)
    # Older payloads store a missing key as an empty string
    if not data.get("apiKey"):
        data["apiKey"] = None

    try:
        return User.model_validate(data)
    except PydanticValidationError as e:
        raise StorageError(f"Invalid stored user: {e}") from e
