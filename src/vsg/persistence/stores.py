"""Load stores from a backend and keep the backend in sync with them."""

import logging

from ..auth import UserStore
from ..store import ProjectStore
from .backends import StorageBackend
from .codec import decode_projects, decode_user, encode_projects, encode_user

logger = logging.getLogger(__name__)

PROJECTS_KEY = "project-storage"
AUTH_KEY = "auth-storage"


def open_project_store(backend: StorageBackend) -> ProjectStore:
    """Create a ProjectStore from persisted state and save it on every change."""
    projects, current_project_id = decode_projects(backend.get(PROJECTS_KEY))
    store = ProjectStore(projects, current_project_id)
    logger.debug(f"Loaded {len(store.projects)} project(s)")

    def save(changed: ProjectStore) -> None:
        backend.set(PROJECTS_KEY, encode_projects(changed.projects, changed.current_project_id))

    store.subscribe(save)
    return store


def open_user_store(backend: StorageBackend) -> UserStore:
    """Create a UserStore from persisted state and save it on every change."""
    store = UserStore(decode_user(backend.get(AUTH_KEY)))

    def save(changed: UserStore) -> None:
        backend.set(AUTH_KEY, encode_user(changed.user))

    store.subscribe(save)
    return store
