"""Durable local storage for the user session and projects."""

from .backends import MemoryBackend, StorageBackend, YamlFileBackend
from .codec import (
    SCHEMA_VERSION,
    decode_project,
    decode_projects,
    decode_timestamp,
    decode_user,
    encode_project,
    encode_projects,
    encode_timestamp,
    encode_user,
)
from .stores import AUTH_KEY, PROJECTS_KEY, open_project_store, open_user_store

__all__ = [
    "MemoryBackend",
    "StorageBackend",
    "YamlFileBackend",
    "SCHEMA_VERSION",
    "decode_project",
    "decode_projects",
    "decode_timestamp",
    "decode_user",
    "encode_project",
    "encode_projects",
    "encode_timestamp",
    "encode_user",
    "AUTH_KEY",
    "PROJECTS_KEY",
    "open_project_store",
    "open_user_store",
]
