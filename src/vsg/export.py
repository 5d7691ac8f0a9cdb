"""Export projects as field-labelled JSON files."""

import json
import logging
import re
from pathlib import Path
from typing import Union

from .errors import StorageError
from .models import Project
from .persistence.codec import decode_project, encode_project

logger = logging.getLogger(__name__)


def slugify(title: str) -> str:
    """Turn a project title into a file name stem, e.g. 'My Video!' -> 'my-video'."""
    slug = re.sub(r"\s+", "-", (title or "").strip().lower())
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-{2,}", "-", slug).strip("-")
    return slug or "project"


def export_project(project: Project) -> str:
    """Serialize a project and all of its scenes as indented JSON."""
    return json.dumps(encode_project(project), indent=2, ensure_ascii=False)


def load_export(text: Union[str, bytes]) -> Project:
    """Parse JSON produced by `export_project` back into a Project.

    Raises:
        StorageError: If the text is not a valid project export.
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        raise StorageError(f"Invalid project export: {e}") from e
    return decode_project(data)


def write_export(project: Project, directory: Path) -> Path:
    """Write ``<slug>.json`` for a project into ``directory``.

    Returns:
        Path of the written file.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{slugify(project.title)}.json"
    path.write_text(export_project(project) + "\n", encoding="utf-8")
    logger.info(f"Exported '{project.title}' to {path}")
    return path
