"""Input checks for values typed in by the user."""

import re

from .errors import ValidationError
from .models import ProjectDraft

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MIN_TITLE_LENGTH = 3


def validate_project_draft(draft: ProjectDraft) -> ProjectDraft:
    """Check the required project fields.

    Raises:
        ValidationError: If the title is too short or the description is blank.
    """
    if len(draft.title.strip()) < MIN_TITLE_LENGTH:
        raise ValidationError(f"Title must be at least {MIN_TITLE_LENGTH} characters")
    if not draft.description.strip():
        raise ValidationError("Description is required")
    return draft


def validate_registration(name: str, email: str) -> None:
    if not name or not name.strip():
        raise ValidationError("Name is required")
    validate_email(email)


def validate_email(email: str) -> None:
    if not email or not _EMAIL_PATTERN.match(email.strip()):
        raise ValidationError(f"Invalid email address: {email!r}")


def validate_api_key(api_key: str) -> str:
    key = (api_key or "").strip()
    if not key:
        raise ValidationError("API key is required")
    if any(ch.isspace() for ch in key):
        raise ValidationError("API key must not contain whitespace")
    return key
