"""Simulated user session holding the generation API key."""

import logging
from typing import Callable, List, Optional

from .models import User

logger = logging.getLogger(__name__)

Listener = Callable[["UserStore"], None]


class UserStore:
    """The signed-in user, if any.

    There is no server: registering or logging in simply records the user
    locally. The API key is a capability token and is never logged.
    """

    def __init__(self, user: Optional[User] = None) -> None:
        self._user = user
        self._listeners: List[Listener] = []

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def api_key(self) -> Optional[str]:
        return self._user.api_key if self._user else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(store)`` after every change; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def load(self, user: Optional[User]) -> None:
        """Replace the session without notifying subscribers."""
        self._user = user

    def register(self, name: str, email: str) -> User:
        """Sign in as a new user."""
        self._set(User(name=name.strip(), email=email.strip()))
        logger.info(f"Registered {self._user.email}")
        return self._user

    def login(self, email: str) -> User:
        """Sign in by email, keeping the stored user when the email matches."""
        email = email.strip()
        if self._user is not None and self._user.email.lower() == email.lower():
            logger.info(f"Welcome back, {self._user.name}")
            return self._user

        self._set(User(name=email.split("@")[0] or "Demo User", email=email))
        logger.info(f"Logged in as {email}")
        return self._user

    def logout(self) -> None:
        if self._user is not None:
            logger.info(f"Logged out {self._user.email}")
            self._set(None)

    def save_api_key(self, api_key: Optional[str]) -> Optional[User]:
        """Store (or, when blank, clear) the user's API key.

        Returns:
            The updated user, or None when nobody is signed in.
        """
        if self._user is None:
            logger.warning("Cannot save an API key without a signed-in user")
            return None

        key = (api_key or "").strip() or None
        self._set(self._user.model_copy(update={"api_key": key}))
        logger.info("API key saved" if key else "API key cleared")
        return self._user

    def _set(self, user: Optional[User]) -> None:
        self._user = user
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
