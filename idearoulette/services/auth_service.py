"""
Identity boundary: tracks the signed-in user and notifies listeners on change.
"""

from typing import Callable, List, Optional

from pydantic import BaseModel

from idearoulette.errors import AuthenticationRequiredError
from idearoulette.utils.logger import logger


class User(BaseModel):
    """Identity supplied by the authentication provider."""

    uid: str
    display_name: str = ""
    email: Optional[str] = None


AuthListener = Callable[[Optional[User]], None]


class AuthService:
    """Holds the current identity and fans out signed-in / signed-out events."""

    def __init__(self):
        self._current_user: Optional[User] = None
        self._listeners: List[AuthListener] = []

    @property
    def current_user(self) -> Optional[User]:
        return self._current_user

    @property
    def is_signed_in(self) -> bool:
        return self._current_user is not None

    def require_user(self) -> User:
        """Return the signed-in user or raise for writes that need one."""
        if self._current_user is None:
            raise AuthenticationRequiredError()
        return self._current_user

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """
        Register a callback for identity changes.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_in(self, user: User):
        logger.info(f"User signed in: {user.uid}")
        self._current_user = user
        self._notify()

    def sign_out(self):
        if self._current_user is None:
            return
        logger.info(f"User signed out: {self._current_user.uid}")
        self._notify(signing_out=True)
        self._current_user = None

    def _notify(self, signing_out: bool = False):
        user = None if signing_out else self._current_user
        for listener in list(self._listeners):
            try:
                listener(user)
            except Exception as e:
                logger.error(f"Auth listener failed: {e}")
