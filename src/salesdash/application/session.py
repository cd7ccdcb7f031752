from __future__ import annotations

import logging
from typing import Callable, Optional

from salesdash.domain.models import User

log = logging.getLogger(__name__)

Listener = Callable[["SessionContext"], None]


class SessionContext:
    """Authenticated user's token and profile.

    The token is hydrated from durable storage once; from then on this object
    is the authority and only ``login``/``logout`` write back to the store.
    """

    def __init__(self, store):
        self.store = store
        self.token: Optional[str] = None
        self.user: Optional[User] = None
        self.is_loading = False
        self.error: Optional[str] = None
        self._hydrated = False
        self._listeners: list[Listener] = []

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    def hydrate(self) -> "SessionContext":
        if self._hydrated:
            return self
        self.token = self.store.load()
        self._hydrated = True
        log.info("session_hydrated authenticated=%s", self.is_authenticated)
        return self

    def login(self, token: str, user: User) -> None:
        if not token:
            raise ValueError("token is required")
        self.store.save(token)
        self.token = token
        self.user = user
        self.error = None
        self._hydrated = True
        log.info("session_login user_id=%s", user.id)
        self._notify()

    def logout(self) -> None:
        self.store.clear()
        user_id = self.user.id if self.user else None
        self.token = None
        self.user = None
        log.info("session_logout user_id=%s", user_id)
        self._notify()

    def set_user(self, user: Optional[User]) -> None:
        self.user = user
        self._notify()

    def set_error(self, error: Optional[str]) -> None:
        self.error = error

    def set_loading(self, is_loading: bool) -> None:
        self.is_loading = is_loading

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
