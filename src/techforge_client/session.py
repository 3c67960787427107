from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class Session(BaseModel):
    """Snapshot of the authenticated identity. Never mutated in place."""

    model_config = ConfigDict(frozen=True)

    user_id: Optional[str] = None
    role: Optional[str] = None
    user_profile: Optional[dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


EMPTY_SESSION = Session()


class SessionStore:
    """Process-wide holder of the current :class:`Session`.

    Writers (login, logout, set_profile) are serialised by a lock and
    publish a brand-new snapshot; readers grab the current reference
    without locking, so they always see a complete record.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current: Session = EMPTY_SESSION

    def current(self) -> Session:
        return self._current

    @property
    def is_logged_in(self) -> bool:
        return self._current.is_authenticated

    def login(self, identity: Session) -> Session:
        if identity.user_id is None:
            raise ValueError("login requires a user_id")
        snapshot = Session(
            user_id=identity.user_id,
            role=identity.role,
            user_profile=copy.deepcopy(identity.user_profile),
        )
        with self._lock:
            self._current = snapshot
        logger.info("session_login", extra={"user_id": snapshot.user_id, "role": snapshot.role})
        return snapshot

    def logout(self) -> None:
        with self._lock:
            self._current = EMPTY_SESSION
        logger.info("session_logout")

    def set_profile(self, profile: Mapping[str, Any] | None) -> Session:
        with self._lock:
            if profile is None:
                # Identity stays; only the cached profile is dropped.
                snapshot = Session(user_id=self._current.user_id, role=self._current.role)
            else:
                user_id = profile.get("id")
                role = profile.get("role")
                snapshot = Session(
                    user_id=str(user_id) if user_id is not None else None,
                    role=str(role) if role is not None else None,
                    user_profile=copy.deepcopy(dict(profile)),
                )
            self._current = snapshot
        return snapshot
