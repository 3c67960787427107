from __future__ import annotations

from typing import Any

from .base import BaseClient

USERS_PATH = "/users"


class UsersClient(BaseClient):
    def list_users(self) -> list[Any]:
        return self._json_list(USERS_PATH)
