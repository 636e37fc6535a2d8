from __future__ import annotations

import time
import typing as t
from abc import ABC, abstractmethod

from ..core.models import SavedCredentials


class TokenStorage(ABC):
    """Persists the credentials resolved for each session token."""

    @abstractmethod
    async def get_credentials(self, token: str) -> t.Optional[SavedCredentials]:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def set_credentials(self, token: str, credentials: SavedCredentials) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def delete_credentials(self, token: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def is_healthy(self) -> bool:  # pragma: no cover - interface
        raise NotImplementedError


class InMemoryTokenStorage(TokenStorage):
    """A simple in-memory adapter for dev/test.

    Expired credentials are dropped on read.
    """

    def __init__(self, clock: t.Callable[[], float] = time.time) -> None:
        self._credentials: t.Dict[str, SavedCredentials] = {}
        self._clock = clock

    async def get_credentials(self, token: str) -> t.Optional[SavedCredentials]:
        credentials = self._credentials.get(token)
        if credentials is None:
            return None
        if not credentials.is_valid(self._clock()):
            self._credentials.pop(token, None)
            return None
        return credentials

    async def set_credentials(self, token: str, credentials: SavedCredentials) -> None:
        self._credentials[token] = credentials

    async def delete_credentials(self, token: str) -> None:
        self._credentials.pop(token, None)

    async def is_healthy(self) -> bool:
        return True
