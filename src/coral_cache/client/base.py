from __future__ import annotations

from abc import ABC, abstractmethod

from ..core.models import CoralResponse


class CoralClient(ABC):
    """Authenticated client for the upstream Coral API.

    Implementations perform the network calls; the caches only ever call these
    four methods.
    """

    @abstractmethod
    async def get_announcements(self) -> CoralResponse:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def get_friend_list(self) -> CoralResponse:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def get_web_services(self) -> CoralResponse:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def get_active_event(self) -> CoralResponse:  # pragma: no cover - interface
        raise NotImplementedError

    async def close(self) -> None:  # pragma: no cover - convenience
        return None
