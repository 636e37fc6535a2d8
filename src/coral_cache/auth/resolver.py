from __future__ import annotations

import logging
import time
import typing as t
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..client.base import CoralClient
from ..core.models import SavedCredentials
from ..errors import CredentialError
from ..storage.base import TokenStorage

_logger = logging.getLogger(__name__)

Authenticate = t.Callable[[str, t.Optional[str]], t.Awaitable[SavedCredentials]]
ClientFactory = t.Callable[[str, SavedCredentials, t.Optional[str]], CoralClient]


@dataclass
class ResolvedCredentials:
    client: CoralClient
    credentials: SavedCredentials


class CredentialResolver(ABC):
    """Exchanges a session token for credentials and a ready client."""

    @abstractmethod
    async def resolve(
        self, token: str, proxy_url: t.Optional[str] = None
    ) -> ResolvedCredentials:  # pragma: no cover - interface
        raise NotImplementedError


class StoredCredentialResolver(CredentialResolver):
    """Resolver that reuses unexpired credentials from a ``TokenStorage``.

    When nothing usable is stored, ``authenticate(token, proxy_url)`` is
    awaited and its result persisted before the client is built with
    ``client_factory(token, credentials, proxy_url)``.
    """

    def __init__(
        self,
        storage: TokenStorage,
        authenticate: Authenticate,
        client_factory: ClientFactory,
        *,
        clock: t.Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._authenticate = authenticate
        self._client_factory = client_factory
        self._clock = clock

    async def resolve(self, token: str, proxy_url: t.Optional[str] = None) -> ResolvedCredentials:
        if not token:
            raise CredentialError("Session token is empty")

        credentials = await self._storage.get_credentials(token)
        if credentials is None or not credentials.is_valid(self._clock()):
            _logger.info("Authenticating session token (proxy=%s)", proxy_url or "none")
            credentials = await self._authenticate(token, proxy_url)
            if not credentials.is_valid(self._clock()):
                raise CredentialError("Authentication returned expired credentials")
            await self._storage.set_credentials(token, credentials)
        else:
            _logger.debug("Using stored credentials for %s", credentials.user_name)

        client = self._client_factory(token, credentials, proxy_url)
        return ResolvedCredentials(client=client, credentials=credentials)
