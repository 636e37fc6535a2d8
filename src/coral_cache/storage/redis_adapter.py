from __future__ import annotations

import hashlib
import json
import math
import time
import typing as t
from dataclasses import asdict

import redis.asyncio as redis_asyncio

from ..core.models import SavedCredentials
from .base import TokenStorage


class RedisTokenStorage(TokenStorage):
    """Redis-backed credential storage.

    - Credentials are stored as JSON strings at key
      ``{prefix}:credentials:{sha256(token)}`` so raw tokens never reach Redis.
    - Keys expire together with the credentials they hold.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        *,
        prefix: str = "coral",
        client: t.Optional[t.Any] = None,
        clock: t.Callable[[], float] = time.time,
    ) -> None:
        self._url = url
        self._prefix = prefix.rstrip(":")
        self._clock = clock
        self._redis = client if client is not None else redis_asyncio.from_url(url, decode_responses=True)

    def _credentials_key(self, token: str) -> str:
        digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
        return f"{self._prefix}:credentials:{digest}"

    async def get_credentials(self, token: str) -> t.Optional[SavedCredentials]:
        raw = await self._redis.get(self._credentials_key(token))
        if raw is None:
            return None
        credentials = SavedCredentials(**json.loads(raw))
        if not credentials.is_valid(self._clock()):
            return None
        return credentials

    async def set_credentials(self, token: str, credentials: SavedCredentials) -> None:
        payload = json.dumps(asdict(credentials))
        remaining = credentials.expires_at - self._clock()
        if remaining <= 0:
            return
        if math.isinf(remaining):
            await self._redis.set(self._credentials_key(token), payload)
        else:
            await self._redis.set(self._credentials_key(token), payload, px=max(int(remaining * 1000), 1))

    async def delete_credentials(self, token: str) -> None:
        await self._redis.delete(self._credentials_key(token))

    async def is_healthy(self) -> bool:
        try:
            pong = await self._redis.ping()
            return bool(pong)
        except Exception:
            return False

    async def close(self) -> None:  # pragma: no cover - convenience
        await self._redis.aclose()
