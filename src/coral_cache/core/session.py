from __future__ import annotations

import asyncio
import math
import time
import typing as t

from ..utils.config import CacheConfig
from .coalescing import Clock, CoalescingCache
from .fields import FieldUpdatePolicy
from .hooks import NULL_OBSERVER, CacheObserver
from .models import CoralResponse, SavedCredentials

if t.TYPE_CHECKING:
    from ..auth.resolver import CredentialResolver
    from ..client.base import CoralClient

ANNOUNCEMENTS = "announcements"
FRIENDS = "friends"
WEB_SERVICES = "web_services"
ACTIVE_EVENT = "active_event"

FIELDS = (ANNOUNCEMENTS, FRIENDS, WEB_SERVICES, ACTIVE_EVENT)


class CoralSession:
    """Cached upstream data for one session token.

    The session itself never expires (``expires_at`` is infinite); freshness
    is tracked per field, each with its own TTL and refresh.
    """

    def __init__(
        self,
        client: CoralClient,
        credentials: SavedCredentials,
        announcements: CoralResponse,
        friends: CoralResponse,
        web_services: CoralResponse,
        active_event: CoralResponse,
        *,
        config: t.Optional[CacheConfig] = None,
        clock: Clock = time.time,
        observer: t.Optional[CacheObserver] = None,
    ) -> None:
        self.client = client
        self.credentials = credentials
        self.created_at = clock()
        self.expires_at = math.inf

        ttls = (config or CacheConfig()).field_ttls()
        refreshers = {
            ANNOUNCEMENTS: client.get_announcements,
            FRIENDS: client.get_friend_list,
            WEB_SERVICES: client.get_web_services,
            ACTIVE_EVENT: client.get_active_event,
        }
        initial = {
            ANNOUNCEMENTS: announcements,
            FRIENDS: friends,
            WEB_SERVICES: web_services,
            ACTIVE_EVENT: active_event,
        }
        self._fields: t.Dict[str, FieldUpdatePolicy[CoralResponse]] = {
            name: FieldUpdatePolicy(
                name,
                ttls[name],
                refreshers[name],
                initial[name],
                last_updated=self.created_at,
                owner=credentials.user_name,
                clock=clock,
                observer=observer or NULL_OBSERVER,
            )
            for name in FIELDS
        }

    def field(self, name: str) -> FieldUpdatePolicy[CoralResponse]:
        return self._fields[name]

    async def get_announcements(self) -> t.Any:
        response = await self._fields[ANNOUNCEMENTS].get()
        return response.result

    async def get_friends(self) -> t.List[t.Any]:
        response = await self._fields[FRIENDS].get()
        return response.result["friends"]

    async def get_web_services(self) -> t.Any:
        response = await self._fields[WEB_SERVICES].get()
        return response.result

    async def get_active_event(self) -> t.Any:
        response = await self._fields[ACTIVE_EVENT].get()
        return response.result


def coral_sessions(
    resolver: CredentialResolver,
    proxy_url: t.Optional[str] = None,
    *,
    config: t.Optional[CacheConfig] = None,
    clock: Clock = time.time,
    observer: t.Optional[CacheObserver] = None,
) -> CoalescingCache[str, CoralSession]:
    """Build the session cache: token -> fully warmed ``CoralSession``.

    Loading a token resolves its credentials and fetches all four fields
    concurrently; if any request fails the whole load fails and nothing is
    cached.
    """

    async def load(token: str) -> CoralSession:
        resolved = await resolver.resolve(token, proxy_url)
        client = resolved.client

        announcements, friends, web_services, active_event = await asyncio.gather(
            client.get_announcements(),
            client.get_friend_list(),
            client.get_web_services(),
            client.get_active_event(),
        )

        return CoralSession(
            client,
            resolved.credentials,
            announcements,
            friends,
            web_services,
            active_event,
            config=config,
            clock=clock,
            observer=observer,
        )

    return CoalescingCache(load, clock=clock, observer=observer)
