"""Unit tests for CoralSession and the coral_sessions cache."""

import asyncio
import math

import pytest

from coral_cache.core.session import ANNOUNCEMENTS, FIELDS, FRIENDS, WEB_SERVICES, CoralSession, coral_sessions
from coral_cache.utils.config import CacheConfig


def build_session(client, credentials, clock, config=None):
    return CoralSession(
        client,
        credentials,
        client.get_announcements.return_value,
        client.get_friend_list.return_value,
        client.get_web_services.return_value,
        client.get_active_event.return_value,
        config=config,
        clock=clock,
    )


@pytest.mark.asyncio
class TestCoralSession:
    """Test the session's getters and per-field refresh."""

    async def test_getters_unwrap_results(self, mock_client, credentials, clock):
        session = build_session(mock_client, credentials, clock)

        assert await session.get_announcements() == [{"id": 1, "title": "Maintenance"}]
        assert await session.get_friends() == [{"id": 2, "name": "friend"}]
        assert await session.get_web_services() == [{"id": 3, "name": "Service"}]
        assert await session.get_active_event() == {}

    async def test_warm_session_makes_no_requests(self, mock_client, credentials, clock):
        session = build_session(mock_client, credentials, clock)

        for _ in range(3):
            await session.get_announcements()
            await session.get_friends()
            await session.get_web_services()
            await session.get_active_event()

        mock_client.get_announcements.assert_not_awaited()
        mock_client.get_friend_list.assert_not_awaited()
        mock_client.get_web_services.assert_not_awaited()
        mock_client.get_active_event.assert_not_awaited()

    async def test_session_metadata(self, mock_client, credentials, clock):
        session = build_session(mock_client, credentials, clock)

        assert session.created_at == clock()
        assert session.expires_at == math.inf
        assert all(session.field(name).last_updated == clock() for name in FIELDS)

    async def test_short_ttl_fields_refresh_independently(self, mock_client, credentials, clock, make_response):
        session = build_session(mock_client, credentials, clock)
        mock_client.get_friend_list.return_value = make_response({"friends": [{"id": 9}]})

        clock.advance(11)

        assert await session.get_friends() == [{"id": 9}]
        assert await session.get_announcements() == [{"id": 1, "title": "Maintenance"}]
        mock_client.get_friend_list.assert_awaited_once()
        mock_client.get_announcements.assert_not_awaited()

    async def test_configured_ttls(self, mock_client, credentials, clock):
        config = CacheConfig(announcements_ttl_seconds=5, friends_ttl_seconds=60)
        session = build_session(mock_client, credentials, clock, config=config)

        assert session.field(ANNOUNCEMENTS).ttl == 5
        assert session.field(FRIENDS).ttl == 60

        clock.advance(6)
        await session.get_announcements()
        await session.get_friends()

        mock_client.get_announcements.assert_awaited_once()
        mock_client.get_friend_list.assert_not_awaited()

    async def test_failed_refresh_keeps_other_fields(self, mock_client, credentials, clock):
        session = build_session(mock_client, credentials, clock)
        mock_client.get_friend_list.side_effect = RuntimeError("rate limited")
        clock.advance(11)

        with pytest.raises(RuntimeError, match="rate limited"):
            await session.get_friends()

        assert await session.get_web_services() == [{"id": 3, "name": "Service"}]
        assert session.field(WEB_SERVICES).last_updated == clock()
        assert session.field(FRIENDS).last_updated == clock() - 11


@pytest.mark.asyncio
class TestCoralSessions:
    """Test the session cache built by coral_sessions()."""

    async def test_load_resolves_and_warms_all_fields(self, mock_resolver, mock_client, credentials, clock):
        sessions = coral_sessions(mock_resolver, "https://proxy.example/api/znc", clock=clock)

        session = await sessions.get("na-token")

        assert isinstance(session, CoralSession)
        assert session.credentials is credentials
        mock_resolver.resolve.assert_awaited_once_with("na-token", "https://proxy.example/api/znc")
        mock_client.get_announcements.assert_awaited_once()
        mock_client.get_friend_list.assert_awaited_once()
        mock_client.get_web_services.assert_awaited_once()
        mock_client.get_active_event.assert_awaited_once()

    async def test_concurrent_gets_share_one_load(self, mock_resolver, mock_client, clock):
        sessions = coral_sessions(mock_resolver, clock=clock)

        results = await asyncio.gather(*(sessions.get("na-token") for _ in range(8)))

        assert all(result is results[0] for result in results)
        mock_resolver.resolve.assert_awaited_once()
        mock_client.get_friend_list.assert_awaited_once()

    async def test_session_is_reused(self, mock_resolver, clock):
        sessions = coral_sessions(mock_resolver, clock=clock)

        first = await sessions.get("na-token")
        clock.advance(24 * 60 * 60)
        second = await sessions.get("na-token")

        assert second is first
        mock_resolver.resolve.assert_awaited_once()

    async def test_any_field_failure_fails_the_load(self, mock_resolver, mock_client, clock):
        sessions = coral_sessions(mock_resolver, clock=clock)
        mock_client.get_web_services.side_effect = RuntimeError("upstream 500")

        with pytest.raises(RuntimeError, match="upstream 500"):
            await sessions.get("na-token")

        assert "na-token" not in sessions

        mock_client.get_web_services.side_effect = None
        session = await sessions.get("na-token")
        assert await session.get_web_services() == [{"id": 3, "name": "Service"}]
        assert mock_resolver.resolve.await_count == 2

    async def test_resolver_failure_propagates(self, mock_resolver, mock_client, clock):
        error = LookupError("bad token")
        mock_resolver.resolve.side_effect = error
        sessions = coral_sessions(mock_resolver, clock=clock)

        with pytest.raises(LookupError) as exc_info:
            await sessions.get("na-token")

        assert exc_info.value is error
        mock_client.get_announcements.assert_not_awaited()
