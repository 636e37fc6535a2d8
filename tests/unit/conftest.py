"""Shared fixtures and fakes for unit tests."""

from __future__ import annotations

import asyncio
import math
import typing as t
from unittest.mock import AsyncMock

import pytest

from coral_cache.auth.resolver import ResolvedCredentials
from coral_cache.core.models import CoralResponse, SavedCredentials


class FakeClock:
    """Manually advanced clock, callable like ``time.time``."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def let_tasks_run(rounds: int = 5) -> None:
    """Give pending tasks a few loop iterations to reach their next await."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def response(result: t.Any) -> CoralResponse:
    return CoralResponse(result=result, status=0, correlation_id="test-correlation")


@pytest.fixture
def make_response():
    return response


@pytest.fixture
def settle():
    return let_tasks_run


@pytest.fixture
def clock():
    return FakeClock(1_000.0)


@pytest.fixture
def credentials():
    return SavedCredentials(
        access_token="access-token",
        expires_at=math.inf,
        user_id="user-123",
        user_name="test-user",
    )


@pytest.fixture
def mock_client():
    """Mock Coral client returning one canned response per endpoint."""
    client = AsyncMock()
    client.get_announcements = AsyncMock(return_value=response([{"id": 1, "title": "Maintenance"}]))
    client.get_friend_list = AsyncMock(return_value=response({"friends": [{"id": 2, "name": "friend"}]}))
    client.get_web_services = AsyncMock(return_value=response([{"id": 3, "name": "Service"}]))
    client.get_active_event = AsyncMock(return_value=response({}))
    return client


@pytest.fixture
def mock_resolver(mock_client, credentials):
    """Mock credential resolver handing out ``mock_client``."""
    resolver = AsyncMock()
    resolver.resolve = AsyncMock(return_value=ResolvedCredentials(client=mock_client, credentials=credentials))
    return resolver
