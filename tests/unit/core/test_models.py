"""Unit tests for cache data models."""

import math

import pytest

from coral_cache.core.models import CacheEntry, CoralResponse, FieldState, SavedCredentials


class TestCacheEntry:
    def test_defaults_to_never_expiring(self):
        entry = CacheEntry("value", created_at=10.0)
        assert entry.expires_at == math.inf
        assert entry.is_fresh(1e12)

    def test_fresh_strictly_before_expiry(self):
        entry = CacheEntry("value", created_at=0.0, expires_at=10.0)
        assert entry.is_fresh(9.999)
        assert not entry.is_fresh(10.0)

    def test_rejects_expiry_before_creation(self):
        with pytest.raises(ValueError):
            CacheEntry("value", created_at=10.0, expires_at=5.0)


class TestFieldState:
    def test_never_loaded_is_stale(self):
        state = FieldState(value=None, ttl=10)
        assert not state.is_fresh(0.0)

    def test_fresh_within_ttl(self):
        state = FieldState(value="v", ttl=10, last_updated=100.0)
        assert state.is_fresh(109.9)
        assert not state.is_fresh(110.0)


class TestCoralResponse:
    def test_from_dict(self):
        response = CoralResponse.from_dict(
            {"status": 0, "result": {"friends": []}, "correlationId": "abc-123"}
        )
        assert response.result == {"friends": []}
        assert response.status == 0
        assert response.correlation_id == "abc-123"

    def test_from_dict_defaults(self):
        response = CoralResponse.from_dict({"result": [1, 2]})
        assert response.status == 0
        assert response.correlation_id == ""


class TestSavedCredentials:
    def test_validity(self):
        credentials = SavedCredentials(access_token="a", expires_at=100.0, user_id="1", user_name="n")
        assert credentials.is_valid(99.0)
        assert not credentials.is_valid(100.0)
        assert credentials.metadata == {}
