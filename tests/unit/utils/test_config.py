"""Unit tests for configuration dataclasses."""

from coral_cache.utils.config import CacheConfig, ServiceConfig


class TestCacheConfig:
    def test_default_ttls(self):
        assert CacheConfig().field_ttls() == {
            "announcements": 1800,
            "friends": 10,
            "web_services": 10,
            "active_event": 10,
        }


class TestServiceConfig:
    def test_from_empty_dict_uses_defaults(self):
        config = ServiceConfig.from_dict({})

        assert config.storage.type == "memory"
        assert config.proxy.base_url is None
        assert config.resilience.circuit_breaker_enabled is True

    def test_from_dict_overrides_sections(self):
        config = ServiceConfig.from_dict(
            {
                "cache": {"friends_ttl_seconds": 30},
                "proxy": {"base_url": "https://proxy.example/api/znc", "timeout_seconds": 5},
                "storage": {"type": "redis", "prefix": "nxapi"},
                "resilience": {"failure_threshold": 2},
            }
        )

        assert config.cache.field_ttls()["friends"] == 30
        assert config.cache.announcements_ttl_seconds == 1800
        assert config.proxy.timeout_seconds == 5
        assert config.storage.type == "redis"
        assert config.storage.prefix == "nxapi"
        assert config.resilience.failure_threshold == 2
