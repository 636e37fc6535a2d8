from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class CacheConfig:
    announcements_ttl_seconds: float = 30 * 60
    friends_ttl_seconds: float = 10
    web_services_ttl_seconds: float = 10
    active_event_ttl_seconds: float = 10

    def field_ttls(self) -> Dict[str, float]:
        return {
            "announcements": self.announcements_ttl_seconds,
            "friends": self.friends_ttl_seconds,
            "web_services": self.web_services_ttl_seconds,
            "active_event": self.active_event_ttl_seconds,
        }


@dataclass
class ProxyConfig:
    base_url: Optional[str] = None
    timeout_seconds: float = 10.0


@dataclass
class StorageConfig:
    type: str = "memory"  # memory | redis
    url: str = "redis://localhost:6379/0"
    prefix: str = "coral"


@dataclass
class ResilienceConfig:
    circuit_breaker_enabled: bool = True
    failure_threshold: int = 5
    reset_timeout_seconds: float = 30.0


@dataclass
class ServiceConfig:
    cache: CacheConfig = dataclasses.field(default_factory=CacheConfig)
    proxy: ProxyConfig = dataclasses.field(default_factory=ProxyConfig)
    storage: StorageConfig = dataclasses.field(default_factory=StorageConfig)
    resilience: ResilienceConfig = dataclasses.field(default_factory=ResilienceConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServiceConfig":
        def build(dc_cls, key):
            values = data.get(key, {})
            return dc_cls(**values)

        return cls(
            cache=build(CacheConfig, "cache"),
            proxy=build(ProxyConfig, "proxy"),
            storage=build(StorageConfig, "storage"),
            resilience=build(ResilienceConfig, "resilience"),
        )
