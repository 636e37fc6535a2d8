"""Configuration and resilience helpers."""

from .config import CacheConfig, ProxyConfig, ResilienceConfig, ServiceConfig, StorageConfig
from .resilience import CircuitBreaker, CircuitBreakerConfig, CircuitState

__all__ = [
    "CacheConfig",
    "ProxyConfig",
    "ResilienceConfig",
    "ServiceConfig",
    "StorageConfig",
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitState",
]
