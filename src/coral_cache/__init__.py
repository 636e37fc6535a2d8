"""coral_cache

A two-level TTL cache with in-flight request coalescing for the Coral API:
an outer cache of sessions keyed by session token, and per-session fields that
refresh independently on their own TTLs.
"""

from .auth import CredentialResolver, ResolvedCredentials, StoredCredentialResolver
from .client import CoralClient, ProxyCoralClient
from .core import (
    CacheEntry,
    CacheObserver,
    CoalescingCache,
    CoralResponse,
    CoralSession,
    FieldState,
    FieldUpdatePolicy,
    PendingLoads,
    SavedCredentials,
    coral_sessions,
)
from .errors import CircuitOpenError, CoralError, CredentialError, UpstreamError
from .monitoring import CompositeObserver, LoggingObserver, MetricsObserver
from .storage import InMemoryTokenStorage, RedisTokenStorage, TokenStorage
from .utils.config import ServiceConfig

__all__ = [
    "CoalescingCache",
    "PendingLoads",
    "FieldUpdatePolicy",
    "CoralSession",
    "coral_sessions",
    "CacheEntry",
    "FieldState",
    "CoralResponse",
    "SavedCredentials",
    "CacheObserver",
    "LoggingObserver",
    "MetricsObserver",
    "CompositeObserver",
    "CoralClient",
    "ProxyCoralClient",
    "CredentialResolver",
    "ResolvedCredentials",
    "StoredCredentialResolver",
    "TokenStorage",
    "InMemoryTokenStorage",
    "RedisTokenStorage",
    "ServiceConfig",
    "CoralError",
    "UpstreamError",
    "CredentialError",
    "CircuitOpenError",
]

__version__ = "0.1.0"
