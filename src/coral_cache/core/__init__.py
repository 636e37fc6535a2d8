"""Core caches: the outer session cache and per-field refresh policies."""

from .coalescing import CoalescingCache, PendingLoads
from .fields import FieldUpdatePolicy
from .hooks import CacheObserver
from .models import CacheEntry, CoralResponse, Expiring, FieldState, SavedCredentials
from .session import ACTIVE_EVENT, ANNOUNCEMENTS, FIELDS, FRIENDS, WEB_SERVICES, CoralSession, coral_sessions

__all__ = [
    # Coalescing
    "CoalescingCache",
    "PendingLoads",
    "FieldUpdatePolicy",
    "CacheObserver",
    # Models
    "CacheEntry",
    "CoralResponse",
    "Expiring",
    "FieldState",
    "SavedCredentials",
    # Sessions
    "CoralSession",
    "coral_sessions",
    "FIELDS",
    "ANNOUNCEMENTS",
    "FRIENDS",
    "WEB_SERVICES",
    "ACTIVE_EVENT",
]
