from __future__ import annotations

import math
import typing as t
from dataclasses import dataclass, field

T = t.TypeVar("T")
F = t.TypeVar("F")


@t.runtime_checkable
class Expiring(t.Protocol):
    """Anything the outer cache can hold: it carries its own freshness window."""

    created_at: float
    expires_at: float


@dataclass
class CacheEntry(t.Generic[T]):
    value: T
    created_at: float
    expires_at: float = math.inf

    def __post_init__(self) -> None:
        if self.expires_at < self.created_at:
            raise ValueError("expires_at must not be earlier than created_at")

    def is_fresh(self, now: float) -> bool:
        return now < self.expires_at


@dataclass
class FieldState(t.Generic[F]):
    value: t.Optional[F]
    ttl: float
    # None means the field has never been loaded and is always stale
    last_updated: t.Optional[float] = None

    def is_fresh(self, now: float) -> bool:
        if self.last_updated is None:
            return False
        return now - self.last_updated < self.ttl


# Upstream payloads
@dataclass
class CoralResponse:
    result: t.Any
    status: int = 0
    correlation_id: str = ""

    @classmethod
    def from_dict(cls, data: t.Dict[str, t.Any]) -> "CoralResponse":
        return cls(
            result=data.get("result"),
            status=int(data.get("status", 0)),
            correlation_id=str(data.get("correlationId", "")),
        )


@dataclass
class SavedCredentials:
    access_token: str
    expires_at: float
    user_id: str
    user_name: str
    proxy_url: t.Optional[str] = None
    metadata: t.Dict[str, t.Any] = field(default_factory=dict)

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at
