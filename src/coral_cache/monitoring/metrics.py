from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass
class Counter:
    name: str
    help: str
    values: Dict[Tuple, float] = field(default_factory=dict)

    def inc(self, value: float = 1.0, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        self.values[key] = self.values.get(key, 0.0) + value

    def get(self, **labels: Any) -> float:
        return self.values.get(tuple(sorted(labels.items())), 0.0)

    def reset(self) -> None:
        self.values.clear()


@dataclass
class Histogram:
    name: str
    help: str
    buckets: List[float]
    counts: Dict[Tuple, List[int]] = field(default_factory=dict)

    def observe(self, val: float, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        if key not in self.counts:
            self.counts[key] = [0 for _ in self.buckets]
        for i, b in enumerate(self.buckets):
            if val <= b:
                self.counts[key][i] += 1
                break

    def total(self, **labels: Any) -> int:
        return sum(self.counts.get(tuple(sorted(labels.items())), []))

    def reset(self) -> None:
        self.counts.clear()


# Predefined metrics
coral_cache_requests_total = Counter(
    "coral_cache_requests_total", "Session cache lookups by outcome (hit, miss, coalesced)"
)
coral_cache_load_failures_total = Counter("coral_cache_load_failures_total", "Failed session loads")
coral_field_refresh_total = Counter(
    "coral_field_refresh_total", "Field accesses by field and outcome (fresh, refreshed, failed)"
)
coral_upstream_latency_seconds = Histogram(
    "coral_upstream_latency_seconds",
    "Latency of session loads and field refreshes",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, float("inf")],
)

ALL_METRICS = (
    coral_cache_requests_total,
    coral_cache_load_failures_total,
    coral_field_refresh_total,
    coral_upstream_latency_seconds,
)
