# harness_demo/status.py
"""
Runtime status used by the probe and info endpoints.

The readiness model holds the process start time and the warm-up threshold.
Both are injected at construction so tests can pin them to synthetic values.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional


class ProbeState(str, Enum):
    WARMING = "warming"
    READY = "ready"


def format_duration(seconds: float) -> str:
    """Render whole seconds the way Go prints a truncated time.Duration ("1h2m3s")."""
    total = int(seconds)
    if total <= 0:
        return "0s"
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


@dataclass
class ReadinessModel:
    ready_after: float = 2.0
    start_time: Optional[float] = None
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)

    def __post_init__(self) -> None:
        if self.start_time is None:
            self.start_time = self.clock()

    def elapsed(self, now: Optional[float] = None) -> float:
        if now is None:
            now = self.clock()
        return max(0.0, now - self.start_time)

    def is_ready(self, now: Optional[float] = None) -> bool:
        return self.elapsed(now) >= self.ready_after

    def state(self, now: Optional[float] = None) -> ProbeState:
        return ProbeState.READY if self.is_ready(now) else ProbeState.WARMING

    def uptime(self, now: Optional[float] = None) -> str:
        return format_duration(self.elapsed(now))

    @property
    def service_uptime(self) -> float:
        return self.elapsed()
