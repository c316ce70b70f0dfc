"""Frame timing helpers."""
from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`.

    ``max_dt`` caps a single tick so a stalled window (dragging, resizing)
    does not feed one huge step into the integrators.
    """

    max_dt: float = 0.1
    last_time: float = field(default_factory=time.perf_counter)

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        return min(max(dt, 0.0), self.max_dt)


@dataclass
class Countdown:
    """One-shot timer advanced by frame deltas."""

    remaining: float = 0.0

    @property
    def active(self) -> bool:
        return self.remaining > 0.0

    def start(self, duration: float) -> None:
        self.remaining = max(0.0, duration)

    def advance(self, dt: float) -> bool:
        """Advance by ``dt``; return ``True`` on the tick the timer expires."""

        if self.remaining <= 0.0:
            return False
        self.remaining -= dt
        if self.remaining <= 0.0:
            self.remaining = 0.0
            return True
        return False


__all__ = ["Countdown", "FrameTimer"]
