"""Common scaffolding for sketches.

A sketch supplies its parameters, how to build its initial state, one
integration step and a draw routine. Everything else (camera, grid, panel,
pause/reset, logging) is provided by the runner around it.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from simlab.core.config import DEFAULT_THEME, ThemeCfg
from simlab.core.model import SimContext

if TYPE_CHECKING:  # pragma: no cover
    from simlab.render.canvas import Canvas
    from simlab.render.panel import Folder, Pane

P = TypeVar("P")
S = TypeVar("S")


class Sketch(ABC, Generic[P, S]):
    slug: str = "sketch"
    title: str = "Sketch"
    base_view_range: float = 10.0
    start_paused: bool = False
    # multiplies real seconds before they reach ``step``
    time_scale: float = 1.0
    log_columns: tuple[str, ...] = ("t",)

    def __init__(self, *, theme: str = DEFAULT_THEME, thumb: bool = False) -> None:
        self.ctx: SimContext[P, S] = SimContext(
            params=self.create_params(),
            initial_state=self.initial_state,
            start_paused=self.start_paused,
            theme=theme,
            thumb=thumb,
        )
        self._events: list[tuple[float, str, dict[str, Any]]] = []

    @property
    def params(self) -> P:
        return self.ctx.params

    @property
    def state(self) -> S:
        return self.ctx.state

    @property
    def paused(self) -> bool:
        return self.ctx.paused

    @abstractmethod
    def create_params(self) -> P:
        ...

    @abstractmethod
    def initial_state(self, params: P) -> S:
        ...

    @abstractmethod
    def step(self, dt: float) -> None:
        """Advance the state by ``dt`` (already scaled by ``time_scale``)."""

    @abstractmethod
    def draw(self, canvas: "Canvas", theme: ThemeCfg) -> None:
        """Draw in world coordinates; the camera transform is installed."""

    def setup_ui(self, pane: "Pane", monitors: "Folder") -> None:
        """Add sketch specific bindings to the panel."""

    def sample(self) -> list[float]:
        """Row for the run log, matching :attr:`log_columns`."""

        return [self.ctx.time]

    def meta(self) -> dict[str, Any]:
        return {
            "sketch": self.slug,
            "title": self.title,
            "base_view_range": self.base_view_range,
            "time_scale": self.time_scale,
            "integrator": "euler",
            "params": dict(vars(self.ctx.params)),
        }

    def update(self, dt: float) -> bool:
        """Run one frame of simulation; returns ``False`` when frozen."""

        if self.ctx.paused or self.ctx.thumb:
            return False
        self.ctx.time += dt
        self.step(dt * self.time_scale)
        return True

    def reset(self) -> None:
        self.ctx.reset()
        self.emit("reset")

    def toggle_pause(self) -> bool:
        paused = self.ctx.toggle_pause()
        self.emit("pause" if paused else "resume")
        return paused

    def emit(self, event_type: str, **details: Any) -> None:
        self._events.append((self.ctx.time, event_type, details))

    def drain_events(self) -> list[tuple[float, str, dict[str, Any]]]:
        events = self._events
        self._events = []
        return events


__all__ = ["Sketch"]
