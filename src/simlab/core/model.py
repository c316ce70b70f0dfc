"""Data models for the sketch state and tunable parameters."""
from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Callable, Generic, TypeVar

from .config import DEFAULT_THEME, PHYSICS_CFG


@dataclass
class BallParams:
    """Tunable parameters of the bouncing ball sketch."""

    radius: float = 10.0
    gravity: float = PHYSICS_CFG.gravity
    restitution: float = PHYSICS_CFG.default_restitution
    color: str = "#00ccff"


@dataclass
class BallState:
    y: float = 0.0
    vy: float = 0.0


@dataclass
class PendulumParams:
    """Tunable parameters of the pendulum on a spinning ring."""

    ring_omega: float = 2.0
    ring_radius: float = 3.0
    initial_angle_deg: float = 30.0
    gravity: float = PHYSICS_CFG.gravity
    radius: float = 10.0
    color: str = "#ff0055"

    @property
    def initial_angle(self) -> float:
        return math.radians(self.initial_angle_deg)


@dataclass
class PendulumState:
    theta: float = 0.0
    omega: float = 0.0

    @property
    def theta_deg(self) -> float:
        return math.degrees(self.theta)


P = TypeVar("P")
S = TypeVar("S")


@dataclass
class SimContext(Generic[P, S]):
    """Everything a sketch mutates during a session.

    ``initial_state`` rebuilds the state from the current parameters; it is
    the only way :meth:`reset` obtains fresh values, so resetting twice in a
    row is the same as resetting once. The state object is updated in place
    so panel bindings made against it stay valid across resets.
    """

    params: P
    initial_state: Callable[[P], S]
    state: S = field(init=False)
    start_paused: bool = False
    paused: bool = field(init=False)
    time: float = 0.0
    theme: str = DEFAULT_THEME
    thumb: bool = False

    def __post_init__(self) -> None:
        self.state = self.initial_state(self.params)
        self.paused = self.start_paused

    def reset(self) -> None:
        fresh = self.initial_state(self.params)
        if is_dataclass(fresh) and type(fresh) is type(self.state):
            for f in fields(fresh):
                setattr(self.state, f.name, getattr(fresh, f.name))
        else:
            self.state = fresh
        self.time = 0.0
        self.paused = self.start_paused

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        return self.paused


__all__ = [
    "BallParams",
    "BallState",
    "PendulumParams",
    "PendulumState",
    "SimContext",
]
