"""Bouncing ball under gravity."""
from __future__ import annotations

from typing import TYPE_CHECKING

from simlab.core.config import ThemeCfg
from simlab.core.model import BallParams, BallState
from simlab.core.physics import ball_energy, step_ball

from .base import Sketch

if TYPE_CHECKING:  # pragma: no cover
    from simlab.render.canvas import Canvas
    from simlab.render.panel import Folder, Pane


class GravitySketch(Sketch[BallParams, BallState]):
    slug = "gravity"
    title = "001 Gravity"
    base_view_range = 100.0
    # frame milliseconds / 100
    time_scale = 10.0
    log_columns = ("t", "y", "vy", "energy")

    @property
    def floor_y(self) -> float:
        return -self.base_view_range

    @property
    def energy(self) -> float:
        return ball_energy(self.ctx.state, self.ctx.params)

    def create_params(self) -> BallParams:
        return BallParams()

    def initial_state(self, params: BallParams) -> BallState:
        return BallState(y=self.base_view_range * 0.8, vy=0.0)

    def step(self, dt: float) -> None:
        state = self.ctx.state
        if step_ball(state, self.ctx.params, dt, self.floor_y):
            self.emit("bounce", y=state.y, vy=state.vy)

    def draw(self, canvas: "Canvas", theme: ThemeCfg) -> None:
        params = self.ctx.params
        left = canvas.to_world(0.0, 0.0)[0]
        right = canvas.to_world(float(canvas.width), 0.0)[0]
        canvas.line(
            left,
            self.floor_y,
            right,
            self.floor_y,
            color=theme.rod_color,
            weight=2.0 / canvas.transform.linear_scale,
        )
        canvas.circle(0.0, self.ctx.state.y, params.radius, color=params.color)

    def setup_ui(self, pane: "Pane", monitors: "Folder") -> None:
        params = self.ctx.params
        pane.add_binding(params, "radius", min_value=2.0, max_value=50.0, label="radius")
        pane.add_binding(params, "gravity", min_value=0.0, max_value=30.0, label="gravity")
        pane.add_binding(params, "restitution", min_value=0.0, max_value=1.0, label="restitution")
        pane.add_binding(params, "color", label="color")

        monitors.add_binding(self.ctx.state, "y", readonly=True, label="y", interval_ms=16)
        monitors.add_binding(self.ctx.state, "vy", readonly=True, label="vy", interval_ms=16)
        monitors.add_binding(self, "energy", readonly=True, label="energy", interval_ms=16)

    def sample(self) -> list[float]:
        state = self.ctx.state
        return [self.ctx.time, state.y, state.vy, self.energy]


__all__ = ["GravitySketch"]
