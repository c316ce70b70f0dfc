"""Pendulum bead on a ring spinning about its vertical diameter.

``theta`` is measured from the bottom of the ring. Above the critical spin
rate ``w^2 > g / R`` the bottom becomes unstable and two off-axis
equilibria appear at ``cos(theta) = g / (R w^2)``.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING

from simlab.core.config import ThemeCfg
from simlab.core.model import PendulumParams, PendulumState
from simlab.core.physics import equilibrium_angle, pendulum_energy, step_pendulum

from .base import Sketch

if TYPE_CHECKING:  # pragma: no cover
    from simlab.render.canvas import Canvas
    from simlab.render.panel import Folder, Pane


def bob_position(theta: float, ring_radius: float) -> tuple[float, float]:
    return ring_radius * math.sin(theta), -ring_radius * math.cos(theta)


class RotatingPendulumSketch(Sketch[PendulumParams, PendulumState]):
    slug = "rotating-pendulum"
    title = "Rotating Pendulum"
    base_view_range = 6.0
    start_paused = True
    log_columns = ("t", "theta", "omega", "energy")

    def create_params(self) -> PendulumParams:
        return PendulumParams()

    def initial_state(self, params: PendulumParams) -> PendulumState:
        return PendulumState(theta=params.initial_angle, omega=0.0)

    @property
    def theta_center(self) -> float | None:
        params = self.ctx.params
        return equilibrium_angle(params.gravity, params.ring_radius, params.ring_omega)

    @property
    def theta_center_deg(self) -> float | None:
        theta = self.theta_center
        return None if theta is None else math.degrees(theta)

    @property
    def energy(self) -> float:
        return pendulum_energy(self.ctx.state, self.ctx.params)

    def step(self, dt: float) -> None:
        step_pendulum(self.ctx.state, self.ctx.params, dt)

    def apply_initial_angle(self, _value: float | None = None) -> None:
        self.ctx.state.theta = self.ctx.params.initial_angle

    def draw(self, canvas: "Canvas", theme: ThemeCfg) -> None:
        params = self.ctx.params
        pixel = 1.0 / canvas.transform.linear_scale
        radius = params.ring_radius

        canvas.circle(0.0, 0.0, radius, color=theme.grid_line_color[:3], weight=1.5 * pixel)

        theta_center = self.theta_center
        if theta_center is not None:
            for angle in (theta_center, -theta_center):
                px, py = bob_position(angle, radius)
                canvas.circle(px, py, 4.0 * pixel, color=theme.axis_color[:3], weight=1.5 * pixel)

        bob_x, bob_y = bob_position(self.ctx.state.theta, radius)
        canvas.line(0.0, 0.0, bob_x, bob_y, color=theme.rod_color, weight=2.0 * pixel)
        canvas.circle(bob_x, bob_y, params.radius / 10.0, color=params.color)

    def setup_ui(self, pane: "Pane", monitors: "Folder") -> None:
        params = self.ctx.params
        pane.add_binding(params, "radius", min_value=1.0, max_value=50.0, label="bob size")
        pane.add_binding(params, "gravity", min_value=0.0, max_value=20.0, label="gravity")
        pane.add_binding(params, "color", label="color")
        pane.add_binding(params, "ring_omega", min_value=0.0, max_value=10.0, label="ring omega")
        pane.add_binding(params, "ring_radius", min_value=0.1, max_value=10.0, label="ring radius")
        pane.add_binding(
            params,
            "initial_angle_deg",
            min_value=-180.0,
            max_value=180.0,
            label="theta0 [deg]",
        ).on_change(self.apply_initial_angle)

        monitors.add_binding(self.ctx.state, "theta_deg", readonly=True, label="theta [deg]", interval_ms=16)
        monitors.add_binding(self.ctx.state, "omega", readonly=True, label="omega", interval_ms=16)
        monitors.add_binding(self, "theta_center_deg", readonly=True, label="theta* [deg]")
        monitors.add_binding(self, "energy", readonly=True, label="energy", interval_ms=16)

    def sample(self) -> list[float]:
        state = self.ctx.state
        return [self.ctx.time, state.theta, state.omega, self.energy]

    def meta(self) -> dict:
        meta = super().meta()
        meta["theta_center"] = self.theta_center
        return meta


__all__ = ["RotatingPendulumSketch", "bob_position"]
