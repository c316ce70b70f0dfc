"""Physics helpers shared by the sketches.

Both integrators are plain forward Euler steps. Energy drifts over long runs;
the drift is visible in the run log and is accepted.
"""
from __future__ import annotations

import math

from .model import BallParams, BallState, PendulumParams, PendulumState


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* between *lo* and *hi*."""

    return max(lo, min(hi, value))


def step_ball(state: BallState, params: BallParams, dt: float, floor_y: float) -> bool:
    """Advance the bouncing ball by ``dt``.

    Returns ``True`` when the ball touched the floor during this step. On
    contact the ball is put back on the floor and its velocity is reflected
    and scaled by the restitution, so a restitution of 0 stops it dead.
    """

    state.vy -= params.gravity * dt
    state.y += state.vy * dt

    if state.y - params.radius < floor_y:
        state.y = floor_y + params.radius
        state.vy = -params.restitution * state.vy
        if state.vy == 0.0:
            # drop the sign of -0.0
            state.vy = 0.0
        return True
    return False


def step_pendulum(state: PendulumState, params: PendulumParams, dt: float) -> None:
    """Advance the pendulum on the spinning ring by ``dt``."""

    sin_t = math.sin(state.theta)
    cos_t = math.cos(state.theta)
    acc = (
        params.ring_radius * params.ring_omega**2 * sin_t * cos_t
        - params.gravity * sin_t
    )
    state.omega += (acc / params.ring_radius) * dt
    state.theta += state.omega * dt


def equilibrium_ratio(gravity: float, ring_radius: float, ring_omega: float) -> float | None:
    denom = ring_radius * ring_omega**2
    if denom == 0.0:
        return None
    return gravity / denom


def equilibrium_angle(gravity: float, ring_radius: float, ring_omega: float) -> float | None:
    """Angle of the off-axis equilibrium of the pendulum, or ``None``.

    The point only exists while ``|g / (R w^2)| <= 1``. Outside that range
    nothing is returned; the ratio is never clamped into the domain.
    """

    ratio = equilibrium_ratio(gravity, ring_radius, ring_omega)
    if ratio is None or abs(ratio) > 1.0:
        return None
    return math.acos(ratio)


def ball_energy(state: BallState, params: BallParams) -> float:
    """Mechanical energy per unit mass, measured from ``y = 0``."""

    return 0.5 * state.vy * state.vy + params.gravity * state.y


def pendulum_energy(state: PendulumState, params: PendulumParams) -> float:
    """Conserved energy per unit mass in the frame rotating with the ring."""

    r = params.ring_radius
    return (
        0.5 * r * r * state.omega * state.omega
        + params.gravity * r * (1.0 - math.cos(state.theta))
        - 0.5 * r * r * params.ring_omega**2 * math.sin(state.theta) ** 2
    )


__all__ = [
    "ball_energy",
    "clamp",
    "equilibrium_angle",
    "equilibrium_ratio",
    "pendulum_energy",
    "step_ball",
    "step_pendulum",
]
