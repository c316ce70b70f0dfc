import math

import pytest

from simlab.core.model import BallParams, BallState, PendulumParams, PendulumState
from simlab.core.physics import (
    ball_energy,
    clamp,
    equilibrium_angle,
    equilibrium_ratio,
    pendulum_energy,
    step_ball,
    step_pendulum,
)

FLOOR = -100.0


def test_clamp():
    assert clamp(5.0, 0.0, 1.0) == 1.0
    assert clamp(-5.0, 0.0, 1.0) == 0.0
    assert clamp(0.5, 0.0, 1.0) == 0.5


def test_free_fall_step():
    state = BallState(y=50.0, vy=0.0)
    params = BallParams(gravity=10.0)
    assert not step_ball(state, params, 0.1, FLOOR)
    assert state.vy == pytest.approx(-1.0)
    assert state.y == pytest.approx(49.9)


@pytest.mark.parametrize("restitution", [0.0, 0.3, 0.8, 1.0])
def test_bounce_scales_speed_by_restitution(restitution):
    params = BallParams(radius=10.0, gravity=9.8, restitution=restitution)
    state = BallState(y=FLOOR + 10.5, vy=-20.0)
    dt = 0.1
    pre_speed = abs(state.vy - params.gravity * dt)

    assert step_ball(state, params, dt, FLOOR)
    assert state.y == FLOOR + params.radius
    assert abs(state.vy) == pytest.approx(restitution * pre_speed)
    assert state.vy >= 0.0


def test_zero_restitution_stops_exactly():
    params = BallParams(radius=10.0, restitution=0.0)
    state = BallState(y=FLOOR + 10.1, vy=-5.0)
    step_ball(state, params, 0.1, FLOOR)
    assert state.vy == 0.0
    assert math.copysign(1.0, state.vy) == 1.0


def test_ball_never_ends_below_floor():
    params = BallParams(radius=10.0, restitution=0.8)
    state = BallState(y=80.0, vy=0.0)
    for _ in range(5000):
        step_ball(state, params, 0.16, FLOOR)
        assert state.y - params.radius >= FLOOR


def test_ball_energy():
    state = BallState(y=2.0, vy=3.0)
    assert ball_energy(state, BallParams(gravity=10.0)) == pytest.approx(24.5)


def test_equilibrium_guard_out_of_domain():
    # g / (R w^2) = 9.8 / 3 > 1
    assert equilibrium_angle(9.8, 3.0, 1.0) is None
    assert equilibrium_angle(9.8, 3.0, 0.0) is None
    assert equilibrium_ratio(9.8, 0.0, 2.0) is None


def test_equilibrium_in_domain():
    ratio = equilibrium_ratio(9.8, 3.0, 2.5)
    theta = equilibrium_angle(9.8, 3.0, 2.5)
    assert theta is not None
    assert math.cos(theta) == pytest.approx(ratio)


def test_equilibrium_is_stationary():
    params = PendulumParams(ring_omega=4.0, ring_radius=2.0, gravity=9.8)
    theta = equilibrium_angle(params.gravity, params.ring_radius, params.ring_omega)
    state = PendulumState(theta=theta, omega=0.0)
    step_pendulum(state, params, 0.01)
    assert state.omega == pytest.approx(0.0, abs=1e-12)
    assert state.theta == pytest.approx(theta)


def test_pendulum_swings_towards_bottom_on_slow_ring():
    params = PendulumParams(ring_omega=0.0, ring_radius=3.0, gravity=9.8)
    state = PendulumState(theta=math.radians(30.0), omega=0.0)
    step_pendulum(state, params, 0.01)
    assert state.omega < 0.0
    assert state.theta < math.radians(30.0)


def test_pendulum_energy_is_roughly_conserved():
    params = PendulumParams()
    state = PendulumState(theta=params.initial_angle, omega=0.0)
    start = pendulum_energy(state, params)
    for _ in range(2000):
        step_pendulum(state, params, 0.0005)
    assert pendulum_energy(state, params) == pytest.approx(start, abs=0.05)


def test_pendulum_energy_at_rest_at_bottom_is_zero():
    assert pendulum_energy(PendulumState(0.0, 0.0), PendulumParams()) == 0.0
