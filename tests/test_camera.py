import pygame
import pytest

from simlab.core.config import ViewCfg
from simlab.render.camera import Camera
from simlab.render.canvas import Canvas


@pytest.fixture
def camera():
    return Camera((800, 600), 10.0)


@pytest.mark.parametrize("zoom", [1e-10, 0.01, 1.0, 3.7, 1e6, 1e10])
def test_apply_maps_world_origin_to_screen_centre(surface, zoom):
    canvas = Canvas(surface)
    camera = Camera(surface.get_size(), 10.0)
    camera.set_zoom(zoom)
    camera.apply(canvas)
    assert canvas.to_screen(0.0, 0.0) == pytest.approx((200.0, 150.0))


def test_apply_maps_camera_position_to_centre_after_pan(surface):
    canvas = Canvas(surface)
    camera = Camera(surface.get_size(), 10.0)
    camera.set_position((3.0, -2.0))
    camera.set_zoom(2.5)
    camera.apply(canvas)
    assert canvas.to_screen(3.0, -2.0) == pytest.approx((200.0, 150.0))


def test_apply_flips_y_axis(surface):
    canvas = Canvas(surface)
    camera = Camera(surface.get_size(), 10.0)
    camera.apply(canvas)
    _, sy = canvas.to_screen(0.0, 1.0)
    assert sy < 150.0
    assert canvas.transform.flips_y


def test_scale_uses_shorter_side(camera):
    assert camera.scale() == pytest.approx(30.0)
    hx, hy = camera.visible_extent()
    assert hy == pytest.approx(10.0)
    assert hx > hy


def test_screen_world_round_trip(camera):
    camera.set_position((1.5, 4.0))
    camera.set_zoom(3.0)
    sx, sy = camera.world_to_screen(2.0, -7.0)
    assert camera.screen_to_world(sx, sy) == pytest.approx((2.0, -7.0))


def test_drag_moves_world_with_pointer(camera):
    before = camera.world_to_screen(1.0, 1.0)
    assert camera.pan(30, -15)
    after = camera.world_to_screen(1.0, 1.0)
    assert after[0] - before[0] == pytest.approx(30.0)
    assert after[1] - before[1] == pytest.approx(-15.0)


def test_pan_suppressed_over_blocked_rect(camera):
    camera.blocked_rect = pygame.Rect(0, 0, 100, 100)
    assert not camera.pan(10, 10, pointer=(50, 50))
    assert tuple(camera.position) == (0.0, 0.0)
    assert camera.pan(10, 10, pointer=(500, 500))


def test_zoom_is_clamped():
    cfg = ViewCfg(min_zoom=0.5, max_zoom=4.0)
    camera = Camera((800, 600), 10.0, cfg=cfg)
    camera.set_zoom(100.0)
    assert camera.zoom == 4.0
    camera.set_zoom(0.0)
    assert camera.zoom == 0.5


def test_zoom_by_is_exponential(camera):
    camera.zoom_by(-1)
    assert camera.zoom == pytest.approx(1.1)
    camera.zoom_by(2)
    assert camera.zoom == pytest.approx(1.1 / 1.21)


def test_zoom_never_leaves_bounds(camera):
    for _ in range(1000):
        camera.zoom_by(-10)
    assert camera.zoom == 1e10
    for _ in range(1000):
        camera.zoom_by(10)
    assert camera.zoom == 1e-10


def test_reset_view(camera):
    camera.set_position((5.0, 5.0))
    camera.set_zoom(7.0)
    camera.reset_view()
    assert tuple(camera.position) == (0.0, 0.0)
    assert camera.zoom == 1.0


def test_invalid_construction():
    with pytest.raises(ValueError):
        Camera((800, 600), 0.0)
    with pytest.raises(ValueError):
        Camera((800, 600), 1.0, cfg=ViewCfg(min_zoom=2.0))


def test_pan_by_keys_moves_in_world_units(camera):
    camera.pan_by_keys([pygame.K_d, pygame.K_w], 0.5)
    assert camera.position[0] == pytest.approx(5.0)
    assert camera.position[1] == pytest.approx(5.0)
    camera.pan_by_keys([pygame.K_a, pygame.K_d], 0.5)
    assert camera.position[0] == pytest.approx(5.0)


def test_handle_event_drag(camera):
    down = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(400, 300))
    move = pygame.event.Event(pygame.MOUSEMOTION, pos=(430, 300), rel=(30, 0), buttons=(1, 0, 0))
    up = pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=(430, 300))

    assert camera.handle_event(down)
    assert camera.handle_event(move)
    assert camera.handle_event(up)
    assert camera.position[0] == pytest.approx(-1.0)
    assert not camera.handle_event(move)


def test_handle_event_drag_starting_on_panel_is_ignored(camera):
    camera.blocked_rect = pygame.Rect(0, 0, 100, 100)
    down = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(50, 50))
    move = pygame.event.Event(pygame.MOUSEMOTION, pos=(90, 50), rel=(40, 0), buttons=(1, 0, 0))
    assert not camera.handle_event(down)
    assert not camera.handle_event(move)
    assert tuple(camera.position) == (0.0, 0.0)


def test_handle_event_wheel(camera):
    wheel = pygame.event.Event(pygame.MOUSEWHEEL, x=0, y=1, flipped=False)
    assert camera.handle_event(wheel)
    assert camera.zoom == pytest.approx(1.1)
