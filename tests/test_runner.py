import csv

import pygame
import pytest

from simlab.core.logging_utils import RunLogger
from simlab.core.settings import load_theme
from simlab.runner import PAUSE_LABEL, PLAY_LABEL, SketchRunner, render_thumbnail
from simlab.sketches import GravitySketch, RotatingPendulumSketch


def key(k):
    return pygame.event.Event(pygame.KEYDOWN, key=k, mod=0, unicode="")


@pytest.fixture
def runner(surface, settings_path, tmp_path):
    return SketchRunner(
        GravitySketch(),
        surface,
        settings_path=settings_path,
        snapshot_dir=tmp_path / "snaps",
    )


def test_frame_steps_running_sketch(runner):
    runner.frame(0.016)
    assert runner.sketch.ctx.time == pytest.approx(0.016)
    assert runner.sketch.state.y < 80.0
    assert runner.canvas.depth == 0


def test_space_toggles_pause_and_button_label(runner):
    assert runner.play_button.title == PAUSE_LABEL
    assert runner.handle_event(key(pygame.K_SPACE))
    assert runner.sketch.paused
    assert runner.play_button.title == PLAY_LABEL

    y = runner.sketch.state.y
    runner.frame(0.016)
    assert runner.sketch.state.y == y


def test_reset_restores_start_state_and_label(surface, settings_path):
    runner = SketchRunner(RotatingPendulumSketch(), surface, settings_path=settings_path)
    assert runner.play_button.title == PLAY_LABEL
    runner.toggle_pause()
    for _ in range(5):
        runner.frame(0.05)
    runner.handle_event(key(pygame.K_r))
    assert runner.sketch.paused
    assert runner.play_button.title == PLAY_LABEL
    assert runner.sketch.ctx.time == 0.0


def test_home_key_resets_camera(runner):
    runner.camera.set_position((5.0, 5.0))
    runner.camera.set_zoom(3.0)
    assert runner.handle_event(key(pygame.K_h))
    assert runner.camera.zoom == 1.0


def test_unhandled_key_is_not_consumed(runner):
    assert not runner.handle_event(key(pygame.K_q))


def test_theme_toggle_is_persisted(runner, settings_path):
    assert runner.handle_event(key(pygame.K_t))
    assert runner.sketch.ctx.theme == "dark"
    assert load_theme(settings_path) == "dark"
    runner.frame(0.016)
    with pytest.raises(ValueError):
        runner.set_theme("sepia")


def test_click_on_panel_does_not_pan(runner):
    pane_rect = runner.pane.rect
    start = tuple(runner.camera.position)
    down = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(pane_rect.right - 2, pane_rect.bottom - 2))
    move = pygame.event.Event(pygame.MOUSEMOTION, pos=(390, 290), rel=(1, 1), buttons=(1, 0, 0))
    assert runner.handle_event(down)
    runner.handle_event(move)
    assert tuple(runner.camera.position) == start


def test_drag_outside_panel_pans(runner):
    down = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(380, 280))
    move = pygame.event.Event(pygame.MOUSEMOTION, pos=(350, 280), rel=(-30, 0), buttons=(1, 0, 0))
    assert runner.handle_event(down)
    assert runner.handle_event(move)
    assert runner.camera.position[0] > 0.0


def test_drag_released_over_panel_ends_pan(runner):
    target = runner.pane.rect.center
    down = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(380, 280))
    move = pygame.event.Event(pygame.MOUSEMOTION, pos=target, rel=(-200, -200), buttons=(1, 0, 0))
    up = pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=target)
    assert runner.handle_event(down)
    runner.handle_event(move)
    assert runner.handle_event(up)

    released_at = tuple(runner.camera.position)
    hover = pygame.event.Event(pygame.MOUSEMOTION, pos=(350, 250), rel=(1, 1), buttons=(0, 0, 0))
    assert not runner.handle_event(hover)
    assert tuple(runner.camera.position) == released_at


def test_poll_keys_pans(runner):
    pressed = {k: False for k in (pygame.K_w, pygame.K_a, pygame.K_s, pygame.K_d,
                                  pygame.K_UP, pygame.K_DOWN, pygame.K_LEFT, pygame.K_RIGHT)}
    pressed[pygame.K_RIGHT] = True
    runner.poll_keys(pressed, 0.1)
    assert runner.camera.position[0] == pytest.approx(10.0)


def test_snapshot_button_saves_and_flashes(runner, tmp_path):
    runner.frame(0.016)
    runner.snapshot_button.click()
    saved = list((tmp_path / "snaps").glob("gravity_*.png"))
    assert len(saved) == 1
    assert runner.snapshot_button.get_text() == "Saved!"
    runner.pane.update(2.1)
    assert runner.snapshot_button.get_text() == "Save snapshot"


def test_run_log_records_frames_and_events(surface, settings_path, tmp_path):
    logger = RunLogger(GravitySketch.log_columns, root_dir=tmp_path / "runs", run_id="r")
    runner = SketchRunner(GravitySketch(), surface, settings_path=settings_path, logger=logger)
    runner.frame(0.016)
    runner.toggle_pause()
    runner.frame(0.016)
    logger.close()

    with logger.timeseries_path.open(newline="") as fh:
        rows = list(csv.reader(fh))
    assert rows[0] == list(GravitySketch.log_columns)
    assert len(rows) == 3
    with logger.events_path.open(newline="") as fh:
        events = list(csv.reader(fh))
    assert [row[1] for row in events[1:]] == ["pause"]
    assert logger.meta_path.exists()


def test_thumbnail_renders_single_static_frame(tmp_path, settings_path):
    out = tmp_path / "thumb.png"
    saved = render_thumbnail(GravitySketch, out, size=(320, 240), settings_path=settings_path)
    assert saved == out
    image = pygame.image.load(out.as_posix())
    assert image.get_size() == (320, 240)


def test_thumbnail_runner_has_no_panel(surface, settings_path):
    runner = SketchRunner(GravitySketch(thumb=True), surface, settings_path=settings_path)
    assert runner.pane is None
    assert len(runner.input) == 0
    runner.frame(0.5)
    assert runner.sketch.state.y == pytest.approx(80.0)
    assert not runner.grid_style.show_labels
