"""Frame loop tying a sketch to the camera, grid, panel and run log."""
from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import pygame
from pygame.locals import RESIZABLE

from simlab.core.config import (
    RENDER_CFG,
    THEMES,
    VIEW_CFG,
    RenderCfg,
    ThemeCfg,
    ViewCfg,
)
from simlab.core.logging_utils import RunLogger
from simlab.core.settings import SETTINGS_PATH, load_theme, save_theme
from simlab.core.timekeeping import FrameTimer
from simlab.render.assets import load_font
from simlab.render.camera import PAN_KEYS, Camera
from simlab.render.canvas import Canvas
from simlab.render.grid import GridStyle, draw_grid
from simlab.render.input import InputDispatcher
from simlab.render.panel import Pane, PanelButton
from simlab.render.ui import build_text_panel
from simlab.sketches.base import Sketch

PLAY_LABEL = "> Play"
PAUSE_LABEL = "|| Pause"
SNAPSHOT_LABEL = "Save snapshot"
SNAPSHOT_DONE_LABEL = "Saved!"

HELP_LINES = (
    "drag / WASD: pan",
    "wheel: zoom",
    "space: play/pause  R: reset",
    "H: home view  T: theme",
)


class SketchRunner:
    """Owns one sketch session.

    Per frame: background, camera transform, grid, one simulation step
    (unless paused or thumbnail), sketch drawing, then the panel in screen
    space. Input events are routed through an ordered dispatcher: panel
    first, then keyboard shortcuts, then the camera.
    """

    def __init__(
        self,
        sketch: Sketch,
        surface: pygame.Surface,
        *,
        render_cfg: RenderCfg = RENDER_CFG,
        view_cfg: ViewCfg = VIEW_CFG,
        settings_path: Path = SETTINGS_PATH,
        logger: RunLogger | None = None,
        snapshot_dir: Path | None = None,
    ) -> None:
        self.sketch = sketch
        self.canvas = Canvas(surface)
        self.render_cfg = render_cfg
        self.settings_path = settings_path
        self.logger = logger
        self.snapshot_dir = snapshot_dir or Path(render_cfg.snapshot_dir)
        self.camera = Camera(surface.get_size(), sketch.base_view_range, cfg=view_cfg)
        self.grid_style = GridStyle.from_config(view_cfg, render_cfg, thumb=sketch.ctx.thumb)
        self.input = InputDispatcher()
        self.pane: Pane | None = None
        self.play_button: PanelButton | None = None
        self.snapshot_button: PanelButton | None = None
        self.label_font: pygame.font.Font | None = None
        self.panel_font: pygame.font.Font | None = None

        if not sketch.ctx.thumb:
            self.label_font = load_font(render_cfg.font_names, render_cfg.label_font_size)
            self.panel_font = load_font(render_cfg.font_names, render_cfg.panel_font_size)
            self.pane = self._build_panel(view_cfg)
            self.input.subscribe(self.pane.handle_event)
            self.input.subscribe(self.handle_key)
            self.input.subscribe(self.camera.handle_event)
            self.camera.blocked_rect = self.pane.rect

        if self.logger is not None:
            self.logger.write_meta(self.sketch.meta())
            self.logger.log_ts(self.sketch.sample())

    @property
    def theme(self) -> ThemeCfg:
        return THEMES[self.sketch.ctx.theme]

    # --- panel -----------------------------------------------------------

    def _build_panel(self, view_cfg: ViewCfg) -> Pane:
        pane = Pane(
            self.sketch.title,
            position=view_cfg.panel_position,
            width=view_cfg.panel_width,
            render_cfg=self.render_cfg,
        )
        self.play_button = pane.add_button(self._play_label())
        self.play_button.on_click(self.toggle_pause)
        pane.add_button("Reset").on_click(self.reset)

        monitors = pane.add_folder("Live values", expanded=True)
        monitors.add_binding(
            self.sketch.ctx,
            "time",
            readonly=True,
            label="t",
            interval_ms=self.render_cfg.monitor_interval_ms,
        )

        self.sketch.setup_ui(pane, monitors)

        settings = pane.add_folder("Settings", expanded=False)
        settings.add_binding(
            self.sketch.ctx,
            "theme",
            options={"Light": "light", "Dark": "dark"},
            label="theme",
        ).on_change(self._theme_changed)
        self.snapshot_button = settings.add_button(SNAPSHOT_LABEL)
        self.snapshot_button.on_click(self._snapshot_clicked)
        return pane

    def _play_label(self) -> str:
        return PLAY_LABEL if self.sketch.paused else PAUSE_LABEL

    def _sync_play_label(self) -> None:
        if self.play_button is not None:
            self.play_button.title = self._play_label()

    def _theme_changed(self, theme: str) -> None:
        save_theme(theme, self.settings_path)
        self.sketch.emit("theme", theme=theme)

    def _snapshot_clicked(self) -> None:
        self.save_snapshot()
        if self.snapshot_button is not None:
            self.snapshot_button.flash(
                SNAPSHOT_DONE_LABEL, self.render_cfg.snapshot_feedback_duration
            )

    # --- actions ---------------------------------------------------------

    def toggle_pause(self) -> None:
        self.sketch.toggle_pause()
        self._sync_play_label()

    def reset(self) -> None:
        self.sketch.reset()
        self._sync_play_label()
        if self.logger is not None:
            self.logger.log_ts(self.sketch.sample())

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme {theme!r}")
        self.sketch.ctx.theme = theme
        self._theme_changed(theme)

    def toggle_theme(self) -> None:
        self.set_theme("dark" if self.sketch.ctx.theme == "light" else "light")

    def save_snapshot(self, path: Path | None = None) -> Path:
        if path is None:
            stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            path = self.snapshot_dir / f"{self.sketch.slug}_{stamp}.png"
        path.parent.mkdir(parents=True, exist_ok=True)
        pygame.image.save(self.canvas.surface, path.as_posix())
        return path

    # --- input -----------------------------------------------------------

    def handle_key(self, event: pygame.event.Event) -> bool:
        if event.type != pygame.KEYDOWN:
            return False
        if event.key == pygame.K_SPACE:
            self.toggle_pause()
        elif event.key == pygame.K_r:
            self.reset()
        elif event.key == pygame.K_h:
            self.camera.reset_view()
        elif event.key == pygame.K_t:
            self.toggle_theme()
        else:
            return False
        return True

    def handle_event(self, event: pygame.event.Event) -> bool:
        return self.input.dispatch(event)

    def poll_keys(self, pressed, dt: float) -> None:
        """Continuous panning from the held-key snapshot of ``pygame.key``."""

        held = [key for key in PAN_KEYS if pressed[key]]
        if held:
            self.camera.pan_by_keys(held, dt)

    # --- frame -----------------------------------------------------------

    def frame(self, dt: float) -> None:
        theme = self.theme
        canvas = self.canvas
        canvas.reset_transform()
        canvas.background(theme.background_color)
        self.camera.update_size(canvas.size)

        canvas.push()
        self.camera.apply(canvas)
        draw_grid(canvas, self.camera, theme, style=self.grid_style, font=self.label_font)
        stepped = self.sketch.update(dt)
        self.sketch.draw(canvas, theme)
        canvas.pop()

        if self.logger is not None:
            if stepped:
                self.logger.log_ts(self.sketch.sample())
            for t, event_type, details in self.sketch.drain_events():
                self.logger.log_event(t, event_type, details)
        else:
            self.sketch.drain_events()

        if self.pane is not None and self.panel_font is not None:
            self.pane.update(dt)
            self.camera.blocked_rect = self.pane.rect
            self.pane.draw(canvas.surface, self.panel_font, theme)
            self._draw_help(theme)

    def _draw_help(self, theme: ThemeCfg) -> None:
        if self.label_font is None:
            return
        panel = build_text_panel(
            self.label_font,
            HELP_LINES,
            text_color=theme.label_color,
            background_color=theme.panel_color,
        )
        height = self.canvas.height
        self.canvas.surface.blit(panel, (10, height - panel.get_height() - 10))

    def render_thumbnail(self, path: Path) -> Path:
        """Single label-free frame written to ``path``."""

        self.frame(0.0)
        return self.save_snapshot(path)


def run_window(
    sketch_cls: type[Sketch],
    *,
    size: tuple[int, int] | None = None,
    fps: int | None = None,
    log_dir: Path | None = None,
    settings_path: Path = SETTINGS_PATH,
    render_cfg: RenderCfg = RENDER_CFG,
) -> int:
    size = size or (render_cfg.width, render_cfg.height)
    fps = fps or render_cfg.fps
    sketch = sketch_cls(theme=load_theme(settings_path))

    logger: RunLogger | None = None
    if log_dir is not None:
        logger = RunLogger(sketch.log_columns, root_dir=log_dir)
        print(f"Logging run to {logger.run_dir}")

    pygame.init()
    try:
        screen = pygame.display.set_mode(size, RESIZABLE)
        pygame.display.set_caption(f"{sketch.title} - Simulation Lab")
        runner = SketchRunner(
            sketch,
            screen,
            render_cfg=render_cfg,
            settings_path=settings_path,
            logger=logger,
        )
        clock = pygame.time.Clock()
        timer = FrameTimer(max_dt=render_cfg.max_frame_dt)
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                else:
                    runner.handle_event(event)
            runner.canvas.set_surface(pygame.display.get_surface())
            dt = timer.tick()
            runner.poll_keys(pygame.key.get_pressed(), dt)
            runner.frame(dt)
            pygame.display.flip()
            clock.tick(fps)
    finally:
        if logger is not None:
            logger.close()
        pygame.quit()
    return 0


def render_thumbnail(
    sketch_cls: type[Sketch],
    path: Path,
    *,
    size: tuple[int, int] | None = None,
    settings_path: Path = SETTINGS_PATH,
    render_cfg: RenderCfg = RENDER_CFG,
) -> Path:
    """Render one frame off-screen; no window, panel or labels."""

    size = size or (render_cfg.width, render_cfg.height)
    sketch = sketch_cls(theme=load_theme(settings_path), thumb=True)
    surface = pygame.Surface(size)
    runner = SketchRunner(sketch, surface, render_cfg=render_cfg, settings_path=settings_path)
    saved = runner.render_thumbnail(path)
    print(f"Thumbnail written to {saved}", file=sys.stdout)
    return saved


__all__ = ["SketchRunner", "render_thumbnail", "run_window"]
