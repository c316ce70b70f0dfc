"""Configuration dataclasses for the simulation lab."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PhysicsCfg:
    gravity: float = 9.8
    default_restitution: float = 0.8


@dataclass(frozen=True)
class ViewCfg:
    min_zoom: float = 1e-10
    max_zoom: float = 1e10
    zoom_sensitivity: float = 1.1
    ideal_cell_count: float = 8.0
    minor_divisions: int = 5
    minor_tolerance: float = 1e-3
    key_pan_speed: float = 1.0
    panel_position: tuple[int, int] = (10, 10)
    panel_width: int = 280


@dataclass(frozen=True)
class ThemeCfg:
    name: str
    background_color: tuple[int, int, int]
    text_color: tuple[int, int, int]
    grid_line_color: tuple[int, int, int, int]
    grid_minor_color: tuple[int, int, int, int]
    axis_color: tuple[int, int, int, int]
    label_color: tuple[int, int, int]
    rod_color: tuple[int, int, int]
    panel_color: tuple[int, int, int, int]
    panel_hover_color: tuple[int, int, int, int]
    panel_border_color: tuple[int, int, int, int]


LIGHT_THEME = ThemeCfg(
    name="light",
    background_color=(247, 249, 252),
    text_color=(51, 51, 51),
    grid_line_color=(220, 220, 220, 150),
    grid_minor_color=(235, 235, 235, 120),
    axis_color=(150, 150, 150, 200),
    label_color=(110, 110, 110),
    rod_color=(136, 136, 136),
    panel_color=(255, 255, 255, 230),
    panel_hover_color=(232, 238, 248, 240),
    panel_border_color=(190, 198, 212, 255),
)

DARK_THEME = ThemeCfg(
    name="dark",
    background_color=(30, 30, 30),
    text_color=(255, 255, 255),
    grid_line_color=(70, 70, 70, 150),
    grid_minor_color=(50, 50, 50, 120),
    axis_color=(160, 160, 160, 200),
    label_color=(170, 170, 170),
    rod_color=(170, 170, 170),
    panel_color=(26, 26, 26, 230),
    panel_hover_color=(48, 52, 60, 240),
    panel_border_color=(80, 86, 98, 255),
)

THEMES: dict[str, ThemeCfg] = {LIGHT_THEME.name: LIGHT_THEME, DARK_THEME.name: DARK_THEME}
DEFAULT_THEME = LIGHT_THEME.name


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1000
    height: int = 800
    fps: int = 60
    font_names: tuple[str, ...] = ("DejaVu Sans", "Arial", "Helvetica")
    label_font_size: int = 12
    panel_font_size: int = 14
    grid_stroke_pixels: float = 1.0
    axis_stroke_pixels: float = 2.0
    label_margin: int = 6
    snapshot_feedback_duration: float = 2.0
    monitor_interval_ms: int = 16
    max_frame_dt: float = 0.1
    snapshot_dir: str = "snapshots"
    pane_button_height: int = 26
    pane_row_height: int = 24
    pane_padding: tuple[int, int] = (10, 8)


PHYSICS_CFG = PhysicsCfg()
VIEW_CFG = ViewCfg()
RENDER_CFG = RenderCfg()


__all__ = [
    "DARK_THEME",
    "DEFAULT_THEME",
    "LIGHT_THEME",
    "PHYSICS_CFG",
    "PhysicsCfg",
    "RENDER_CFG",
    "RenderCfg",
    "THEMES",
    "ThemeCfg",
    "VIEW_CFG",
    "ViewCfg",
]
