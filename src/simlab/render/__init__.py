"""Rendering helpers for the sketches."""

from .assets import blend, get_text_surface, load_font, parse_color
from .camera import Camera
from .canvas import Canvas
from .grid import GridStyle, compute_grid, draw_grid, nice_step
from .input import InputDispatcher
from .panel import Binding, Folder, Pane, PanelButton
from .transform import Affine2D
from .ui import Button, ButtonVisualStyle, build_text_panel

__all__ = [
    "Affine2D",
    "Binding",
    "Button",
    "ButtonVisualStyle",
    "Camera",
    "Canvas",
    "Folder",
    "GridStyle",
    "InputDispatcher",
    "Pane",
    "PanelButton",
    "blend",
    "build_text_panel",
    "compute_grid",
    "draw_grid",
    "get_text_surface",
    "load_font",
    "nice_step",
    "parse_color",
]
