"""Adaptive coordinate grid.

The grid step is re-chosen every frame from the camera's effective view
range so that roughly ``ideal_cell_count`` cells span the shorter screen
dimension. Steps are always ``1``, ``2`` or ``5`` times a power of ten.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pygame

from simlab.core.config import RENDER_CFG, VIEW_CFG, RenderCfg, ThemeCfg, ViewCfg

if TYPE_CHECKING:  # pragma: no cover
    from .camera import Camera
    from .canvas import Canvas


@dataclass(frozen=True)
class GridStyle:
    ideal_cell_count: float = VIEW_CFG.ideal_cell_count
    show_minor: bool = True
    minor_divisions: int = VIEW_CFG.minor_divisions
    minor_tolerance: float = VIEW_CFG.minor_tolerance
    show_labels: bool = True
    grid_stroke_pixels: float = RENDER_CFG.grid_stroke_pixels
    axis_stroke_pixels: float = RENDER_CFG.axis_stroke_pixels
    label_margin: int = RENDER_CFG.label_margin

    @classmethod
    def from_config(
        cls,
        view_cfg: ViewCfg = VIEW_CFG,
        render_cfg: RenderCfg = RENDER_CFG,
        *,
        thumb: bool = False,
    ) -> "GridStyle":
        return cls(
            ideal_cell_count=view_cfg.ideal_cell_count,
            minor_divisions=view_cfg.minor_divisions,
            minor_tolerance=view_cfg.minor_tolerance,
            show_labels=not thumb,
            grid_stroke_pixels=render_cfg.grid_stroke_pixels,
            axis_stroke_pixels=render_cfg.axis_stroke_pixels,
            label_margin=render_cfg.label_margin,
        )


@dataclass(frozen=True)
class GridLabel:
    text: str
    x: float
    y: float
    anchor: str
    offset: tuple[int, int]


@dataclass
class GridGeometry:
    step: float
    minor_step: float
    decimals: int
    view_rect: tuple[float, float, float, float]
    axis_x: float
    axis_y: float
    x_axis_pinned: bool
    y_axis_pinned: bool
    major_x: list[float] = field(default_factory=list)
    major_y: list[float] = field(default_factory=list)
    minor_x: list[float] = field(default_factory=list)
    minor_y: list[float] = field(default_factory=list)
    labels: list[GridLabel] = field(default_factory=list)


def nice_step(effective_view_range: float, ideal_cell_count: float = VIEW_CFG.ideal_cell_count) -> float:
    """Pick a 1/2/5 x 10^k grid step for the given view range."""

    if not math.isfinite(effective_view_range) or effective_view_range <= 0.0:
        raise ValueError(f"view range must be a positive finite number, got {effective_view_range!r}")
    if ideal_cell_count <= 0.0:
        raise ValueError("ideal_cell_count must be positive")
    raw_step = 2.0 * effective_view_range / ideal_cell_count
    power = 10.0 ** math.floor(math.log10(raw_step))
    residual = raw_step / power
    if residual > 5.0:
        return 5.0 * power
    if residual > 2.0:
        return 2.0 * power
    return power


def label_decimals(step: float) -> int:
    if not math.isfinite(step) or step <= 0.0:
        raise ValueError(f"grid step must be a positive finite number, got {step!r}")
    # log10 of an exact power of ten can land a hair below the integer
    return max(0, -math.floor(math.log10(step) + 1e-9))


def format_label(value: float, decimals: int) -> str:
    text = f"{value:.{decimals}f}"
    if text.startswith("-") and float(text) == 0.0:
        text = text[1:]
    return text


def grid_indices(lo: float, hi: float, step: float) -> range:
    """Indices ``k`` with ``lo <= k * step <= hi``."""

    return range(math.ceil(lo / step), math.floor(hi / step) + 1)


def grid_lines(lo: float, hi: float, step: float) -> list[float]:
    return [k * step for k in grid_indices(lo, hi, step)]


def _near_multiple(value: float, step: float, tolerance: float) -> bool:
    nearest = round(value / step) * step
    return abs(value - nearest) < tolerance


def _minor_lines(lo: float, hi: float, step: float, minor_step: float, tolerance: float) -> list[float]:
    lines: list[float] = []
    for value in grid_lines(lo, hi, minor_step):
        if abs(value) < tolerance or _near_multiple(value, step, tolerance):
            continue
        lines.append(value)
    return lines


def compute_grid(camera: "Camera", style: GridStyle = GridStyle()) -> GridGeometry:
    """Lines, axes and labels for the camera's current view."""

    step = nice_step(camera.effective_view_range, style.ideal_cell_count)
    minor_step = step / style.minor_divisions
    decimals = label_decimals(step)
    left, bottom, right, top = camera.view_rect()

    x_axis_pinned = not left <= 0.0 <= right
    y_axis_pinned = not bottom <= 0.0 <= top
    axis_x = min(max(0.0, left), right)
    axis_y = min(max(0.0, bottom), top)

    geometry = GridGeometry(
        step=step,
        minor_step=minor_step,
        decimals=decimals,
        view_rect=(left, bottom, right, top),
        axis_x=axis_x,
        axis_y=axis_y,
        x_axis_pinned=x_axis_pinned,
        y_axis_pinned=y_axis_pinned,
    )

    x_indices = grid_indices(left, right, step)
    y_indices = grid_indices(bottom, top, step)
    geometry.major_x = [k * step for k in x_indices if k != 0]
    geometry.major_y = [k * step for k in y_indices if k != 0]

    if style.show_minor:
        tolerance = style.minor_tolerance * minor_step
        geometry.minor_x = _minor_lines(left, right, step, minor_step, tolerance)
        geometry.minor_y = _minor_lines(bottom, top, step, minor_step, tolerance)

    if style.show_labels:
        margin = style.label_margin
        # labels follow their axis; an axis pinned to the bottom/right edge
        # gets its labels on the inner side
        if axis_y <= bottom:
            x_anchor, x_offset = "midbottom", (0, -margin)
        else:
            x_anchor, x_offset = "midtop", (0, margin)
        if axis_x >= right:
            y_anchor, y_offset = "midright", (-margin, 0)
        elif axis_x <= left:
            y_anchor, y_offset = "midleft", (margin, 0)
        else:
            y_anchor, y_offset = "midright", (-margin, 0)

        for k in x_indices:
            if k == 0:
                continue
            value = k * step
            geometry.labels.append(
                GridLabel(format_label(value, decimals), value, axis_y, x_anchor, x_offset)
            )
        for k in y_indices:
            if k == 0:
                continue
            value = k * step
            geometry.labels.append(
                GridLabel(format_label(value, decimals), axis_x, value, y_anchor, y_offset)
            )
        if not (x_axis_pinned and y_axis_pinned):
            vertical = "top" if x_offset[1] > 0 else "bottom"
            horizontal = "right" if y_offset[0] < 0 else "left"
            geometry.labels.append(
                GridLabel(
                    "0", axis_x, axis_y, vertical + horizontal, (y_offset[0], x_offset[1])
                )
            )
    return geometry


def draw_grid(
    canvas: "Canvas",
    camera: "Camera",
    theme: ThemeCfg,
    *,
    style: GridStyle = GridStyle(),
    font: pygame.font.Font | None = None,
) -> GridGeometry:
    """Draw the grid under the transform installed by ``camera.apply``.

    Stroke weights are divided by the camera scale so lines keep a constant
    pixel width at every zoom level.
    """

    geometry = compute_grid(camera, style)
    left, bottom, right, top = geometry.view_rect
    scale = camera.scale()
    grid_weight = style.grid_stroke_pixels / scale
    axis_weight = style.axis_stroke_pixels / scale

    for x in geometry.minor_x:
        canvas.line(x, bottom, x, top, color=theme.grid_minor_color, weight=grid_weight)
    for y in geometry.minor_y:
        canvas.line(left, y, right, y, color=theme.grid_minor_color, weight=grid_weight)

    for x in geometry.major_x:
        canvas.line(x, bottom, x, top, color=theme.grid_line_color, weight=grid_weight)
    for y in geometry.major_y:
        canvas.line(left, y, right, y, color=theme.grid_line_color, weight=grid_weight)

    canvas.line(geometry.axis_x, bottom, geometry.axis_x, top, color=theme.axis_color, weight=axis_weight)
    canvas.line(left, geometry.axis_y, right, geometry.axis_y, color=theme.axis_color, weight=axis_weight)

    if style.show_labels and font is not None:
        for label in geometry.labels:
            canvas.push()
            canvas.translate(label.x, label.y)
            canvas.scale(1.0, -1.0)
            canvas.text(
                label.text,
                0.0,
                0.0,
                font=font,
                color=theme.label_color,
                anchor=label.anchor,
                offset=label.offset,
            )
            canvas.pop()
    return geometry


__all__ = [
    "GridGeometry",
    "GridLabel",
    "GridStyle",
    "compute_grid",
    "draw_grid",
    "format_label",
    "grid_indices",
    "grid_lines",
    "label_decimals",
    "nice_step",
]
