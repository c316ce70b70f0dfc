"""Drawing surface with a transform stack.

pygame draws in pixels only; :class:`Canvas` adds the push/pop/translate/
scale/rotate model the sketches are written against, so shapes can be
given in world coordinates once the camera has installed its transform.
"""
from __future__ import annotations

import math

import pygame

from .assets import Color, blend, get_text_surface, parse_color
from .transform import Affine2D

_ANCHORS = (
    "center",
    "topleft",
    "topright",
    "bottomleft",
    "bottomright",
    "midtop",
    "midbottom",
    "midleft",
    "midright",
)

_MAX_RADIUS_PX = 1e5


def _clip_segment(
    start: tuple[float, float],
    end: tuple[float, float],
    size: tuple[int, int],
    *,
    margin: float = 0.0,
) -> tuple[tuple[float, float], tuple[float, float]] | None:
    """Liang-Barsky clip of a screen segment to the surface bounds.

    Keeps pygame away from the huge coordinates deep zoom levels produce.
    """

    x0, y0 = start
    dx = end[0] - x0
    dy = end[1] - y0
    lo_x, hi_x = -margin, size[0] + margin
    lo_y, hi_y = -margin, size[1] + margin
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0 - lo_x), (dx, hi_x - x0), (-dy, y0 - lo_y), (dy, hi_y - y0)):
        if p == 0.0:
            if q < 0.0:
                return None
            continue
        t = q / p
        if p < 0.0:
            if t > t1:
                return None
            t0 = max(t0, t)
        else:
            if t < t0:
                return None
            t1 = min(t1, t)
    return (x0 + t0 * dx, y0 + t0 * dy), (x0 + t1 * dx, y0 + t1 * dy)


class Canvas:
    def __init__(self, surface: pygame.Surface) -> None:
        self.surface = surface
        self._transform = Affine2D.identity()
        self._stack: list[Affine2D] = []
        self._background: tuple[int, int, int] = (0, 0, 0)

    @property
    def size(self) -> tuple[int, int]:
        return self.surface.get_size()

    @property
    def width(self) -> int:
        return self.surface.get_width()

    @property
    def height(self) -> int:
        return self.surface.get_height()

    @property
    def transform(self) -> Affine2D:
        return self._transform

    @property
    def depth(self) -> int:
        return len(self._stack)

    def set_surface(self, surface: pygame.Surface) -> None:
        self.surface = surface

    # --- transform stack -------------------------------------------------

    def push(self) -> None:
        self._stack.append(self._transform.copy())

    def pop(self) -> None:
        if not self._stack:
            raise IndexError("pop from empty transform stack")
        self._transform = self._stack.pop()

    def reset_transform(self) -> None:
        self._transform = Affine2D.identity()
        self._stack.clear()

    def translate(self, tx: float, ty: float) -> None:
        self._transform = self._transform.translate(tx, ty)

    def scale(self, sx: float, sy: float | None = None) -> None:
        self._transform = self._transform.scale(sx, sy)

    def rotate(self, angle: float) -> None:
        self._transform = self._transform.rotate(angle)

    def to_screen(self, x: float, y: float) -> tuple[float, float]:
        return self._transform.apply(x, y)

    def to_world(self, sx: float, sy: float) -> tuple[float, float]:
        return self._transform.inverse().apply(sx, sy)

    def pixels(self, length: float) -> float:
        """Length in current units converted to screen pixels."""

        return abs(length) * self._transform.linear_scale

    # --- primitives ------------------------------------------------------

    def background(self, color: Color | str) -> None:
        self._background = parse_color(color)
        self.surface.fill(self._background)

    def _resolve(self, color: Color | str) -> tuple[int, int, int]:
        if isinstance(color, str):
            return parse_color(color)
        return blend(color, self._background)

    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        *,
        color: Color | str,
        weight: float = 1.0,
    ) -> None:
        width_px = max(1, int(round(self.pixels(weight))))
        segment = _clip_segment(
            self.to_screen(x1, y1), self.to_screen(x2, y2), self.size, margin=width_px
        )
        if segment is None:
            return
        pygame.draw.line(self.surface, self._resolve(color), segment[0], segment[1], width_px)

    def circle(
        self,
        x: float,
        y: float,
        radius: float,
        *,
        color: Color | str,
        weight: float = 0.0,
    ) -> None:
        """Filled circle when ``weight`` is 0, outline otherwise."""

        center = self.to_screen(x, y)
        radius_px = self.pixels(radius)
        if radius_px < 0.5:
            return
        width, height = self.size
        if (
            center[0] + radius_px < 0
            or center[0] - radius_px > width
            or center[1] + radius_px < 0
            or center[1] - radius_px > height
        ):
            return
        width_px = 0
        if weight > 0.0:
            width_px = max(1, int(round(self.pixels(weight))))
        if radius_px > _MAX_RADIUS_PX:
            self._large_circle(x, y, radius, color=color, weight=weight)
            return
        pygame.draw.circle(
            self.surface, self._resolve(color), center, max(1, int(round(radius_px))), width_px
        )

    def _large_circle(
        self, x: float, y: float, radius: float, *, color: Color | str, weight: float
    ) -> None:
        points = [
            (x + radius * math.cos(angle), y + radius * math.sin(angle))
            for angle in (2.0 * math.pi * i / 720 for i in range(720))
        ]
        if weight > 0.0:
            self.polyline(points, color=color, weight=weight, closed=True)
            return
        limit = _MAX_RADIUS_PX
        screen_points = [
            (min(max(sx, -limit), limit), min(max(sy, -limit), limit))
            for sx, sy in (self.to_screen(px, py) for px, py in points)
        ]
        pygame.draw.polygon(self.surface, self._resolve(color), screen_points)

    def text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        font: pygame.font.Font,
        color: Color | str,
        anchor: str = "center",
        offset: tuple[int, int] = (0, 0),
    ) -> pygame.Rect:
        """Blit ``text`` with ``anchor`` at the transformed point.

        Glyphs follow the orientation of the current transform: under a
        Y-flipping transform they come out mirrored, so callers counter-flip
        with ``scale(1, -1)`` around the call.
        """

        if anchor not in _ANCHORS:
            raise ValueError(f"Unknown anchor {anchor!r}")
        rendered = get_text_surface(font, text, self._resolve(color))
        if self._transform.flips_y:
            rendered = pygame.transform.flip(rendered, False, True)
        sx, sy = self.to_screen(x, y)
        rect = rendered.get_rect()
        setattr(rect, anchor, (int(round(sx)) + offset[0], int(round(sy)) + offset[1]))
        self.surface.blit(rendered, rect)
        return rect

    def polyline(
        self,
        points: list[tuple[float, float]],
        *,
        color: Color | str,
        weight: float = 1.0,
        closed: bool = False,
    ) -> None:
        if len(points) < 2:
            return
        pairs = list(zip(points, points[1:]))
        if closed:
            pairs.append((points[-1], points[0]))
        for (x1, y1), (x2, y2) in pairs:
            self.line(x1, y1, x2, y2, color=color, weight=weight)


__all__ = ["Canvas"]
