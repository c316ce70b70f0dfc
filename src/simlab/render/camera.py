from __future__ import annotations

from dataclasses import dataclass
from typing import Collection

import numpy as np
import pygame

from simlab.core.config import VIEW_CFG, ViewCfg
from simlab.core.physics import clamp

from .canvas import Canvas


@dataclass
class CameraState:
    position: np.ndarray
    zoom: float


_KEY_DIRECTIONS: dict[int, tuple[float, float]] = {
    pygame.K_w: (0.0, 1.0),
    pygame.K_UP: (0.0, 1.0),
    pygame.K_s: (0.0, -1.0),
    pygame.K_DOWN: (0.0, -1.0),
    pygame.K_a: (-1.0, 0.0),
    pygame.K_LEFT: (-1.0, 0.0),
    pygame.K_d: (1.0, 0.0),
    pygame.K_RIGHT: (1.0, 0.0),
}

PAN_KEYS: tuple[int, ...] = tuple(_KEY_DIRECTIONS)


class Camera:
    """Pan/zoom camera mapping a Y-up world onto the screen.

    ``base_view_range`` is the world distance from the screen centre to the
    nearest screen edge at ``zoom == 1``.
    """

    def __init__(
        self,
        size: tuple[int, int],
        base_view_range: float,
        *,
        cfg: ViewCfg = VIEW_CFG,
        blocked_rect: tuple[int, int, int, int] | None = None,
    ) -> None:
        if base_view_range <= 0.0:
            raise ValueError("base_view_range must be positive")
        if not 0.0 < cfg.min_zoom <= 1.0 <= cfg.max_zoom:
            raise ValueError("zoom bounds must satisfy 0 < min_zoom <= 1 <= max_zoom")
        self._size = size
        self._base_view_range = float(base_view_range)
        self._cfg = cfg
        self._state = CameraState(position=np.array([0.0, 0.0], dtype=float), zoom=1.0)
        self._drag_anchor: tuple[int, int] | None = None
        self.blocked_rect = pygame.Rect(blocked_rect) if blocked_rect is not None else None

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def update_size(self, size: tuple[int, int]) -> None:
        self._size = size

    @property
    def base_view_range(self) -> float:
        return self._base_view_range

    @property
    def zoom(self) -> float:
        return self._state.zoom

    @property
    def position(self) -> np.ndarray:
        return self._state.position

    @property
    def effective_view_range(self) -> float:
        return self._base_view_range / self._state.zoom

    def scale(self) -> float:
        """Screen pixels per world unit."""

        width, height = self._size
        return (min(width, height) / 2.0) / self.effective_view_range

    def set_position(self, position: tuple[float, float]) -> None:
        self._state.position[:] = position

    def set_zoom(self, zoom: float) -> None:
        self._state.zoom = clamp(zoom, self._cfg.min_zoom, self._cfg.max_zoom)

    def reset_view(self) -> None:
        self._state.position[:] = (0.0, 0.0)
        self._state.zoom = 1.0
        self._drag_anchor = None

    def is_blocked(self, pos: tuple[int, int]) -> bool:
        return self.blocked_rect is not None and self.blocked_rect.collidepoint(pos)

    def pan(self, dx: float, dy: float, pointer: tuple[int, int] | None = None) -> bool:
        """Move the view by a screen-pixel drag delta.

        Ignored while ``pointer`` is over the blocked (panel) rectangle.
        """

        if pointer is not None and self.is_blocked(pointer):
            return False
        if dx == 0 and dy == 0:
            return False
        scale = self.scale()
        self._state.position[0] -= dx / scale
        self._state.position[1] -= -dy / scale
        return True

    def zoom_by(self, wheel_delta: float) -> None:
        """Exponential zoom; positive deltas zoom out."""

        self.set_zoom(self._state.zoom * self._cfg.zoom_sensitivity ** (-wheel_delta))

    def pan_by_keys(self, held: Collection[int], dt: float) -> None:
        dir_x = 0.0
        dir_y = 0.0
        for key in held:
            direction = _KEY_DIRECTIONS.get(key)
            if direction is not None:
                dir_x += direction[0]
                dir_y += direction[1]
        if dir_x == 0.0 and dir_y == 0.0:
            return
        speed = self._cfg.key_pan_speed * self.effective_view_range
        self._state.position[0] += dir_x * speed * dt
        self._state.position[1] += dir_y * speed * dt

    def apply(self, canvas: Canvas) -> None:
        width, height = self._size
        scale = self.scale()
        canvas.translate(width / 2.0, height / 2.0)
        canvas.scale(scale, -scale)
        canvas.translate(-float(self._state.position[0]), -float(self._state.position[1]))

    def visible_extent(self) -> tuple[float, float]:
        """World half-extents ``(hx, hy)`` of the visible area."""

        width, height = self._size
        scale = self.scale()
        return width / (2.0 * scale), height / (2.0 * scale)

    def view_rect(self) -> tuple[float, float, float, float]:
        hx, hy = self.visible_extent()
        cx, cy = self._state.position
        return (float(cx - hx), float(cy - hy), float(cx + hx), float(cy + hy))

    def world_to_screen(self, x: float, y: float) -> tuple[float, float]:
        width, height = self._size
        scale = self.scale()
        cx, cy = self._state.position
        return (width / 2.0 + (x - cx) * scale, height / 2.0 - (y - cy) * scale)

    def screen_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        width, height = self._size
        scale = self.scale()
        cx, cy = self._state.position
        return (float((sx - width / 2.0) / scale + cx), float((height / 2.0 - sy) / scale + cy))

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Input subscriber for drag and wheel events."""

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.is_blocked(event.pos):
                return False
            self._drag_anchor = event.pos
            return True
        if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            was_dragging = self._drag_anchor is not None
            self._drag_anchor = None
            return was_dragging
        if event.type == pygame.MOUSEMOTION:
            if self._drag_anchor is None:
                return False
            dx = event.pos[0] - self._drag_anchor[0]
            dy = event.pos[1] - self._drag_anchor[1]
            self.pan(dx, dy, event.pos)
            self._drag_anchor = event.pos
            return True
        if event.type == pygame.MOUSEWHEEL:
            if self.is_blocked(pygame.mouse.get_pos()):
                return False
            if event.y != 0:
                # pygame reports scrolling up as positive; that zooms in
                self.zoom_by(-event.y)
            return True
        return False


__all__ = ["Camera", "CameraState", "PAN_KEYS"]
