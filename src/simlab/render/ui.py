from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import pygame

from simlab.core.config import ThemeCfg
from simlab.core.timekeeping import Countdown

from .assets import Color, get_text_surface


@dataclass(frozen=True)
class ButtonVisualStyle:
    base_color: Color
    hover_color: Color
    text_color: tuple[int, int, int]
    border_color: Color
    radius: int = 6

    @classmethod
    def from_theme(cls, theme: ThemeCfg) -> "ButtonVisualStyle":
        return cls(
            base_color=theme.panel_hover_color,
            hover_color=theme.panel_border_color,
            text_color=theme.text_color,
            border_color=theme.panel_border_color,
        )


class Button:
    """Panel button: click callbacks plus a label that can be swapped for a while."""

    def __init__(
        self,
        rect: tuple[int, int, int, int] | pygame.Rect,
        text: str,
        text_getter: Callable[[], str] | None = None,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self._callbacks: list[Callable[[], None]] = []
        self._text_getter = text_getter
        self._flash_text: str | None = None
        self._flash = Countdown()

    def on_click(self, callback: Callable[[], None]) -> "Button":
        self._callbacks.append(callback)
        return self

    def click(self) -> None:
        for callback in list(self._callbacks):
            callback()

    def flash(self, text: str, duration: float) -> None:
        """Show ``text`` instead of the label for ``duration`` seconds."""

        self._flash_text = text
        self._flash.start(duration)

    def update(self, dt: float) -> None:
        if self._flash.advance(dt):
            self._flash_text = None

    def get_text(self) -> str:
        if self._flash_text is not None:
            return self._flash_text
        if self._text_getter is not None:
            return self._text_getter()
        return self.text

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        style: ButtonVisualStyle,
        mouse_pos: tuple[int, int] | None = None,
    ) -> None:
        if mouse_pos is None:
            mouse_pos = pygame.mouse.get_pos()
        fill = style.hover_color if self.rect.collidepoint(mouse_pos) else style.base_color
        face = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        pygame.draw.rect(face, fill, face.get_rect(), border_radius=style.radius)
        pygame.draw.rect(face, style.border_color, face.get_rect(), 1, border_radius=style.radius)
        surface.blit(face, self.rect.topleft)
        label = get_text_surface(font, self.get_text(), style.text_color)
        surface.blit(label, label.get_rect(center=self.rect.center))


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[str],
    *,
    text_color: tuple[int, int, int],
    background_color: Color,
    padding: tuple[int, int] = (10, 8),
) -> pygame.Surface:
    """Rounded translucent box holding ``lines``, one per font line height."""

    if not lines:
        raise ValueError("lines must not be empty")
    pad_x, pad_y = padding
    line_height = font.get_linesize()
    width = max(font.size(text)[0] for text in lines) + pad_x * 2
    height = line_height * len(lines) + pad_y * 2
    box = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.rect(box, background_color, box.get_rect(), border_radius=8)
    for row, text in enumerate(lines):
        if text:
            box.blit(get_text_surface(font, text, text_color), (pad_x, pad_y + row * line_height))
    return box


__all__ = ["Button", "ButtonVisualStyle", "build_text_panel"]
