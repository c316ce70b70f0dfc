"""Parameter panel drawn with pygame.

Bindings only ever read and write attributes of the record they are bound
to. Numeric ranges are enforced here by clamping; nothing downstream
validates parameters again.
"""
from __future__ import annotations

from typing import Any, Callable, Iterator, Mapping, Sequence, Union

import pygame

from simlab.core.config import RENDER_CFG, RenderCfg, ThemeCfg
from simlab.core.physics import clamp

from .assets import get_text_surface, parse_color
from .ui import Button, ButtonVisualStyle

ChangeHandler = Callable[[Any], None]

COLOR_PALETTE: tuple[str, ...] = (
    "#00ccff",
    "#ff0055",
    "#ffaa00",
    "#33cc66",
    "#9966ff",
    "#333333",
)


def _format_number(value: float, fmt: Callable[[float], str] | None) -> str:
    if fmt is not None:
        return fmt(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return f"{value:.2f}"


class Binding:
    """A field of a record shown as one panel row."""

    def __init__(
        self,
        record: object,
        key: str,
        *,
        label: str | None = None,
        min_value: float | None = None,
        max_value: float | None = None,
        step: float | None = None,
        options: Mapping[str, Any] | None = None,
        readonly: bool = False,
        fmt: Callable[[float], str] | None = None,
        interval_ms: int | None = None,
    ) -> None:
        if not hasattr(record, key):
            raise AttributeError(f"{type(record).__name__} has no field {key!r}")
        if min_value is not None and max_value is not None and min_value > max_value:
            raise ValueError("min_value must not exceed max_value")
        self.record = record
        self.key = key
        self.label = label or key
        self.min_value = min_value
        self.max_value = max_value
        self.step = step
        self.options = dict(options) if options is not None else None
        self.readonly = readonly
        self.fmt = fmt
        self.interval_ms = interval_ms
        self._handlers: list[ChangeHandler] = []
        self._cached_text: str | None = None
        self._last_refresh_ms: float | None = None

    @property
    def value(self) -> Any:
        return getattr(self.record, self.key)

    @property
    def is_slider(self) -> bool:
        return (
            not self.readonly
            and self.options is None
            and self.min_value is not None
            and self.max_value is not None
            and isinstance(self.value, (int, float))
            and not isinstance(self.value, bool)
        )

    @property
    def is_color(self) -> bool:
        value = self.value
        return self.options is None and isinstance(value, str) and value.startswith("#")

    def on_change(self, handler: ChangeHandler) -> "Binding":
        self._handlers.append(handler)
        return self

    def set_value(self, value: Any) -> None:
        if self.readonly:
            raise AttributeError(f"binding {self.key!r} is read-only")
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            lo = self.min_value if self.min_value is not None else float("-inf")
            hi = self.max_value if self.max_value is not None else float("inf")
            value = clamp(value, lo, hi)
            if self.step:
                base = self.min_value if self.min_value is not None else 0.0
                value = clamp(base + round((value - base) / self.step) * self.step, lo, hi)
            if isinstance(self.value, int) and not isinstance(self.value, bool):
                value = int(round(value))
        if self.options is not None and value not in self.options.values():
            raise ValueError(f"{value!r} is not an option of {self.key!r}")
        setattr(self.record, self.key, value)
        self._cached_text = None
        for handler in list(self._handlers):
            handler(value)

    def set_fraction(self, fraction: float) -> None:
        if self.min_value is None or self.max_value is None:
            raise ValueError(f"binding {self.key!r} has no range")
        fraction = clamp(fraction, 0.0, 1.0)
        self.set_value(self.min_value + fraction * (self.max_value - self.min_value))

    def fraction(self) -> float:
        if self.min_value is None or self.max_value is None:
            return 0.0
        span = self.max_value - self.min_value
        if span <= 0.0:
            return 0.0
        return clamp((float(self.value) - self.min_value) / span, 0.0, 1.0)

    def cycle(self) -> None:
        """Advance option, colour and boolean bindings to their next value."""

        if self.options is not None:
            values = list(self.options.values())
            try:
                index = values.index(self.value)
            except ValueError:
                index = -1
            self.set_value(values[(index + 1) % len(values)])
        elif isinstance(self.value, bool):
            self.set_value(not self.value)
        elif self.is_color:
            palette = list(COLOR_PALETTE)
            current = self.value.lower()
            index = palette.index(current) if current in palette else -1
            self.set_value(palette[(index + 1) % len(palette)])

    def display_text(self, now_ms: float | None = None) -> str:
        """Row text. Read-only monitors refresh at most every ``interval_ms``."""

        if (
            self.readonly
            and self.interval_ms is not None
            and now_ms is not None
            and self._cached_text is not None
            and self._last_refresh_ms is not None
            and now_ms - self._last_refresh_ms < self.interval_ms
        ):
            return self._cached_text
        value = self.value
        if self.options is not None:
            names = [name for name, option in self.options.items() if option == value]
            shown = names[0] if names else str(value)
        elif value is None:
            shown = "-"
        elif isinstance(value, bool):
            shown = "on" if value else "off"
        elif isinstance(value, (int, float)):
            shown = _format_number(value, self.fmt)
        else:
            shown = str(value)
        text = f"{self.label}: {shown}"
        self._cached_text = text
        self._last_refresh_ms = now_ms
        return text


class PanelButton(Button):
    def __init__(self, title: str) -> None:
        super().__init__((0, 0, 0, 0), title)

    @property
    def title(self) -> str:
        return self.text

    @title.setter
    def title(self, value: str) -> None:
        self.text = value


PanelItem = Union[Binding, PanelButton, "Folder"]


class _Container:
    def __init__(self) -> None:
        self.items: list[PanelItem] = []

    def add_binding(self, record: object, key: str, **kwargs: Any) -> Binding:
        binding = Binding(record, key, **kwargs)
        self.items.append(binding)
        return binding

    def add_button(self, title: str) -> PanelButton:
        button = PanelButton(title)
        self.items.append(button)
        return button

    def add_folder(self, title: str, *, expanded: bool = True) -> "Folder":
        folder = Folder(title, expanded=expanded)
        self.items.append(folder)
        return folder


class Folder(_Container):
    def __init__(self, title: str, *, expanded: bool = True) -> None:
        super().__init__()
        self.title = title
        self.expanded = expanded

    def toggle(self) -> None:
        self.expanded = not self.expanded


class Pane(_Container):
    """Collapsible stack of bindings, buttons and folders."""

    INDENT = 12

    def __init__(
        self,
        title: str,
        position: tuple[int, int] = (10, 10),
        width: int = 280,
        *,
        render_cfg: RenderCfg = RENDER_CFG,
    ) -> None:
        super().__init__()
        self.title = title
        self.position = position
        self.width = width
        self.expanded = True
        self._cfg = render_cfg
        self._active_slider: tuple[Binding, pygame.Rect] | None = None
        self._pressed = False
        self._clock_ms = 0.0

    # --- layout ----------------------------------------------------------

    def _walk(
        self, items: Sequence[PanelItem], depth: int, *, hidden: bool = False
    ) -> Iterator[tuple[PanelItem, int]]:
        for item in items:
            yield item, depth
            if isinstance(item, Folder) and (item.expanded or hidden):
                yield from self._walk(item.items, depth + 1, hidden=hidden)

    def layout(self) -> list[tuple[PanelItem | None, pygame.Rect]]:
        """Visible rows; the first row (item ``None``) is the title bar."""

        pad_x, pad_y = self._cfg.pane_padding
        row_h = self._cfg.pane_row_height
        x0, y = self.position
        rows: list[tuple[PanelItem | None, pygame.Rect]] = [
            (None, pygame.Rect(x0, y, self.width, row_h + pad_y))
        ]
        y += row_h + pad_y
        if not self.expanded:
            return rows
        for item, depth in self._walk(self.items, 0):
            indent = pad_x + depth * self.INDENT
            height = self._cfg.pane_button_height if isinstance(item, PanelButton) else row_h
            if isinstance(item, Binding) and item.is_slider:
                height += 8
            rect = pygame.Rect(x0 + indent, y, self.width - indent - pad_x, height)
            rows.append((item, rect))
            y += height + 4
        return rows

    @property
    def rect(self) -> pygame.Rect:
        rows = self.layout()
        bottom = rows[-1][1].bottom + self._cfg.pane_padding[1]
        x0, y0 = self.position
        return pygame.Rect(x0, y0, self.width, bottom - y0)

    def bindings(self) -> list[Binding]:
        return [item for item, _ in self._walk(self.items, 0) if isinstance(item, Binding)]

    def buttons(self) -> list[PanelButton]:
        return [item for item, _ in self._walk(self.items, 0) if isinstance(item, PanelButton)]

    # --- behaviour -------------------------------------------------------

    def update(self, dt: float) -> None:
        self._clock_ms += dt * 1000.0
        # collapsed folders keep their button timers running
        for item, _ in self._walk(self.items, 0, hidden=True):
            if isinstance(item, PanelButton):
                item.update(dt)

    def _slider_track(self, rect: pygame.Rect) -> pygame.Rect:
        return pygame.Rect(rect.x, rect.bottom - 8, rect.width, 6)

    def _press(self, pos: tuple[int, int]) -> None:
        for item, rect in self.layout():
            if not rect.collidepoint(pos):
                continue
            if item is None:
                self.expanded = not self.expanded
            elif isinstance(item, Folder):
                item.toggle()
            elif isinstance(item, PanelButton):
                item.click()
            elif isinstance(item, Binding) and not item.readonly:
                if item.is_slider:
                    self._active_slider = (item, rect)
                    item.set_fraction((pos[0] - rect.x) / max(1, rect.width))
                else:
                    item.cycle()
            return

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Input subscriber; consumes pointer events over the panel."""

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self._pressed = True
                self._press(event.pos)
                return True
            return False
        if event.type == pygame.MOUSEMOTION and self._active_slider is not None:
            binding, rect = self._active_slider
            binding.set_fraction((event.pos[0] - rect.x) / max(1, rect.width))
            return True
        if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            # only a release ending a press that started on the panel is ours
            owned = self._pressed or self._active_slider is not None
            self._pressed = False
            self._active_slider = None
            return owned
        if event.type == pygame.MOUSEWHEEL:
            return self.rect.collidepoint(pygame.mouse.get_pos())
        return False

    # --- drawing ---------------------------------------------------------

    def draw(self, surface: pygame.Surface, font: pygame.font.Font, theme: ThemeCfg) -> None:
        panel_rect = self.rect
        panel_surface = pygame.Surface(panel_rect.size, pygame.SRCALPHA)
        pygame.draw.rect(panel_surface, theme.panel_color, panel_surface.get_rect(), border_radius=10)
        pygame.draw.rect(
            panel_surface, theme.panel_border_color, panel_surface.get_rect(), 1, border_radius=10
        )
        surface.blit(panel_surface, panel_rect.topleft)

        button_style = ButtonVisualStyle.from_theme(theme)
        pad_x = self._cfg.pane_padding[0]
        for item, rect in self.layout():
            if item is None:
                marker = "v" if self.expanded else ">"
                title = get_text_surface(font, f"{marker} {self.title}", theme.text_color)
                surface.blit(title, title.get_rect(midleft=(rect.x + pad_x, rect.centery)))
            elif isinstance(item, Folder):
                marker = "v" if item.expanded else ">"
                text = get_text_surface(font, f"{marker} {item.title}", theme.text_color)
                surface.blit(text, text.get_rect(midleft=(rect.x, rect.centery)))
            elif isinstance(item, PanelButton):
                item.rect = rect
                item.draw(surface, font, button_style)
            else:
                self._draw_binding(surface, font, theme, item, rect)

    def _draw_binding(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        theme: ThemeCfg,
        binding: Binding,
        rect: pygame.Rect,
    ) -> None:
        text = get_text_surface(font, binding.display_text(self._clock_ms), theme.text_color)
        surface.blit(text, (rect.x, rect.y + 2))
        if binding.is_slider:
            track = self._slider_track(rect)
            pygame.draw.rect(surface, theme.panel_border_color, track, border_radius=3)
            filled = track.copy()
            filled.width = int(track.width * binding.fraction())
            pygame.draw.rect(surface, theme.axis_color[:3], filled, border_radius=3)
        elif binding.is_color:
            swatch = pygame.Rect(rect.right - rect.height, rect.y + 2, rect.height - 4, rect.height - 4)
            pygame.draw.rect(surface, parse_color(binding.value), swatch, border_radius=4)


__all__ = ["Binding", "COLOR_PALETTE", "Folder", "Pane", "PanelButton"]
