from __future__ import annotations

from typing import Callable

import pygame

EventHandler = Callable[[pygame.event.Event], bool]


class InputDispatcher:
    """Ordered list of input subscribers.

    Events are offered to subscribers in subscription order; the first one
    returning ``True`` consumes the event and later subscribers never see it.
    """

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []

    def __len__(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: EventHandler, *, first: bool = False) -> None:
        if handler in self._handlers:
            raise ValueError("handler already subscribed")
        if first:
            self._handlers.insert(0, handler)
        else:
            self._handlers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        self._handlers.remove(handler)

    def dispatch(self, event: pygame.event.Event) -> bool:
        for handler in list(self._handlers):
            if handler(event):
                return True
        return False


__all__ = ["EventHandler", "InputDispatcher"]
