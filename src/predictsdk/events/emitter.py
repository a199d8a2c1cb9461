"""Typed publish/subscribe registry. One instance per SDK; there is no global bus."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

from predictsdk.events.types import EVENT_TYPES, SDKEvent

log = structlog.get_logger(__name__)

EventCallback = Callable[[Any], None]


@dataclass(eq=False)
class _Listener:
    callback: EventCallback
    once: bool = False


class EventEmitter:
    """Subscribe by event type, one-shot, or wildcard. Listener errors are logged, not propagated."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[_Listener]] = {t: [] for t in EVENT_TYPES}
        self._any: list[EventCallback] = []

    def _check_type(self, event_type: str) -> None:
        if event_type not in self._listeners:
            raise ValueError(f"Unknown event type: {event_type!r}. Known: {list(EVENT_TYPES)}")

    def on(self, event_type: str, callback: EventCallback) -> Callable[[], None]:
        """Subscribe; returns an unsubscribe callable."""
        self._check_type(event_type)
        self._listeners[event_type].append(_Listener(callback))
        return lambda: self.off(event_type, callback)

    def once(self, event_type: str, callback: EventCallback) -> None:
        self._check_type(event_type)
        self._listeners[event_type].append(_Listener(callback, once=True))

    def off(self, event_type: str, callback: EventCallback) -> None:
        self._check_type(event_type)
        listeners = self._listeners[event_type]
        for i, listener in enumerate(listeners):
            if listener.callback == callback:
                del listeners[i]
                return

    def on_any(self, callback: EventCallback) -> Callable[[], None]:
        """Subscribe to every event type; returns an unsubscribe callable."""
        self._any.append(callback)

        def unsubscribe() -> None:
            if callback in self._any:
                self._any.remove(callback)

        return unsubscribe

    def emit(self, event: SDKEvent) -> None:
        listeners = self._listeners[event.type]
        for listener in list(listeners):
            if listener.once and listener in listeners:
                listeners.remove(listener)
            self._call(listener.callback, event)
        for callback in list(self._any):
            self._call(callback, event)

    def _call(self, callback: EventCallback, event: SDKEvent) -> None:
        try:
            callback(event)
        except Exception:
            log.exception("event_listener_failed", event_type=event.type)

    def listener_count(self, event_type: str | None = None) -> int:
        if event_type is None:
            return sum(len(v) for v in self._listeners.values()) + len(self._any)
        self._check_type(event_type)
        return len(self._listeners[event_type])

    def remove_all_listeners(self) -> None:
        for listeners in self._listeners.values():
            listeners.clear()
        self._any.clear()
