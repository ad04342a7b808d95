from __future__ import annotations

"""Tiny pub/sub event bus for session lifecycle events."""

from typing import Any, Callable, Dict, List

from .explain import trace as xtrace


class EventBus:
    def __init__(self) -> None:
        self._subs: Dict[str, List[Callable[[Any], None]]] = {}

    def subscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        self._subs.setdefault(event, []).append(handler)

    def unsubscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        handlers = self._subs.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, payload: Any) -> None:
        for h in list(self._subs.get(event, [])):
            try:
                h(payload)
            except Exception as e:
                # A failing subscriber must not break the quiz loop
                xtrace("event_handler_failed", {"event": event, "error": repr(e)})
