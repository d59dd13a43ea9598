from __future__ import annotations

from collections import defaultdict
from typing import DefaultDict

from gms.contracts import PlayEvent, PlayEventHandler


class PlayEventBus:
    def __init__(self) -> None:
        self._handlers: list[PlayEventHandler] = []
        self._counter: DefaultDict[str, int] = defaultdict(int)

    def subscribe(self, handler: PlayEventHandler) -> None:
        self._handlers.append(handler)

    def publish(self, event: PlayEvent) -> None:
        self._counter[event.kind] += 1
        for handler in self._handlers:
            handler(event)

    def emitted_count(self, kind: str | None = None) -> int:
        if kind is None:
            return sum(self._counter.values())
        return self._counter[kind]
