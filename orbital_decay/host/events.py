# orbital_decay/host/events.py
import logging
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


class GameEvent:
    """
    Minimal host event bus: ordered handler list, fired synchronously on the caller's thread.
    A failing handler is logged and does not prevent the remaining handlers from running.
    """
    def __init__(self, name: str):
        self.name = name
        self._handlers: List[Callable[[Any], None]] = []

    def add(self, handler: Callable[[Any], None]) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def remove(self, handler: Callable[[Any], None]) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def fire(self, data: Any = None) -> None:
        for handler in list(self._handlers):
            try:
                handler(data)
            except Exception:
                logger.exception("Handler %r failed on event %s", handler, self.name)

    def __len__(self):
        return len(self._handlers)
