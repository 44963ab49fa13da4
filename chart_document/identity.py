from __future__ import annotations
import itertools
import threading


class IdentityRegistry:
    """Process-wide source of part ids. Strictly increasing, never reused."""
    def __init__(self, start: int = 1):
        self._lock = threading.Lock()
        self._counter = itertools.count(start)

    def next_id(self) -> int:
        with self._lock:
            return next(self._counter)

    def reset(self, start: int = 1) -> None:
        # only between independent runs, never while a document is being built
        with self._lock:
            self._counter = itertools.count(start)


default_registry = IdentityRegistry()

def next_id() -> int:
    return default_registry.next_id()
