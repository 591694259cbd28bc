from __future__ import annotations

import threading
from typing import Callable, Dict, List

from .tracker import Tracker

DEFAULT_INSTANCE = "default"


class TrackerRegistry:
    """Named trackers, each with its own API key, identity, queue and opt-out.

    Useful when one process tracks on behalf of several users or projects.
    Trackers are created unconfigured on first lookup.
    """

    def __init__(self, factory: Callable[[], Tracker] = Tracker) -> None:
        self._factory = factory
        self._instances: Dict[str, Tracker] = {}
        self._lock = threading.Lock()

    def get(self, name: str = DEFAULT_INSTANCE) -> Tracker:
        tracker = self._instances.get(name)
        if tracker is not None:
            return tracker
        with self._lock:
            tracker = self._instances.get(name)
            if tracker is None:
                tracker = self._factory()
                self._instances[name] = tracker
            return tracker

    def names(self) -> List[str]:
        with self._lock:
            return list(self._instances)

    def clear(self) -> None:
        with self._lock:
            self._instances.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._instances

    def __len__(self) -> int:
        return len(self._instances)


default_registry = TrackerRegistry()


def get_instance(name: str = DEFAULT_INSTANCE) -> Tracker:
    return default_registry.get(name)


def reset_instances() -> None:
    default_registry.clear()
