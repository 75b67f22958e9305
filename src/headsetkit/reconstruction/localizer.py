from __future__ import annotations

from typing import Callable, Protocol

Listener = Callable[[], None]


class Signal:
    """
    Zero-argument notification channel.

    Listeners are called in subscription order. `emit` works on a snapshot, so a
    listener may remove itself (or others) while being notified.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        # Removing a listener that is not subscribed is a no-op.
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self) -> None:
        for listener in list(self._listeners):
            listener()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)


class SlamLocalizer(Protocol):
    """Localization engine that loads a SLAM map and reports whether it matched."""

    slam_map_loading_failed: Signal
    slam_mapping_completed: Signal

    @property
    def is_finished(self) -> bool:
        """True once the localizer has completed a previous attempt."""

    def set_initialize_on_start(self, value: bool) -> None:
        ...

    def load_slam_map(self, path: str) -> None:
        ...
