from __future__ import annotations

import logging
from concurrent.futures import Future
from enum import Enum
from typing import Callable, Optional

from headsetkit.errors import ReuseError
from headsetkit.reconstruction.localizer import SlamLocalizer

logger = logging.getLogger(__name__)

DoneCallback = Callable[[bool], None]


class CheckerState(Enum):
    IDLE = "idle"
    LISTENING = "listening"
    FINISHED = "finished"


class SlamChecker:
    """
    Checks whether a SLAM map can be localized.

    One attempt per checker: `try_localize_map` subscribes to the localizer's
    notifications and reports the outcome through `on_done` exactly once, unless
    `stop()` is called first. There is no timeout; callers that need one call
    `stop()` themselves.
    """

    def __init__(self, slam_localizer: SlamLocalizer | None) -> None:
        self._slam_localizer = slam_localizer
        self._on_done: Optional[DoneCallback] = None
        self._state = CheckerState.IDLE
        if self._slam_localizer is not None:
            self._slam_localizer.set_initialize_on_start(False)

    @property
    def state(self) -> CheckerState:
        return self._state

    def try_localize_map(self, map_path: str, on_done: DoneCallback | None) -> None:
        if self._slam_localizer is None:
            logger.debug("No SLAM localizer available; reporting map as not localized")
            if on_done is not None:
                on_done(False)
            return

        if self._slam_localizer.is_finished:
            raise ReuseError("SlamLocalizer was already initialized")
        if self._state is CheckerState.LISTENING:
            raise ReuseError("a localization attempt is already in progress")
        if self._state is CheckerState.FINISHED:
            raise ReuseError("SlamChecker has already reported a result")

        self._set_slam_listener()
        self._on_done = on_done
        self._state = CheckerState.LISTENING
        logger.debug(f"Loading SLAM map {map_path}")
        try:
            self._slam_localizer.load_slam_map(map_path)
        except BaseException:
            self.stop()
            raise

    def stop(self) -> None:
        """Stop listening. Idempotent; a pending callback will not fire."""
        if self._slam_localizer is not None:
            self._slam_localizer.slam_map_loading_failed.remove_listener(self._slam_not_localized)
            self._slam_localizer.slam_mapping_completed.remove_listener(self._slam_localized)
        if self._state is CheckerState.LISTENING:
            self._state = CheckerState.IDLE
            self._on_done = None

    def _set_slam_listener(self) -> None:
        assert self._slam_localizer is not None
        self._slam_localizer.slam_map_loading_failed.add_listener(self._slam_not_localized)
        self._slam_localizer.slam_mapping_completed.add_listener(self._slam_localized)

    def _slam_not_localized(self) -> None:
        self._finish(False)

    def _slam_localized(self) -> None:
        self._finish(True)

    def _finish(self, could_localize_map: bool) -> None:
        if self._state is not CheckerState.LISTENING:
            return
        on_done = self._on_done
        self.stop()
        self._state = CheckerState.FINISHED
        logger.debug(f"SLAM map localization finished: {could_localize_map}")
        if on_done is not None:
            on_done(could_localize_map)


def localize_map_future(checker: SlamChecker, map_path: str) -> Future[bool]:
    """
    Run `checker.try_localize_map` and expose the outcome as a one-shot future.

    Cancelling the future stops the checker. ReuseError is raised synchronously.
    """
    future: Future[bool] = Future()

    def _done(ok: bool) -> None:
        if future.set_running_or_notify_cancel():
            future.set_result(ok)

    def _on_cancel(f: Future) -> None:
        if f.cancelled():
            checker.stop()

    future.add_done_callback(_on_cancel)
    checker.try_localize_map(map_path, _done)
    return future
