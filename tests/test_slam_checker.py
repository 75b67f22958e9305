from __future__ import annotations

import pytest

from headsetkit.errors import ReuseError
from headsetkit.reconstruction import CheckerState, Signal, SlamChecker, localize_map_future


class FakeSlamLocalizer:
    """Localizer whose outcome is triggered by the test."""

    def __init__(self, *, is_finished: bool = False, outcome: bool | None = None) -> None:
        self.slam_map_loading_failed = Signal()
        self.slam_mapping_completed = Signal()
        self.initialize_on_start = True
        self.loaded_paths: list[str] = []
        self._is_finished = is_finished
        self._outcome = outcome

    @property
    def is_finished(self) -> bool:
        return self._is_finished

    def set_initialize_on_start(self, value: bool) -> None:
        self.initialize_on_start = value

    def load_slam_map(self, path: str) -> None:
        self.loaded_paths.append(path)
        if self._outcome is not None:
            self.complete(self._outcome)

    def complete(self, ok: bool) -> None:
        self._is_finished = True
        if ok:
            self.slam_mapping_completed.emit()
        else:
            self.slam_map_loading_failed.emit()

    def listener_count(self) -> int:
        return self.slam_map_loading_failed.listener_count + self.slam_mapping_completed.listener_count


def test_constructor_disables_initialize_on_start() -> None:
    localizer = FakeSlamLocalizer()
    SlamChecker(localizer)
    assert localizer.initialize_on_start is False


def test_without_localizer_reports_false_synchronously() -> None:
    results: list[bool] = []
    checker = SlamChecker(None)
    checker.try_localize_map("maps/office.slam", results.append)
    assert results == [False]
    assert checker.state is CheckerState.IDLE
    checker.stop()
    checker.try_localize_map("maps/office.slam", None)


def test_mapping_completed_reports_true_once() -> None:
    localizer = FakeSlamLocalizer()
    results: list[bool] = []
    checker = SlamChecker(localizer)

    checker.try_localize_map("maps/office.slam", results.append)
    assert checker.state is CheckerState.LISTENING
    assert localizer.loaded_paths == ["maps/office.slam"]
    assert localizer.listener_count() == 2

    localizer.complete(True)
    assert results == [True]
    assert checker.state is CheckerState.FINISHED
    assert localizer.listener_count() == 0

    checker.stop()
    localizer.slam_mapping_completed.emit()
    assert results == [True]


def test_map_loading_failed_reports_false() -> None:
    localizer = FakeSlamLocalizer()
    results: list[bool] = []
    SlamChecker(localizer).try_localize_map("maps/lab.slam", results.append)
    localizer.complete(False)
    assert results == [False]


def test_synchronous_notification_from_load_is_delivered() -> None:
    localizer = FakeSlamLocalizer(outcome=True)
    results: list[bool] = []
    SlamChecker(localizer).try_localize_map("maps/lab.slam", results.append)
    assert results == [True]
    assert localizer.listener_count() == 0


def test_finished_localizer_raises_reuse_error() -> None:
    localizer = FakeSlamLocalizer()
    checker = SlamChecker(localizer)
    checker.try_localize_map("maps/lab.slam", lambda ok: None)
    localizer.complete(True)

    with pytest.raises(ReuseError):
        checker.try_localize_map("maps/lab.slam", lambda ok: None)
    with pytest.raises(ReuseError):
        SlamChecker(FakeSlamLocalizer(is_finished=True)).try_localize_map("maps/lab.slam", lambda ok: None)


def test_second_attempt_while_listening_raises_reuse_error() -> None:
    localizer = FakeSlamLocalizer()
    checker = SlamChecker(localizer)
    checker.try_localize_map("maps/lab.slam", lambda ok: None)
    with pytest.raises(ReuseError):
        checker.try_localize_map("maps/office.slam", lambda ok: None)
    assert localizer.loaded_paths == ["maps/lab.slam"]


def test_stop_cancels_pending_attempt() -> None:
    localizer = FakeSlamLocalizer()
    results: list[bool] = []
    checker = SlamChecker(localizer)
    checker.try_localize_map("maps/lab.slam", results.append)

    checker.stop()
    checker.stop()
    assert localizer.listener_count() == 0
    assert checker.state is CheckerState.IDLE

    localizer.complete(True)
    assert results == []


def test_stop_from_inside_another_listener() -> None:
    localizer = FakeSlamLocalizer()
    results: list[bool] = []
    checker = SlamChecker(localizer)
    localizer.slam_mapping_completed.add_listener(checker.stop)
    checker.try_localize_map("maps/lab.slam", results.append)

    localizer.complete(True)
    assert results == []
    assert localizer.slam_mapping_completed.listener_count == 1


def test_stop_is_safe_before_any_attempt() -> None:
    checker = SlamChecker(FakeSlamLocalizer())
    checker.stop()
    assert checker.state is CheckerState.IDLE


def test_localize_map_future_resolves() -> None:
    localizer = FakeSlamLocalizer()
    future = localize_map_future(SlamChecker(localizer), "maps/lab.slam")
    assert not future.done()
    localizer.complete(False)
    assert future.result(timeout=0) is False


def test_localize_map_future_without_localizer() -> None:
    assert localize_map_future(SlamChecker(None), "maps/lab.slam").result(timeout=0) is False


def test_cancelling_future_stops_checker() -> None:
    localizer = FakeSlamLocalizer()
    checker = SlamChecker(localizer)
    future = localize_map_future(checker, "maps/lab.slam")

    assert future.cancel()
    assert checker.state is CheckerState.IDLE
    assert localizer.listener_count() == 0
    localizer.complete(True)
    assert future.cancelled()


class MissingMapLocalizer(FakeSlamLocalizer):
    def load_slam_map(self, path: str) -> None:
        raise FileNotFoundError(path)


def test_failed_load_releases_listeners_and_allows_retry() -> None:
    localizer = MissingMapLocalizer()
    results: list[bool] = []
    checker = SlamChecker(localizer)

    with pytest.raises(FileNotFoundError):
        checker.try_localize_map("maps/missing.slam", results.append)
    assert checker.state is CheckerState.IDLE
    assert localizer.listener_count() == 0

    with pytest.raises(FileNotFoundError):
        checker.try_localize_map("maps/missing.slam", results.append)
    assert results == []
