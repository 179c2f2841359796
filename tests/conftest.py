from __future__ import annotations

import pytest
from PyQt6.QtCore import QCoreApplication

from studyflow.core.engine import SessionEngine


class FakeScheduler:
    """Manual clock: ticks only when the test advances it."""

    def __init__(self) -> None:
        self.tick_callback = None
        self.delay_callback = None
        self.delay_ms: int | None = None
        self.start_count = 0

    @property
    def is_ticking(self) -> bool:
        return self.tick_callback is not None

    def start_ticking(self, callback) -> None:
        self.tick_callback = callback
        self.start_count += 1

    def stop_ticking(self) -> None:
        self.tick_callback = None

    def start_delay(self, delay_ms: int, callback) -> None:
        self.delay_ms = delay_ms
        self.delay_callback = callback

    def cancel_delay(self) -> None:
        self.delay_ms = None
        self.delay_callback = None

    def advance(self, seconds: int) -> None:
        for _ in range(seconds):
            if self.tick_callback is None:
                return
            self.tick_callback()

    def fire_delay(self) -> None:
        callback, self.delay_callback = self.delay_callback, None
        if callback is not None:
            callback()


class FakeLedger:
    def __init__(self) -> None:
        self.credited: list[int] = []

    def increment_completed_pomodoro(self, task_id: int) -> None:
        self.credited.append(task_id)


class FakeNotifier:
    def __init__(self, fail: bool = False) -> None:
        self.played = 0
        self.fail = fail

    def play_completion_sound(self) -> None:
        self.played += 1
        if self.fail:
            raise RuntimeError("no audio device")


class MemoryStore:
    def __init__(self, snapshot=None, fail_on_save: bool = False) -> None:
        self.snapshot = snapshot
        self.fail_on_save = fail_on_save
        self.load_calls = 0
        self.saved: list = []

    def load_snapshot(self):
        self.load_calls += 1
        return self.snapshot

    def save_snapshot(self, snapshot) -> None:
        if self.fail_on_save:
            raise OSError("disk full")
        self.saved.append(snapshot)
        self.snapshot = snapshot


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_engine(ledger, notifier, store, scheduler):
    def factory(**overrides) -> SessionEngine:
        return SessionEngine(
            ledger=overrides.get("ledger", ledger),
            notifier=overrides.get("notifier", notifier),
            store=overrides.get("store", store),
            scheduler=overrides.get("scheduler", scheduler),
        )

    return factory


@pytest.fixture(scope="session")
def qapp() -> QCoreApplication:
    return QCoreApplication.instance() or QCoreApplication([])
