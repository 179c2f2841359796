from __future__ import annotations

from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QTimer


TICK_INTERVAL_MS = 1000


class TickScheduler(Protocol):
    @property
    def is_ticking(self) -> bool: ...

    def start_ticking(self, callback: Callable[[], None]) -> None: ...

    def stop_ticking(self) -> None: ...

    def start_delay(self, delay_ms: int, callback: Callable[[], None]) -> None: ...

    def cancel_delay(self) -> None: ...


class QtTickScheduler(QObject):
    """One repeating 1 s timer plus one single-shot delay, both owned by this object."""

    def __init__(self, parent: QObject | None = None, interval_ms: int = TICK_INTERVAL_MS) -> None:
        super().__init__(parent)
        self._tick_callback: Callable[[], None] | None = None
        self._delay_callback: Callable[[], None] | None = None

        self._ticker = QTimer(self)
        self._ticker.setInterval(interval_ms)
        self._ticker.timeout.connect(self._on_tick)

        self._delay = QTimer(self)
        self._delay.setSingleShot(True)
        self._delay.timeout.connect(self._on_delay)

    @property
    def is_ticking(self) -> bool:
        return self._ticker.isActive()

    @property
    def has_pending_delay(self) -> bool:
        return self._delay.isActive()

    def start_ticking(self, callback: Callable[[], None]) -> None:
        self._tick_callback = callback
        if not self._ticker.isActive():
            self._ticker.start()

    def stop_ticking(self) -> None:
        self._ticker.stop()
        self._tick_callback = None

    def start_delay(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self._delay_callback = callback
        self._delay.start(delay_ms)

    def cancel_delay(self) -> None:
        self._delay.stop()
        self._delay_callback = None

    def _on_tick(self) -> None:
        if self._tick_callback is not None:
            self._tick_callback()

    def _on_delay(self) -> None:
        callback, self._delay_callback = self._delay_callback, None
        if callback is not None:
            callback()
