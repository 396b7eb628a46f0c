"""Qt glue that schedules countdown ticks for a typing session."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from typecoach.core.countdown import TICK_INTERVAL_MS
from typecoach.core.session import SessionOutcome, SessionView, TypingSession


class SessionController(QObject):
    """Drives a :class:`TypingSession` from input events and a ``QTimer``.

    The timer runs only while a duration-bound session is running. It is
    stopped before ``completed`` is emitted and inside :meth:`reset`, so a
    stale tick can never finish a session that has been replaced.
    """

    statsChanged = Signal(object)  # SessionView
    timeLeftChanged = Signal(int)
    completed = Signal(object)  # SessionOutcome

    def __init__(
        self,
        text: str,
        duration: Optional[float] = None,
        parent: Optional[QObject] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        super().__init__(parent)
        self._session = TypingSession(text, duration_limit_seconds=duration, clock=clock)

        self._tick_timer = QTimer(self)
        self._tick_timer.setInterval(TICK_INTERVAL_MS)
        self._tick_timer.timeout.connect(self._on_tick)

    @property
    def session(self) -> TypingSession:
        return self._session

    @property
    def ticking(self) -> bool:
        return self._tick_timer.isActive()

    def view(self) -> SessionView:
        return self._session.view()

    def on_input_change(self, text: str) -> None:
        outcome = self._session.on_input_change(text)
        if outcome is not None:
            if outcome.forced:
                self.timeLeftChanged.emit(0)
            self._finish(outcome)
            return
        if self._session.countdown_active and not self._tick_timer.isActive():
            self._tick_timer.start()
        self.statsChanged.emit(self._session.view())

    def reset(self) -> None:
        self._tick_timer.stop()
        self._session.reset()
        self.statsChanged.emit(self._session.view())
        if self._session.time_left is not None:
            self.timeLeftChanged.emit(self._session.time_left)

    def _on_tick(self) -> None:
        result = self._session.tick()
        if result.time_left is not None:
            self.timeLeftChanged.emit(result.time_left)
        if result.force_completed:
            self._finish(result.completion)
            return
        self.statsChanged.emit(self._session.view())

    def _finish(self, outcome: SessionOutcome) -> None:
        self._tick_timer.stop()
        self.statsChanged.emit(self._session.view())
        self.completed.emit(outcome)
