from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from typecoach.core.countdown import Countdown
from typecoach.core.stats import TypingStats, compute_stats

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[TypingStats, List[str]], None]


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class SessionState(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SessionOutcome:
    """Final stats of a completed attempt, plus the input they were scored on."""

    stats: TypingStats
    incorrect_words: Tuple[str, ...]
    typed_text: str
    forced: bool = False


@dataclass(frozen=True)
class TickOutcome:
    """Result of one countdown tick.

    ``completion`` is set only on the tick that forced the session to end.
    """

    time_left: Optional[int]
    completion: Optional[SessionOutcome] = None

    @property
    def force_completed(self) -> bool:
        return self.completion is not None


@dataclass(frozen=True)
class SessionView:
    """Read-only projection consumed by the presentation layer."""

    current_input: str
    stats: TypingStats
    is_complete: bool
    time_left: Optional[int]
    word_list: Tuple[str, ...]
    current_word_index: int


def find_incorrect_words(typed_text: str, target_text: str) -> List[str]:
    """Return target words whose positional typed token differs.

    Only indices present in both token sequences are compared.
    """
    target_words = target_text.split()
    return [
        target_words[i]
        for i, typed_word in enumerate(typed_text.split())
        if i < len(target_words) and typed_word != target_words[i]
    ]


class TypingSession:
    """One attempt at typing a target text.

    States move ``NOT_STARTED -> RUNNING -> COMPLETED`` and never leave
    ``COMPLETED``; :meth:`reset` starts over from scratch. A session ends
    when the trimmed input equals the trimmed target, or, for
    duration-bound sessions, when :meth:`tick` finds the countdown has run
    out. Ticks are not scheduled here: the caller polls :meth:`tick`.
    """

    def __init__(
        self,
        target_text: str,
        duration_limit_seconds: Optional[float] = None,
        on_complete: Optional[CompletionCallback] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._target_text = target_text
        self._duration_limit_seconds = duration_limit_seconds
        self._on_complete = on_complete
        self._clock = clock or _monotonic_ms
        self._init_state()

    def _init_state(self) -> None:
        self._typed = ""
        self._started_at: Optional[float] = None
        self._state = SessionState.NOT_STARTED
        self._stats = compute_stats(self._target_text, "", 0)
        self._incorrect_words: List[str] = []
        self._countdown: Optional[Countdown] = None
        self._time_left: Optional[int] = None
        if self._duration_limit_seconds:
            self._countdown = Countdown(self._duration_limit_seconds)
            self._time_left = self._countdown.seconds_left(0)

    # -- read-only projections ---------------------------------------------

    @property
    def target_text(self) -> str:
        return self._target_text

    @property
    def duration_limit_seconds(self) -> Optional[float]:
        return self._duration_limit_seconds

    @property
    def current_input(self) -> str:
        return self._typed

    @property
    def started_at(self) -> Optional[float]:
        """Clock reading of the first keystroke, or None before it."""
        return self._started_at

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_complete(self) -> bool:
        return self._state is SessionState.COMPLETED

    @property
    def stats(self) -> TypingStats:
        return self._stats

    @property
    def time_left(self) -> Optional[int]:
        """Whole seconds left for duration-bound sessions, else None."""
        return self._time_left

    @property
    def incorrect_words(self) -> List[str]:
        return list(self._incorrect_words)

    @property
    def countdown_active(self) -> bool:
        return self._countdown is not None and self._countdown.active

    @property
    def word_list(self) -> List[str]:
        return self._target_text.split()

    @property
    def current_word_index(self) -> int:
        return max(len(self._typed.split()) - 1, 0)

    def view(self) -> SessionView:
        return SessionView(
            current_input=self._typed,
            stats=self._stats,
            is_complete=self.is_complete,
            time_left=self._time_left,
            word_list=tuple(self.word_list),
            current_word_index=self.current_word_index,
        )

    # -- transitions --------------------------------------------------------

    def on_input_change(self, text: str, now: Optional[float] = None) -> Optional[SessionOutcome]:
        """Record the new input and refresh live stats.

        Returns the outcome if this input completed the session. Input
        arriving once a countdown has run out is discarded: the session is
        completed with the input held before it, as a tick would have done.
        """
        if self._state is SessionState.COMPLETED:
            return None
        now = self._clock() if now is None else now
        if self._state is SessionState.NOT_STARTED:
            if not text:
                return None
            self._state = SessionState.RUNNING
            self._started_at = now
            if self._countdown is not None:
                self._countdown.start(now)
            logger.debug("Session started")
        elif self._countdown is not None and self._countdown.expired(now):
            return self._complete(self._typed, self._countdown.limit_ms, forced=True)

        self._typed = text
        elapsed = int(now - self._started_at)
        self._stats = compute_stats(self._target_text, text, elapsed)

        if text.strip() == self._target_text.strip():
            return self._complete(text, elapsed, forced=False)
        return None

    def tick(self, now: Optional[float] = None) -> TickOutcome:
        """Advance the countdown.

        Refreshes live stats and remaining time. When the remaining time
        reaches zero the session is completed with the input as it stands
        now. Ticks after completion or reset change nothing.
        """
        if self._state is not SessionState.RUNNING or not self.countdown_active:
            return TickOutcome(time_left=self._time_left)
        now = self._clock() if now is None else now
        countdown = self._countdown
        self._time_left = countdown.seconds_left(now)
        if countdown.expired(now):
            frozen = self._typed
            outcome = self._complete(frozen, countdown.limit_ms, forced=True)
            return TickOutcome(time_left=0, completion=outcome)
        self._stats = compute_stats(self._target_text, self._typed, int(now - self._started_at))
        return TickOutcome(time_left=self._time_left)

    def reset(self) -> None:
        """Discard everything and return to ``NOT_STARTED``."""
        if self._countdown is not None:
            self._countdown.cancel()
        self._init_state()

    def _complete(self, final_input: str, elapsed_ms: int, forced: bool) -> SessionOutcome:
        if self._countdown is not None:
            self._countdown.cancel()
        final_stats = compute_stats(self._target_text, final_input, elapsed_ms)
        wrong = find_incorrect_words(final_input, self._target_text)
        self._stats = final_stats
        self._incorrect_words = wrong
        self._state = SessionState.COMPLETED
        if forced:
            self._time_left = 0
        outcome = SessionOutcome(
            stats=final_stats,
            incorrect_words=tuple(wrong),
            typed_text=final_input,
            forced=forced,
        )
        logger.info(
            "Session completed%s: %d wpm, %.0f%% accuracy, %d incorrect word(s)",
            " (time up)" if forced else "",
            final_stats.wpm,
            final_stats.accuracy * 100,
            len(wrong),
        )
        if self._on_complete is not None:
            self._on_complete(final_stats, list(wrong))
        return outcome
