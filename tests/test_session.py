"""Tests for typecoach.core.session – typing session state machine."""

from __future__ import annotations

from typing import List, Tuple

import pytest

from typecoach.core.session import (
    SessionState,
    TypingSession,
    find_incorrect_words,
)
from typecoach.core.stats import TypingStats


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(1000.0)


@pytest.fixture()
def completions() -> List[Tuple[TypingStats, List[str]]]:
    return []


def _session(text, clock, completions, duration=None) -> TypingSession:
    return TypingSession(
        text,
        duration_limit_seconds=duration,
        on_complete=lambda stats, words: completions.append((stats, words)),
        clock=clock,
    )


# ---------------------------------------------------------------------------
# find_incorrect_words
# ---------------------------------------------------------------------------

class TestFindIncorrectWords:
    def test_all_correct(self):
        assert find_incorrect_words("the cat sat", "the cat sat") == []

    def test_both_wrong(self):
        assert find_incorrect_words("aple banan", "apple banana") == ["apple", "banana"]

    def test_shorter_input_only_compares_typed_words(self):
        assert find_incorrect_words("the dog", "the cat sat") == ["cat"]

    def test_extra_typed_words_ignored(self):
        assert find_incorrect_words("the cat sat down", "the cat sat") == []

    def test_empty_input(self):
        assert find_incorrect_words("", "the cat") == []


# ---------------------------------------------------------------------------
# Fresh session
# ---------------------------------------------------------------------------

class TestFreshSession:
    def test_initial_state(self, clock, completions):
        s = _session("the cat sat", clock, completions)
        assert s.state is SessionState.NOT_STARTED
        assert s.started_at is None
        assert s.current_input == ""
        assert not s.is_complete
        assert s.stats.accuracy == 1.0
        assert s.stats.wpm == 0

    def test_untimed_has_no_time_left(self, clock, completions):
        s = _session("abc", clock, completions)
        assert s.time_left is None
        assert not s.countdown_active

    def test_timed_shows_full_time(self, clock, completions):
        s = _session("abc", clock, completions, duration=60)
        assert s.time_left == 60
        assert not s.countdown_active

    def test_word_list(self, clock, completions):
        s = _session("the cat  sat", clock, completions)
        assert s.word_list == ["the", "cat", "sat"]


# ---------------------------------------------------------------------------
# on_input_change
# ---------------------------------------------------------------------------

class TestInputChange:
    def test_first_keystroke_starts_session(self, clock, completions):
        s = _session("the cat sat", clock, completions)
        s.on_input_change("t")
        assert s.state is SessionState.RUNNING
        assert s.started_at == 1000.0

    def test_started_at_set_once(self, clock, completions):
        s = _session("the cat sat", clock, completions)
        s.on_input_change("t")
        clock.now = 5000.0
        s.on_input_change("th")
        assert s.started_at == 1000.0

    def test_empty_input_does_not_start(self, clock, completions):
        s = _session("the cat sat", clock, completions)
        s.on_input_change("")
        assert s.state is SessionState.NOT_STARTED
        assert s.started_at is None

    def test_stats_use_elapsed_since_first_keystroke(self, clock, completions):
        s = _session("the cat sat down", clock, completions)
        s.on_input_change("t")
        clock.now = 61000.0
        s.on_input_change("the cat")
        assert s.stats.time_elapsed_ms == 60000
        assert s.stats.wpm == 2

    def test_explicit_now_overrides_clock(self, clock, completions):
        s = _session("the cat", clock, completions)
        s.on_input_change("t", now=0.0)
        s.on_input_change("the", now=60000.0)
        assert s.stats.wpm == 1

    def test_exact_match_completes(self, clock, completions):
        s = _session("the cat sat", clock, completions)
        s.on_input_change("t")
        clock.now = 31000.0
        outcome = s.on_input_change("the cat sat")
        assert outcome is not None
        assert s.is_complete
        assert outcome.stats.wpm == 6
        assert outcome.stats.accuracy == 1.0
        assert outcome.stats.errors == 0
        assert outcome.incorrect_words == ()
        assert not outcome.forced
        assert completions == [(outcome.stats, [])]

    def test_match_ignores_surrounding_whitespace(self, clock, completions):
        s = _session("the cat", clock, completions)
        s.on_input_change("the cat ")
        assert s.is_complete

    def test_input_after_completion_ignored(self, clock, completions):
        s = _session("ab", clock, completions)
        s.on_input_change("ab")
        assert s.on_input_change("abc") is None
        assert s.current_input == "ab"
        assert len(completions) == 1


# ---------------------------------------------------------------------------
# Word index projections
# ---------------------------------------------------------------------------

class TestWordIndex:
    @pytest.mark.parametrize(
        "typed, expected",
        [("", 0), ("th", 0), ("the ca", 1), ("the cat ", 1), ("the cat s", 2)],
    )
    def test_current_word_index(self, clock, completions, typed: str, expected: int):
        s = _session("the cat sat down", clock, completions)
        s.on_input_change(typed)
        assert s.current_word_index == expected

    def test_view(self, clock, completions):
        s = _session("the cat", clock, completions, duration=30)
        s.on_input_change("the")
        v = s.view()
        assert v.current_input == "the"
        assert v.word_list == ("the", "cat")
        assert v.current_word_index == 0
        assert v.time_left == 30
        assert not v.is_complete


# ---------------------------------------------------------------------------
# tick – countdown
# ---------------------------------------------------------------------------

class TestTick:
    def test_tick_before_start_changes_nothing(self, clock, completions):
        s = _session("abc", clock, completions, duration=60)
        result = s.tick()
        assert not result.force_completed
        assert result.time_left == 60
        assert s.state is SessionState.NOT_STARTED

    def test_tick_untimed_changes_nothing(self, clock, completions):
        s = _session("abc", clock, completions)
        s.on_input_change("a")
        result = s.tick(now=10**9)
        assert not result.force_completed
        assert result.time_left is None
        assert not s.is_complete

    def test_tick_updates_time_left_and_stats(self, clock, completions):
        s = _session("the cat sat", clock, completions, duration=60)
        s.on_input_change("the", now=0.0)
        result = s.tick(now=30000.0)
        assert result.time_left == 30
        assert s.time_left == 30
        assert s.stats.wpm == 2

    def test_time_left_rounds_up(self, clock, completions):
        s = _session("abc", clock, completions, duration=60)
        s.on_input_change("a", now=0.0)
        assert s.tick(now=100.0).time_left == 60
        assert s.tick(now=59999.0).time_left == 1

    def test_forced_completion_exactly_once(self, clock, completions):
        s = _session("the cat sat", clock, completions, duration=60)
        s.on_input_change("the", now=0.0)
        assert not s.tick(now=59999.0).force_completed
        result = s.tick(now=60000.0)
        assert result.force_completed
        assert result.time_left == 0
        assert s.is_complete
        assert not s.countdown_active
        later = s.tick(now=60100.0)
        assert not later.force_completed
        assert len(completions) == 1

    def test_forced_completion_uses_frozen_input(self, clock, completions):
        s = _session("apple banana", clock, completions, duration=60)
        s.on_input_change("aple", now=0.0)
        s.on_input_change("aple banan", now=20000.0)
        result = s.tick(now=65000.0)
        outcome = result.completion
        assert outcome.forced
        assert outcome.typed_text == "aple banan"
        assert outcome.incorrect_words == ("apple", "banana")
        assert outcome.stats.time_elapsed_ms == 60000
        assert completions[0][1] == ["apple", "banana"]

    def test_completion_by_match_stops_countdown(self, clock, completions):
        s = _session("ab", clock, completions, duration=60)
        s.on_input_change("ab", now=0.0)
        assert s.is_complete
        assert not s.countdown_active
        assert not s.tick(now=70000.0).force_completed
        assert len(completions) == 1

    def test_input_after_deadline_completes_with_earlier_input(self, clock, completions):
        s = _session("the cat", clock, completions, duration=1)
        s.on_input_change("the", now=0.0)
        outcome = s.on_input_change("the cat", now=1050.0)
        assert outcome is not None
        assert outcome.forced
        assert outcome.typed_text == "the"
        assert outcome.stats.time_elapsed_ms == 1000
        assert s.current_input == "the"
        assert s.time_left == 0
        assert not s.countdown_active
        assert not s.tick(now=1100.0).force_completed
        assert len(completions) == 1

    def test_input_at_deadline_is_too_late(self, clock, completions):
        s = _session("ab", clock, completions, duration=1)
        s.on_input_change("a", now=0.0)
        outcome = s.on_input_change("ab", now=1000.0)
        assert outcome.forced
        assert outcome.typed_text == "a"


# ---------------------------------------------------------------------------
# reset
# ---------------------------------------------------------------------------

class TestReset:
    def test_reset_mid_run(self, clock, completions):
        s = _session("the cat", clock, completions, duration=60)
        s.on_input_change("the", now=0.0)
        s.reset()
        assert s.state is SessionState.NOT_STARTED
        assert s.current_input == ""
        assert s.started_at is None
        assert s.time_left == 60
        assert not s.countdown_active

    def test_stale_tick_after_reset_does_nothing(self, clock, completions):
        s = _session("the cat", clock, completions, duration=60)
        s.on_input_change("the", now=0.0)
        s.reset()
        result = s.tick(now=120000.0)
        assert not result.force_completed
        assert completions == []

    def test_reset_after_completion_allows_retry(self, clock, completions):
        s = _session("ab", clock, completions)
        s.on_input_change("ab")
        s.reset()
        assert not s.is_complete
        assert s.incorrect_words == []
        s.on_input_change("ab")
        assert s.is_complete
        assert len(completions) == 2

    def test_reset_then_empty_input_matches_fresh_session(self, clock, completions):
        used = _session("the cat", clock, completions, duration=30)
        used.on_input_change("th")
        used.reset()
        used.on_input_change("")
        fresh = _session("the cat", clock, completions, duration=30)
        fresh.on_input_change("")
        assert used.view() == fresh.view()
        assert used.state is fresh.state
