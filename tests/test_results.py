"""Tests for typecoach.core.results – history records."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from typecoach.core import results
from typecoach.core.results import build_test_result, next_result_id
from typecoach.core.stats import TypingStats

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
NOW_MS = int(NOW.timestamp() * 1000)


def _stats(elapsed: int = 45000) -> TypingStats:
    return TypingStats(wpm=40, cpm=200, accuracy=0.97, errors=2, time_elapsed_ms=elapsed)


# ---------------------------------------------------------------------------
# next_result_id
# ---------------------------------------------------------------------------

class TestNextResultId:
    def test_timestamp_based(self):
        assert next_result_id(NOW) == str(NOW_MS)

    def test_bumped_above_previous(self):
        assert next_result_id(NOW, previous_id=str(NOW_MS)) == str(NOW_MS + 1)

    def test_older_previous_ignored(self):
        assert next_result_id(NOW, previous_id="5") == str(NOW_MS)


# ---------------------------------------------------------------------------
# build_test_result
# ---------------------------------------------------------------------------

class TestBuildTestResult:
    def test_timed_session(self):
        r = build_test_result(
            _stats(), ["cat"], "the cat sat", "the cot sat",
            duration_limit_seconds=60, mode_tag="custom", now=NOW,
        )
        assert r.mode_tag == "timed"
        assert r.duration_ms == 60000
        assert r.timestamp == NOW.isoformat()
        assert r.incorrect_words == ("cat",)

    def test_untimed_uses_elapsed(self):
        r = build_test_result(_stats(12345), [], "the cat", "the cat", now=NOW)
        assert r.mode_tag == "custom"
        assert r.duration_ms == 12345

    def test_race_tag_kept(self):
        r = build_test_result(_stats(), [], "a b", "a b", mode_tag="race", now=NOW)
        assert r.mode_tag == "race"

    def test_untimed_timed_tag_falls_back(self):
        r = build_test_result(_stats(), [], "a b", "a b", mode_tag="timed", now=NOW)
        assert r.mode_tag == "custom"

    def test_word_counts(self):
        r = build_test_result(_stats(), [], "one two three four", "one two", now=NOW)
        assert r.total_word_count == 4
        assert r.completed_word_count == 2

    def test_completed_words_capped_at_total(self):
        r = build_test_result(_stats(), [], "one two", "one two three", now=NOW)
        assert r.completed_word_count == 2


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------

class TestSerialisation:
    def test_from_dict_restores(self):
        r = build_test_result(_stats(), ["sat"], "the cat sat", "the cat sit", now=NOW)
        assert results.TestResult.from_dict(r.to_dict()) == r

    def test_unknown_mode_tag(self):
        data = build_test_result(_stats(), [], "a", "a", now=NOW).to_dict()
        data["mode_tag"] = "marathon"
        with pytest.raises(ValueError):
            results.TestResult.from_dict(data)

    def test_missing_stats(self):
        data = build_test_result(_stats(), [], "a", "a", now=NOW).to_dict()
        del data["stats"]
        with pytest.raises(KeyError):
            results.TestResult.from_dict(data)

    @pytest.mark.parametrize(
        "value, error",
        [(float("inf"), OverflowError), (float("nan"), ValueError)],
    )
    def test_non_finite_duration(self, value, error):
        data = build_test_result(_stats(), [], "a", "a", now=NOW).to_dict()
        data["duration_ms"] = value
        with pytest.raises(error):
            results.TestResult.from_dict(data)

    def test_non_finite_accuracy(self):
        data = build_test_result(_stats(), [], "a", "a", now=NOW).to_dict()
        data["stats"]["accuracy"] = float("nan")
        with pytest.raises(ValueError):
            results.TestResult.from_dict(data)
