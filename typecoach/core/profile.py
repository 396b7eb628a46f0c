from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict

from typecoach.core.results import TestResult
from typecoach.core.stats import round_half_up


@dataclass(frozen=True)
class UserProfile:
    total_tests: int = 0
    best_wpm: int = 0
    average_wpm: int = 0
    best_accuracy: float = 0.0
    average_accuracy: float = 0.0
    total_words_typed: int = 0
    current_streak: int = 0
    longest_streak: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, value: Dict[str, Any]) -> "UserProfile":
        """Build from a persisted dict; missing or malformed fields keep their defaults."""
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in value:
                continue
            cast = float if f.type in ("float", float) else int
            try:
                converted = cast(value[f.name])
            except (TypeError, ValueError, OverflowError):
                continue
            if isinstance(converted, float) and not math.isfinite(converted):
                continue
            kwargs[f.name] = converted
        return cls(**kwargs)


def apply_result(profile: UserProfile, result: TestResult) -> UserProfile:
    """Fold one completed result into the running profile.

    Averages are updated incrementally (``(old * n + new) / (n + 1)``),
    never by rescanning history. The streak counts completed tests and
    never decays.
    """
    n = profile.total_tests
    total = n + 1
    wpm = result.stats.wpm
    accuracy = result.stats.accuracy
    streak = profile.current_streak + 1
    return replace(
        profile,
        total_tests=total,
        best_wpm=max(profile.best_wpm, wpm),
        best_accuracy=max(profile.best_accuracy, accuracy),
        average_wpm=round_half_up((profile.average_wpm * n + wpm) / total),
        average_accuracy=(profile.average_accuracy * n + accuracy) / total,
        total_words_typed=profile.total_words_typed + result.completed_word_count,
        current_streak=streak,
        longest_streak=max(profile.longest_streak, streak),
    )
