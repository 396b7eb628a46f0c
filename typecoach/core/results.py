from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence, Tuple

from typecoach.core.stats import TypingStats

MODE_TAGS = ("timed", "custom", "race")


@dataclass(frozen=True)
class TestResult:
    """One completed session as recorded in history. Never edited afterwards."""

    id: str
    timestamp: str
    duration_ms: int
    mode_tag: str
    stats: TypingStats
    text: str
    incorrect_words: Tuple[str, ...]
    completed_word_count: int
    total_word_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "duration_ms": self.duration_ms,
            "mode_tag": self.mode_tag,
            "stats": {
                "wpm": self.stats.wpm,
                "cpm": self.stats.cpm,
                "accuracy": self.stats.accuracy,
                "errors": self.stats.errors,
                "time_elapsed_ms": self.stats.time_elapsed_ms,
            },
            "text": self.text,
            "incorrect_words": list(self.incorrect_words),
            "completed_word_count": self.completed_word_count,
            "total_word_count": self.total_word_count,
        }

    @classmethod
    def from_dict(cls, value: Dict[str, Any]) -> "TestResult":
        """Rebuild from :meth:`to_dict` output.

        Raises KeyError, TypeError, ValueError or OverflowError if malformed,
        including non-finite numbers.
        """
        s = value["stats"]
        mode_tag = str(value["mode_tag"])
        if mode_tag not in MODE_TAGS:
            raise ValueError(f"unknown mode tag: {mode_tag!r}")
        accuracy = float(s["accuracy"])
        if not math.isfinite(accuracy):
            raise ValueError(f"accuracy is not a finite number: {accuracy!r}")
        return cls(
            id=str(value["id"]),
            timestamp=str(value["timestamp"]),
            duration_ms=int(value["duration_ms"]),
            mode_tag=mode_tag,
            stats=TypingStats(
                wpm=int(s["wpm"]),
                cpm=int(s["cpm"]),
                accuracy=accuracy,
                errors=int(s["errors"]),
                time_elapsed_ms=int(s["time_elapsed_ms"]),
            ),
            text=str(value["text"]),
            incorrect_words=tuple(str(w) for w in value.get("incorrect_words", [])),
            completed_word_count=int(value.get("completed_word_count", 0)),
            total_word_count=int(value.get("total_word_count", 0)),
        )


def next_result_id(now: datetime, previous_id: Optional[str] = None) -> str:
    """Millisecond-timestamp id, forced strictly above ``previous_id``."""
    candidate = int(now.timestamp() * 1000)
    if previous_id is not None and previous_id.isdigit():
        candidate = max(candidate, int(previous_id) + 1)
    return str(candidate)


def build_test_result(
    stats: TypingStats,
    incorrect_words: Sequence[str],
    text: str,
    typed_text: str,
    duration_limit_seconds: Optional[float] = None,
    mode_tag: str = "custom",
    now: Optional[datetime] = None,
    previous_id: Optional[str] = None,
) -> TestResult:
    """Assemble the history record for a finished session.

    Timed sessions record the full time limit as their duration and are
    always tagged ``'timed'``.
    """
    now = now or datetime.now(timezone.utc)
    total_words = len(text.split())
    if duration_limit_seconds:
        duration_ms = int(round(duration_limit_seconds * 1000))
        mode_tag = "timed"
    else:
        duration_ms = stats.time_elapsed_ms
        if mode_tag not in MODE_TAGS or mode_tag == "timed":
            mode_tag = "custom"
    return TestResult(
        id=next_result_id(now, previous_id),
        timestamp=now.isoformat(),
        duration_ms=duration_ms,
        mode_tag=mode_tag,
        stats=stats,
        text=text,
        incorrect_words=tuple(incorrect_words),
        completed_word_count=min(len(typed_text.split()), total_words),
        total_word_count=total_words,
    )
