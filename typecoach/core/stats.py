from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class TypingStats:
    """Live or final statistics for a typing attempt.

    ``accuracy`` is a ratio in [0, 1], not a percentage.
    """

    wpm: int
    cpm: int
    accuracy: float
    errors: int
    time_elapsed_ms: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3, not 2)."""
    return int(math.floor(value + 0.5))


def compute_stats(target_text: str, typed_text: str, elapsed_ms: int) -> TypingStats:
    """Compute speed and accuracy of ``typed_text`` against ``target_text``.

    * **WPM** – whitespace-delimited words typed so far per minute; a
      trailing partial word counts once it has a character.
    * **CPM** – every typed character (spaces included) per minute.
    * **Accuracy** – correct / compared characters over the overlapping
      prefix. Characters typed past the end of the target are not
      compared, so they carry no accuracy penalty.

    Zero elapsed time yields 0 WPM/CPM instead of dividing by zero.
    """
    elapsed_ms = max(0, int(elapsed_ms))
    minutes = elapsed_ms / 60000.0
    word_count = len(typed_text.split())
    if minutes > 0:
        wpm = round_half_up(word_count / minutes)
        cpm = round_half_up(len(typed_text) / minutes)
    else:
        wpm = 0
        cpm = 0

    compared = min(len(typed_text), len(target_text))
    correct = sum(1 for a, b in zip(typed_text, target_text) if a == b)
    accuracy = correct / compared if compared else 1.0

    return TypingStats(
        wpm=wpm,
        cpm=cpm,
        accuracy=accuracy,
        errors=compared - correct,
        time_elapsed_ms=elapsed_ms,
    )
