from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from typecoach.core.achievements import Achievement, evaluate
from typecoach.core.coach import AIFeedback, analyze
from typecoach.core.profile import UserProfile, apply_result
from typecoach.core.progress import ProgressRepository
from typecoach.core.results import TestResult, build_test_result
from typecoach.core.session import SessionOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordOutcome:
    result: TestResult
    profile: UserProfile
    newly_unlocked: Tuple[Achievement, ...]
    feedback: AIFeedback


class PracticeRecorder:
    """Records finished sessions and keeps history, profile and achievements in sync.

    The aggregation, unlocking and analysis steps are pure functions over
    the state held here; this class is the only place that writes back to
    the repository.
    """

    def __init__(self, repository: ProgressRepository) -> None:
        self._repository = repository
        self._history = repository.load_history()
        self._profile = repository.load_profile()
        self._achievements = repository.load_achievements()

    @property
    def history(self) -> List[TestResult]:
        """Recorded results, newest first."""
        return list(self._history)

    @property
    def profile(self) -> UserProfile:
        return self._profile

    @property
    def achievements(self) -> List[Achievement]:
        return list(self._achievements)

    def feedback(self) -> Optional[AIFeedback]:
        """Analysis of the current state, or None before the first result."""
        if not self._history:
            return None
        return analyze(self._history, self._profile)

    def record(
        self,
        outcome: SessionOutcome,
        text: str,
        duration_limit_seconds: Optional[float] = None,
        mode_tag: str = "custom",
        now: Optional[datetime] = None,
    ) -> RecordOutcome:
        previous_id = self._history[0].id if self._history else None
        result = build_test_result(
            stats=outcome.stats,
            incorrect_words=outcome.incorrect_words,
            text=text,
            typed_text=outcome.typed_text,
            duration_limit_seconds=duration_limit_seconds,
            mode_tag=mode_tag,
            now=now,
            previous_id=previous_id,
        )

        self._history = [result] + self._history
        self._repository.save_history(self._history)

        self._profile = apply_result(self._profile, result)
        self._repository.save_profile(self._profile)

        before = {a.id for a in self._achievements if a.unlocked}
        self._achievements, changed = evaluate(self._achievements, self._profile, result.stats, now=now)
        newly_unlocked = tuple(a for a in self._achievements if a.unlocked and a.id not in before)
        if changed:
            self._repository.save_achievements(self._achievements)

        feedback = analyze(self._history, self._profile)
        logger.info(
            "Recorded result %s (%s): %d wpm; %d test(s) total",
            result.id,
            result.mode_tag,
            result.stats.wpm,
            self._profile.total_tests,
        )
        return RecordOutcome(
            result=result,
            profile=self._profile,
            newly_unlocked=newly_unlocked,
            feedback=feedback,
        )

    def reset(self) -> None:
        """Forget all progress, in memory and on disk."""
        self._repository.reset()
        self._history = []
        self._profile = UserProfile()
        self._achievements = self._repository.load_achievements()
