"""Rule-based coaching feedback over recent typing history.

Every threshold here is a fixed rule, not a learned or tuned value.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple

from typecoach.core.profile import UserProfile
from typecoach.core.results import TestResult
from typecoach.core.stats import round_half_up

RECENT_WINDOW = 10
LONG_SESSION_MS = 300_000


class DifficultyAdjustment(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    MAINTAIN = "maintain"


@dataclass(frozen=True)
class AIFeedback:
    overall_score: int
    strengths: Tuple[str, ...]
    weaknesses: Tuple[str, ...]
    recommendations: Tuple[str, ...]
    next_goal: str
    difficulty_adjustment: DifficultyAdjustment


NO_DATA_FEEDBACK = AIFeedback(
    overall_score=0,
    strengths=(),
    weaknesses=("No data available yet",),
    recommendations=("Complete a few typing tests to get personalized feedback",),
    next_goal="Complete your first typing test",
    difficulty_adjustment=DifficultyAdjustment.MAINTAIN,
)

_GOALS: Tuple[Tuple[int, str], ...] = (
    (20, "Reach 20 WPM with 90% accuracy"),
    (30, "Reach 30 WPM with 92% accuracy"),
    (40, "Reach 40 WPM with 94% accuracy"),
    (50, "Join the 50 WPM club with 95% accuracy"),
    (70, "Achieve 70 WPM - you're getting fast!"),
    (100, "Break into the elite 100 WPM club"),
)
MASTERY_GOAL = "Master advanced typing techniques and maintain consistency"


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _variance(values: Sequence[float]) -> float:
    """Population variance."""
    if not values:
        return 0.0
    mean = _mean(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def _avg_wpm(results: Sequence[TestResult]) -> float:
    return _mean([r.stats.wpm for r in results])


def _avg_accuracy(results: Sequence[TestResult]) -> float:
    return _mean([r.stats.accuracy for r in results])


def overall_score(latest: TestResult) -> int:
    """Up to 40 points for speed (capped at 60 WPM) plus up to 60 for accuracy."""
    wpm_part = min(latest.stats.wpm / 60.0, 1.0) * 40
    accuracy_part = latest.stats.accuracy * 60
    return round_half_up(wpm_part + accuracy_part)


def frequent_mistakes(results: Sequence[TestResult], limit: int = 3) -> List[str]:
    """Words missed more than twice, most frequent first.

    Ties keep the order in which the words were first seen.
    """
    counts = Counter(word for r in results for word in r.incorrect_words)
    repeated = [word for word, count in counts.items() if count > 2]
    # stable sort: ties keep first-seen order
    repeated.sort(key=lambda word: -counts[word])
    return repeated[:limit]


def identify_strengths(recent: Sequence[TestResult], profile: UserProfile) -> List[str]:
    strengths: List[str] = []
    if _avg_wpm(recent) > 40:
        strengths.append("Excellent typing speed")
    if _avg_accuracy(recent) > 0.95:
        strengths.append("Outstanding accuracy")
    if profile.current_streak > 3:
        strengths.append("Great consistency with regular practice")
    if len(recent) >= 5:
        if _avg_wpm(recent[:3]) > _avg_wpm(recent[3:6]) + 2:
            strengths.append("Showing clear improvement in speed")
    return strengths


def identify_weaknesses(recent: Sequence[TestResult]) -> List[str]:
    weaknesses: List[str] = []
    if _avg_accuracy(recent) < 0.85:
        weaknesses.append("Accuracy needs improvement")
    if _avg_wpm(recent) < 25:
        weaknesses.append("Typing speed could be faster")
    mistakes = frequent_mistakes(recent)
    if mistakes:
        weaknesses.append(f"Frequent mistakes with: {', '.join(mistakes)}")
    if _variance([r.stats.wpm for r in recent]) > 100:
        weaknesses.append("Inconsistent performance between sessions")
    return weaknesses


def generate_recommendations(recent: Sequence[TestResult], profile: UserProfile) -> List[str]:
    recommendations: List[str] = []
    avg_accuracy = _avg_accuracy(recent)
    avg_wpm = _avg_wpm(recent)

    if avg_accuracy < 0.9:
        recommendations.append("Focus on accuracy first - slow down and type more carefully")
        recommendations.append("Practice common word patterns and letter combinations")
    if avg_wpm < 30:
        recommendations.append("Practice daily for 15-20 minutes to build muscle memory")
        recommendations.append("Use proper finger positioning and touch typing technique")
    if avg_wpm > 30 and avg_accuracy > 0.9:
        recommendations.append("Try longer practice sessions to build endurance")
        recommendations.append("Challenge yourself with more complex texts")

    long_sessions = [r for r in recent if r.duration_ms > LONG_SESSION_MS]
    if long_sessions and _avg_accuracy(long_sessions) < avg_accuracy - 0.05:
        recommendations.append("Work on maintaining accuracy during longer sessions")

    if profile.current_streak < 3:
        recommendations.append("Establish a daily practice routine for consistent improvement")
    return recommendations


def next_goal(best_wpm: float) -> str:
    for threshold, goal in _GOALS:
        if best_wpm < threshold:
            return goal
    return MASTERY_GOAL


def difficulty_adjustment(recent: Sequence[TestResult]) -> DifficultyAdjustment:
    if len(recent) < 3:
        return DifficultyAdjustment.MAINTAIN
    newest = recent[:3]
    avg_wpm = _avg_wpm(newest)
    avg_accuracy = _avg_accuracy(newest)
    if avg_wpm > 40 and avg_accuracy > 0.95:
        return DifficultyAdjustment.INCREASE
    if avg_wpm < 20 or avg_accuracy < 0.85:
        return DifficultyAdjustment.DECREASE
    return DifficultyAdjustment.MAINTAIN


def analyze(history: Sequence[TestResult], profile: UserProfile) -> AIFeedback:
    """Build a fresh feedback report from history (newest first) and profile."""
    if not history:
        return NO_DATA_FEEDBACK

    recent = list(history[:RECENT_WINDOW])
    return AIFeedback(
        overall_score=overall_score(recent[0]),
        strengths=tuple(identify_strengths(recent, profile)),
        weaknesses=tuple(identify_weaknesses(recent)),
        recommendations=tuple(generate_recommendations(recent, profile)),
        next_goal=next_goal(profile.best_wpm),
        difficulty_adjustment=difficulty_adjustment(recent),
    )
