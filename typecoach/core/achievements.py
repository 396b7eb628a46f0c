from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from typecoach.core.profile import UserProfile
from typecoach.core.stats import TypingStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Achievement:
    id: str
    title: str
    description: str
    icon: str
    unlocked: bool = False
    unlocked_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "unlocked": self.unlocked,
        }
        if self.unlocked_at is not None:
            data["unlocked_at"] = self.unlocked_at
        return data

    @classmethod
    def from_dict(cls, value: Dict[str, Any]) -> "Achievement":
        unlocked_at = value.get("unlocked_at")
        return cls(
            id=str(value["id"]),
            title=str(value.get("title", "")),
            description=str(value.get("description", "")),
            icon=str(value.get("icon", "")),
            unlocked=value.get("unlocked") is True,
            unlocked_at=str(unlocked_at) if unlocked_at is not None else None,
        )


Predicate = Callable[[UserProfile, TypingStats], bool]

_PREDICATES: Dict[str, Predicate] = {
    "first-test": lambda profile, stats: profile.total_tests >= 1,
    "speed-demon-50": lambda profile, stats: stats.wpm >= 50,
    "accuracy-master": lambda profile, stats: stats.accuracy >= 0.95,
    "streak-warrior": lambda profile, stats: profile.current_streak >= 7,
    "century-club": lambda profile, stats: stats.wpm >= 100,
}


def default_catalog() -> List[Achievement]:
    """The fixed catalog, all locked."""
    return [
        Achievement("first-test", "Getting Started", "Complete your first typing test", "play"),
        Achievement("speed-demon-50", "Speed Demon", "Reach 50 WPM", "zap"),
        Achievement("accuracy-master", "Accuracy Master", "Achieve 95% accuracy", "target"),
        Achievement("streak-warrior", "Streak Warrior", "Complete 7 tests in a row", "flame"),
        Achievement("century-club", "Century Club", "Reach 100 WPM", "trophy"),
    ]


def evaluate(
    catalog: Sequence[Achievement],
    profile: UserProfile,
    latest_stats: TypingStats,
    now: Optional[datetime] = None,
) -> Tuple[List[Achievement], bool]:
    """Unlock every locked achievement whose condition now holds.

    Unlocked entries are left untouched, so unlocking is one-way.
    Entries with an id outside the fixed catalog never unlock.
    Returns the new catalog and whether anything changed.
    """
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    updated: List[Achievement] = []
    changed = False
    for achievement in catalog:
        predicate = _PREDICATES.get(achievement.id)
        if not achievement.unlocked and predicate is not None and predicate(profile, latest_stats):
            achievement = replace(achievement, unlocked=True, unlocked_at=stamp)
            changed = True
            logger.info("Achievement unlocked: %s", achievement.title)
        updated.append(achievement)
    return updated, changed
