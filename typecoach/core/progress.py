from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from typecoach.core.achievements import Achievement, default_catalog
from typecoach.core.profile import UserProfile
from typecoach.core.results import TestResult

logger = logging.getLogger(__name__)

HISTORY_KEY = "history"
PROFILE_KEY = "profile"
ACHIEVEMENTS_KEY = "achievements"


def default_progress_path() -> Path:
    return Path.home() / ".typecoach" / "progress.json"


class JsonFileStore:
    """String-keyed store of JSON blobs, kept in one file on disk.

    Every ``set`` rewrites the whole file. There is no locking: two
    processes writing at once can lose each other's updates.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = Path(file_path) if file_path is not None else default_progress_path()
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._data = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, blob: Any) -> None:
        self._data[key] = blob
        self._save()

    def clear(self) -> None:
        self._data = {}
        self._save()

    def _load(self) -> Dict[str, Any]:
        if not self._file_path.exists():
            return {}
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring progress file %s: expected a JSON object", self._file_path)
            return {}
        return payload

    def _save(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._file_path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)


class ProgressRepository:
    """Typed access to history, profile and achievements over a blob store.

    Anything absent or unreadable comes back as its default: empty
    history, zeroed profile, fully locked catalog.
    """

    def __init__(self, store: JsonFileStore) -> None:
        self._store = store

    def load_history(self) -> List[TestResult]:
        raw = self._store.get(HISTORY_KEY)
        if not isinstance(raw, list):
            return []
        history: List[TestResult] = []
        for item in raw:
            try:
                history.append(TestResult.from_dict(item))
            except (KeyError, TypeError, ValueError, OverflowError) as e:
                logger.warning("Skipping malformed test result: %s", e)
        return history

    def save_history(self, history: List[TestResult]) -> None:
        self._store.set(HISTORY_KEY, [r.to_dict() for r in history])

    def load_profile(self) -> UserProfile:
        raw = self._store.get(PROFILE_KEY)
        if not isinstance(raw, dict):
            return UserProfile()
        return UserProfile.from_dict(raw)

    def save_profile(self, profile: UserProfile) -> None:
        self._store.set(PROFILE_KEY, profile.to_dict())

    def load_achievements(self) -> List[Achievement]:
        raw = self._store.get(ACHIEVEMENTS_KEY)
        if not isinstance(raw, list):
            return default_catalog()
        stored: Dict[str, Achievement] = {}
        for item in raw:
            try:
                achievement = Achievement.from_dict(item)
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning("Skipping malformed achievement: %s", e)
                continue
            stored.setdefault(achievement.id, achievement)

        # every catalog entry is always present; only its unlock state is restored
        catalog: List[Achievement] = []
        for default in default_catalog():
            saved = stored.pop(default.id, None)
            if saved is not None and saved.unlocked:
                default = replace(default, unlocked=True, unlocked_at=saved.unlocked_at)
            catalog.append(default)
        catalog.extend(stored.values())
        return catalog

    def save_achievements(self, catalog: List[Achievement]) -> None:
        self._store.set(ACHIEVEMENTS_KEY, [a.to_dict() for a in catalog])

    def reset(self) -> None:
        """Forget all recorded progress."""
        self._store.clear()
