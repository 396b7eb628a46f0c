from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from typecoach.core.results import MODE_TAGS
from typecoach.core.texts import DIFFICULTIES, TextRepository, default_data_dir


@dataclass(frozen=True)
class TestMode:
    """A selectable kind of practice: fixed duration or fixed word count."""

    id: str
    name: str
    description: str
    difficulty: str
    duration: Optional[int] = None
    word_count: Optional[int] = None
    tag: str = "custom"

    def build_text(self, texts: TextRepository) -> str:
        if self.word_count:
            return texts.get_custom_text(self.word_count, self.difficulty)
        return texts.get_text(self.difficulty)


class ModeRepository:
    def __init__(self, data_file: Optional[Path] = None) -> None:
        self._data_file = Path(data_file) if data_file is not None else default_data_dir() / "modes.yaml"
        self._modes = self._load_modes()

    def all(self) -> List[TestMode]:
        return list(self._modes.values())

    def get(self, mode_id: str) -> TestMode:
        return self._modes[mode_id]

    def _load_modes(self) -> Dict[str, TestMode]:
        if not self._data_file.exists():
            raise FileNotFoundError(f"Test modes file not found: {self._data_file}")
        raw = yaml.safe_load(self._data_file.read_text(encoding="utf-8"))
        name = self._data_file.name
        if not raw or not isinstance(raw, list):
            raise ValueError(f"{name}: expected a list of modes")

        modes: Dict[str, TestMode] = {}
        for entry in raw:
            if not isinstance(entry, dict):
                raise ValueError(f"{name}: each mode must be a mapping")
            mode_id = entry.get("id")
            title = entry.get("name")
            if not mode_id or not isinstance(mode_id, str):
                raise ValueError(f"{name}: mode missing or invalid 'id'")
            if not title or not isinstance(title, str):
                raise ValueError(f"{name}: mode '{mode_id}' missing or invalid 'name'")
            difficulty = entry.get("difficulty", "easy")
            if difficulty not in DIFFICULTIES:
                raise ValueError(f"{name}: mode '{mode_id}' has unknown difficulty {difficulty!r}")
            duration = entry.get("duration")
            word_count = entry.get("word_count")
            if not duration and not word_count:
                raise ValueError(f"{name}: mode '{mode_id}' needs 'duration' or 'word_count'")
            tag = entry.get("tag", "timed" if duration else "custom")
            if tag not in MODE_TAGS:
                raise ValueError(f"{name}: mode '{mode_id}' has unknown tag {tag!r}")
            modes[mode_id] = TestMode(
                id=mode_id,
                name=title.strip(),
                description=str(entry.get("description", "")).strip(),
                difficulty=difficulty,
                duration=int(duration) if duration else None,
                word_count=int(word_count) if word_count else None,
                tag=tag,
            )
        return modes
