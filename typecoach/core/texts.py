from __future__ import annotations

import random
from pathlib import Path
from typing import Dict, List, Optional

import yaml

DIFFICULTIES = ("easy", "medium", "hard")


def default_data_dir() -> Path:
    return Path(__file__).resolve().parent.parent / "data"


class TextRepository:
    """Sample passages grouped by difficulty, loaded from ``texts.yaml``."""

    def __init__(self, data_file: Optional[Path] = None, rng: Optional[random.Random] = None) -> None:
        self._data_file = Path(data_file) if data_file is not None else default_data_dir() / "texts.yaml"
        self._rng = rng or random.Random()
        self._samples = self._load_samples()

    def get_text(self, difficulty: str) -> str:
        """Pick one passage of the given difficulty at random."""
        return self._rng.choice(self._samples[difficulty])

    def get_custom_text(self, word_count: int, difficulty: str) -> str:
        """A passage cut or cyclically repeated to exactly ``word_count`` words."""
        if word_count < 1:
            raise ValueError(f"word_count must be positive, got {word_count}")
        words = self.get_text(difficulty).split()
        repeated: List[str] = []
        while len(repeated) < word_count:
            repeated.extend(words)
        return " ".join(repeated[:word_count])

    def _load_samples(self) -> Dict[str, List[str]]:
        if not self._data_file.exists():
            raise FileNotFoundError(f"Text samples file not found: {self._data_file}")
        raw = yaml.safe_load(self._data_file.read_text(encoding="utf-8"))
        name = self._data_file.name
        if not raw or not isinstance(raw, dict):
            raise ValueError(f"{name}: expected a mapping of difficulty to passages")

        samples: Dict[str, List[str]] = {}
        for difficulty, passages in raw.items():
            if difficulty not in DIFFICULTIES:
                raise ValueError(f"{name}: unknown difficulty {difficulty!r}")
            if not isinstance(passages, list):
                raise ValueError(f"{name}: '{difficulty}' must be a list of passages")
            cleaned = [" ".join(str(p).split()) for p in passages if str(p).strip()]
            if not cleaned:
                raise ValueError(f"{name}: '{difficulty}' has no passages")
            samples[difficulty] = cleaned
        return samples
