"""Persistence of the last selected model."""

import sys
from pathlib import Path
from typing import Optional

from .config import MODEL_PREFERENCE_FILE


class ModelPreferenceStore:
    """Single-value store backed by a small text file. Last write wins."""

    def __init__(self, path: Path = MODEL_PREFERENCE_FILE) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[str]:
        try:
            if not self._path.is_file():
                return None
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None
        lines = text.splitlines()
        model = lines[0].strip() if lines else ""
        return model or None

    def save(self, model: str) -> bool:
        try:
            self._path.write_text(model + "\n", encoding="utf-8")
        except OSError as exc:
            print(f"[prefs] Could not save model preference: {exc}", file=sys.stderr)
            return False
        return True


class InMemoryPreferenceStore:
    """Same interface as ModelPreferenceStore without touching disk."""

    def __init__(self, model: Optional[str] = None) -> None:
        self._model = model

    def load(self) -> Optional[str]:
        return self._model or None

    def save(self, model: str) -> bool:
        self._model = model
        return True
