"""Project manifest (package.json) access."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


class Manifest:
    """A JSON manifest file loaded into memory."""

    def __init__(self, path: Path, data: dict[str, Any]) -> None:
        self.path = path
        self.data = data

    @classmethod
    def load(cls, path: Path) -> "Manifest":
        if not path.exists():
            raise FileNotFoundError(f"Manifest not found: {path}")
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Manifest is not a JSON object: {path}")
        return cls(path, data)

    def save(self) -> None:
        self.path.write_text(json.dumps(self.data, indent=2), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)
