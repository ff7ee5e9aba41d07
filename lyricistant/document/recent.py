from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class RecentFiles:
    def __init__(self, path: Path, limit: int = 10):
        self.path = path
        self.limit = limit

    def load(self) -> list[str]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Unable to read recent files list %s: %s", self.path, e)
            return []
        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Recent files list %s is corrupt, starting over", self.path)
            return []
        if not isinstance(data, list):
            return []
        return [str(p) for p in data if isinstance(p, str)]

    def add(self, path: Path | str) -> list[str]:
        entry = str(path)
        files = [entry] + [p for p in self.load() if p != entry]
        files = list(dict.fromkeys(files))[: self.limit]

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(files, ensure_ascii=False), encoding="utf-8")
        return files
