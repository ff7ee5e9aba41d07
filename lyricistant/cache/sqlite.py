from __future__ import annotations

import json
import logging
import sqlite3
import time
from pathlib import Path

from lyricistant.rhymes.types import RhymeCandidate

logger = logging.getLogger(__name__)


class RhymeCache:
    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        con = sqlite3.connect(self.db_path)
        con.row_factory = sqlite3.Row
        return con

    def _init_db(self) -> None:
        with self._connect() as con:
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS rhyme_cache (
                    word TEXT NOT NULL PRIMARY KEY,
                    source TEXT,
                    rhymes_json TEXT NOT NULL,
                    updated_at INTEGER NOT NULL
                );
                """
            )
            con.execute(
                "CREATE INDEX IF NOT EXISTS idx_rhyme_cache_updated_at ON rhyme_cache(updated_at);"
            )

    @staticmethod
    def _key(word: str) -> str:
        return word.strip().lower()

    def get(self, word: str) -> list[RhymeCandidate] | None:
        """
        Returns cached candidates or None if there is no entry.
        """
        with self._connect() as con:
            row = con.execute(
                "SELECT rhymes_json FROM rhyme_cache WHERE word=?",
                (self._key(word),),
            ).fetchone()
        if row is None:
            return None
        try:
            words = json.loads(row["rhymes_json"])
        except ValueError:
            logger.warning("Corrupt cache entry for %r, ignoring", word)
            return None
        return [RhymeCandidate(word=str(w)) for w in words]

    def set(self, word: str, candidates: list[RhymeCandidate], *, source: str | None) -> None:
        now = int(time.time())
        payload = json.dumps([c.word for c in candidates], ensure_ascii=False)
        with self._connect() as con:
            con.execute(
                """
                INSERT INTO rhyme_cache(word, source, rhymes_json, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(word) DO UPDATE SET
                    source=excluded.source,
                    rhymes_json=excluded.rhymes_json,
                    updated_at=excluded.updated_at
                """,
                (self._key(word), source, payload, now),
            )

    def clear(self) -> None:
        with self._connect() as con:
            con.execute("DELETE FROM rhyme_cache")
