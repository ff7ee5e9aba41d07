from __future__ import annotations

import asyncio
import logging

from lyricistant.cache.sqlite import RhymeCache
from lyricistant.config import AppConfig
from lyricistant.errors import LookupFailure

from .base import RhymeSource
from .datamuse import DatamuseSource
from .types import RhymeCandidate

logger = logging.getLogger(__name__)


class RhymeService:
    def __init__(self, cfg: AppConfig, sources: list[RhymeSource] | None = None):
        self.cfg = cfg
        self.cache = RhymeCache(cfg.cache_db_path) if cfg.use_cache else None
        self.sources = sources if sources is not None else self._build_sources(cfg)

    @staticmethod
    def _build_sources(cfg: AppConfig) -> list[RhymeSource]:
        out: list[RhymeSource] = []
        for s in cfg.sources:
            name = s.strip().lower()
            if name == "datamuse":
                out.append(
                    DatamuseSource(
                        max_retries=cfg.api_max_retries,
                        backoff_base_s=cfg.api_backoff_base_s,
                        timeout_s=cfg.api_timeout_s,
                        max_results=cfg.max_results,
                    )
                )
            else:
                logger.info("Unknown source '%s' in config, skipping", s)
        return out

    def fetch(self, word: str) -> list[RhymeCandidate]:
        """Blocking lookup: cache first, then each source in order."""
        word = word.strip()
        if not word:
            return []

        if self.cache is not None:
            cached = self.cache.get(word)
            if cached is not None:
                return cached

        errors: list[str] = []
        for src in self.sources:
            try:
                res = src.fetch(word)
            except LookupFailure as e:
                logger.debug("%s could not answer for %r: %s", src.name, word, e)
                errors.append(f"{src.name}: {e}")
                continue
            if self.cache is not None:
                self.cache.set(word, res, source=src.name)
            return res

        raise LookupFailure(word, "; ".join(errors) or "no rhyme sources configured")

    async def lookup(self, word: str) -> list[RhymeCandidate]:
        return await asyncio.to_thread(self.fetch, word)
