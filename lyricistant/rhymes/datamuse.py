from __future__ import annotations

import logging
import time

import requests

from lyricistant.errors import LookupFailure

from .base import RhymeSource
from .types import RhymeCandidate

logger = logging.getLogger(__name__)

API_URL = "https://api.datamuse.com/words"


class DatamuseSource(RhymeSource):
    name = "datamuse"

    def __init__(self, *, max_retries: int, backoff_base_s: float, timeout_s: float = 10.0, max_results: int = 100):
        self.max_retries = max(max_retries, 1)
        self.backoff_base_s = backoff_base_s
        self.timeout_s = timeout_s
        self.max_results = max_results

    def fetch(self, word: str) -> list[RhymeCandidate]:
        params = {"rel_rhy": word, "max": self.max_results}

        for attempt in range(1, self.max_retries + 1):
            try:
                r = requests.get(API_URL, params=params, timeout=self.timeout_s)
                r.raise_for_status()
                data = r.json()
            except (requests.RequestException, ValueError) as e:
                logger.warning("datamuse error (attempt %s/%s): %s", attempt, self.max_retries, e)
                if attempt == self.max_retries:
                    raise LookupFailure(word, str(e)) from e
                time.sleep(self.backoff_base_s * attempt)
                continue

            if not isinstance(data, list):
                raise LookupFailure(word, "unexpected response shape")
            # keep the API's ranking
            return [
                RhymeCandidate(word=str(item["word"]))
                for item in data
                if isinstance(item, dict) and item.get("word")
            ]

        raise LookupFailure(word, "no attempts made")
