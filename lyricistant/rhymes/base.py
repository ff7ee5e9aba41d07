from __future__ import annotations

from .types import RhymeCandidate


class RhymeSource:
    name: str

    def fetch(self, word: str) -> list[RhymeCandidate]:
        """Blocking lookup. Raises LookupFailure when the source can't answer."""
        raise NotImplementedError
