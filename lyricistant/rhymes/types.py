from __future__ import annotations

from dataclasses import dataclass

from lyricistant.editor.surface import TextRange


@dataclass(frozen=True, slots=True)
class WordAtPosition:
    """A word and the exact span it was read from."""

    word: str
    range: TextRange


@dataclass(frozen=True, slots=True)
class RhymeCandidate:
    word: str
