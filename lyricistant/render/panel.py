from __future__ import annotations

from dataclasses import dataclass

from lyricistant.editor.surface import EditingSurface, TextRange
from lyricistant.rhymes.types import RhymeCandidate, WordAtPosition


@dataclass(frozen=True, slots=True)
class RhymeRow:
    candidate: RhymeCandidate
    # span captured when the word was located, not when the row is picked
    target: TextRange


class RhymePanel:
    """Rhyme suggestions currently on display, with the action to apply one."""

    def __init__(self, surface: EditingSurface):
        self.surface = surface
        self.rows: list[RhymeRow] = []
        self.searched: WordAtPosition | None = None

    def show(self, searched: WordAtPosition, candidates: list[RhymeCandidate]) -> None:
        self.rows.clear()
        self.searched = searched
        for c in candidates:
            self.rows.append(RhymeRow(candidate=c, target=searched.range))

    def clear(self) -> None:
        self.rows.clear()
        self.searched = None

    def words(self) -> list[str]:
        return [r.candidate.word for r in self.rows]

    def choose(self, index: int) -> None:
        row = self.rows[index]
        self.surface.replace_range(row.target, row.candidate.word)
        self.surface.focus()
