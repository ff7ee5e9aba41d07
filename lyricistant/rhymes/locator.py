from __future__ import annotations

import logging
from typing import Callable

import regex

from lyricistant.editor.surface import EditingSurface, TextRange

from .types import WordAtPosition

logger = logging.getLogger(__name__)

_WORD_CHAR = regex.compile(r"\w")

Sink = Callable[[WordAtPosition], None]


def word_from_cursor(surface: EditingSurface) -> WordAtPosition | None:
    pos = surface.position()
    span = surface.word_at(pos)
    if span is None:
        return None
    return WordAtPosition(word=span.word, range=TextRange.on_line(pos.line, span.start_column, span.end_column))


def word_from_selection(surface: EditingSurface) -> WordAtPosition | None:
    rng = surface.selection()
    text = surface.text_in_range(rng)
    # single characters and punctuation-led selections are not words
    if len(text) <= 1 or not _WORD_CHAR.match(text[0]):
        return None
    return WordAtPosition(word=text, range=rng)


class WordLocator:
    """
    Turns cursor and selection signals of an editing surface into one
    stream of WordAtPosition, in the order the signals arrive.
    """

    def __init__(self, surface: EditingSurface, sink: Sink):
        self.surface = surface
        self.sink = sink
        self._unsubscribers: list[Callable[[], None]] = []

    def attach(self) -> None:
        if self._unsubscribers:
            return
        self._unsubscribers = [
            self.surface.on_cursor_changed(self._on_cursor),
            self.surface.on_selection_changed(self._on_selection),
        ]

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _on_cursor(self) -> None:
        self._emit(word_from_cursor(self.surface))

    def _on_selection(self) -> None:
        self._emit(word_from_selection(self.surface))

    def _emit(self, event: WordAtPosition | None) -> None:
        if event is None:
            return
        logger.debug("Word of interest: %r at %s", event.word, event.range)
        self.sink(event)
