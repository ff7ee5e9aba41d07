from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

import regex

# An optional leading apostrophe, then word characters and apostrophes.
# Hyphens split compounds, so "don't-stop" is two words.
WORD_PATTERN = regex.compile(r"'?\w[\w']*")

Listener = Callable[[], None]


@dataclass(frozen=True, slots=True, order=True)
class Position:
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class TextRange:
    """Zero-based, end column exclusive."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @classmethod
    def on_line(cls, line: int, start_column: int, end_column: int) -> "TextRange":
        return cls(line, start_column, line, end_column)

    @classmethod
    def between(cls, a: Position, b: Position) -> "TextRange":
        start, end = sorted((a, b))
        return cls(start.line, start.column, end.line, end.column)

    @property
    def start(self) -> Position:
        return Position(self.start_line, self.start_column)

    @property
    def end(self) -> Position:
        return Position(self.end_line, self.end_column)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True, slots=True)
class WordSpan:
    word: str
    start_column: int
    end_column: int


class EditingSurface(Protocol):
    def get_text(self) -> str: ...

    def set_text(self, text: str) -> None: ...

    def position(self) -> Position: ...

    def selection(self) -> TextRange: ...

    def word_at(self, pos: Position) -> WordSpan | None: ...

    def text_in_range(self, rng: TextRange) -> str: ...

    def replace_range(self, rng: TextRange, text: str) -> None: ...

    def focus(self) -> None: ...

    def on_cursor_changed(self, listener: Listener) -> Callable[[], None]: ...

    def on_selection_changed(self, listener: Listener) -> Callable[[], None]: ...


def find_word(line_text: str, column: int) -> WordSpan | None:
    for m in WORD_PATTERN.finditer(line_text):
        if m.start() <= column <= m.end():
            return WordSpan(word=m.group(0), start_column=m.start(), end_column=m.end())
        if m.start() > column:
            break
    return None


class TextBuffer:
    """
    In-memory editing surface for headless use.

    Cursor moves notify cursor listeners first, then selection listeners,
    the same order a GUI editor reports them.
    """

    def __init__(self, text: str = ""):
        self._lines = text.split("\n")
        self._position = Position(0, 0)
        self._selection = TextRange(0, 0, 0, 0)
        self._cursor_listeners: list[Listener] = []
        self._selection_listeners: list[Listener] = []
        self.focused = False

    # text

    def get_text(self) -> str:
        return "\n".join(self._lines)

    def set_text(self, text: str) -> None:
        self._lines = text.split("\n")
        self._position = Position(0, 0)
        self._selection = TextRange(0, 0, 0, 0)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def _offset(self, pos: Position) -> int:
        return sum(len(ln) + 1 for ln in self._lines[: pos.line]) + pos.column

    def _clamp(self, pos: Position) -> Position:
        line = min(max(pos.line, 0), len(self._lines) - 1)
        column = min(max(pos.column, 0), len(self._lines[line]))
        return Position(line, column)

    def text_in_range(self, rng: TextRange) -> str:
        text = self.get_text()
        return text[self._offset(self._clamp(rng.start)) : self._offset(self._clamp(rng.end))]

    def replace_range(self, rng: TextRange, text: str) -> None:
        start = self._clamp(rng.start)
        end = self._clamp(rng.end)
        full = self.get_text()
        a, b = self._offset(start), self._offset(end)
        self._lines = (full[:a] + text + full[b:]).split("\n")

        inserted = text.split("\n")
        if len(inserted) == 1:
            after = Position(start.line, start.column + len(text))
        else:
            after = Position(start.line + len(inserted) - 1, len(inserted[-1]))
        self._set_cursor(after, TextRange.between(after, after))

    # cursor & selection

    def position(self) -> Position:
        return self._position

    def selection(self) -> TextRange:
        return self._selection

    def word_at(self, pos: Position) -> WordSpan | None:
        pos = self._clamp(pos)
        return find_word(self._lines[pos.line], pos.column)

    def move_cursor(self, pos: Position) -> None:
        pos = self._clamp(pos)
        self._set_cursor(pos, TextRange.between(pos, pos))

    def select(self, rng: TextRange) -> None:
        start, end = self._clamp(rng.start), self._clamp(rng.end)
        self._set_cursor(end, TextRange.between(start, end))

    def _set_cursor(self, pos: Position, selection: TextRange) -> None:
        self._position = pos
        self._selection = selection
        for listener in list(self._cursor_listeners):
            listener()
        for listener in list(self._selection_listeners):
            listener()

    # focus

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    # events

    def on_cursor_changed(self, listener: Listener) -> Callable[[], None]:
        return self._subscribe(self._cursor_listeners, listener)

    def on_selection_changed(self, listener: Listener) -> Callable[[], None]:
        return self._subscribe(self._selection_listeners, listener)

    @staticmethod
    def _subscribe(listeners: list[Listener], listener: Listener) -> Callable[[], None]:
        listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in listeners:
                listeners.remove(listener)

        return _unsubscribe
