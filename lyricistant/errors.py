from __future__ import annotations

from pathlib import Path


class LyricistantError(RuntimeError):
    pass


class HeaderParseError(LyricistantError, ValueError):
    def __init__(self, line: str, reason: str):
        super().__init__(f"Can't parse {line!r} as a document header ({reason})")
        self.line = line
        # "not_json" or "bad_shape"
        self.reason = reason


class DocumentIOError(LyricistantError):
    def __init__(self, path: Path | str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = Path(path)


class SavePathRequired(LyricistantError):
    pass


class LookupFailure(LyricistantError):
    def __init__(self, word: str, message: str):
        super().__init__(f"Rhyme lookup for {word!r} failed: {message}")
        self.word = word
