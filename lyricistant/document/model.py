from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

FILE_KIND = "file"
RESERVED_EXTENSION = ".lyrics"


@dataclass(frozen=True, slots=True)
class ReferenceData:
    kind: str
    locator: str

    @classmethod
    def file(cls, path: str | Path) -> "ReferenceData":
        return cls(kind=FILE_KIND, locator=str(path))


@dataclass(frozen=True, slots=True)
class Header:
    referenced_data: ReferenceData | None = None
    # Only there so a header is recognisable as ours; carries no information.
    is_document_marker: bool = field(default=True, init=False)


@dataclass(frozen=True, slots=True)
class Document:
    body: str = ""
    reference: ReferenceData | None = None
    source_path: Path | None = None

    @property
    def title(self) -> str:
        return str(self.source_path) if self.source_path else "Untitled"

    def with_body(self, body: str) -> "Document":
        return replace(self, body=body)

    def with_reference(self, reference: ReferenceData | None) -> "Document":
        return replace(self, reference=reference)

    def with_path(self, path: Path | None) -> "Document":
        return replace(self, source_path=path)


def has_reserved_extension(path: Path | str) -> bool:
    return Path(path).suffix == RESERVED_EXTENSION
