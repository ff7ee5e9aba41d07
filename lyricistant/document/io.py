from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from lyricistant.errors import DocumentIOError, SavePathRequired

from .header import decode_reference_data, encode_file_reference, is_header_like
from .model import RESERVED_EXTENSION, Document, ReferenceData, has_reserved_extension

logger = logging.getLogger(__name__)


class FileSystem(Protocol):
    def read_text(self, path: Path) -> str: ...

    def write_text(self, path: Path, text: str) -> None: ...


class LocalFileSystem:
    """UTF-8 text files, no newline translation so the body round-trips as-is."""

    def read_text(self, path: Path) -> str:
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentIOError(path, str(e)) from e

    def write_text(self, path: Path, text: str) -> None:
        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            raise DocumentIOError(path, str(e)) from e


def split_document(text: str, path: Path | str) -> tuple[str, ReferenceData | None]:
    """
    Split raw file text into (body, reference).

    Only files with the reserved extension may carry a header, and only
    if their first line parses as JSON. Anything else is all body.
    """
    first_line, sep, rest = text.partition("\n")
    if not sep:
        rest = ""

    if has_reserved_extension(path) and is_header_like(first_line):
        return rest, decode_reference_data(first_line)
    return text, None


def assemble_document(body: str, reference: ReferenceData | None, path: Path | str) -> str:
    if reference is not None and has_reserved_extension(path):
        return encode_file_reference(reference.locator) + body
    return body


def open_document(path: Path | str, fs: FileSystem) -> Document:
    path = Path(path)
    text = fs.read_text(path)
    body, reference = split_document(text, path)
    logger.debug("Opened %s (reference=%s)", path, reference)
    return Document(body=body, reference=reference, source_path=path)


def save_document(doc: Document, fs: FileSystem, path: Path | str | None = None) -> Path:
    target = Path(path) if path is not None else doc.source_path
    if target is None:
        raise SavePathRequired("No path to save the document to")
    if doc.reference is not None and not has_reserved_extension(target):
        logger.info("Reference is not persisted for %s (not a %s file)", target, RESERVED_EXTENSION)
    fs.write_text(target, assemble_document(doc.body, doc.reference, target))
    logger.debug("Saved %s", target)
    return target
