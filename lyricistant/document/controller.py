from __future__ import annotations

import logging
from pathlib import Path

from lyricistant.errors import SavePathRequired

from .io import FileSystem, LocalFileSystem, open_document, save_document
from .model import Document, ReferenceData
from .recent import RecentFiles

logger = logging.getLogger(__name__)


class DocumentController:
    """
    Owns the one open document.

    The body given to save/save_as is whatever the editing surface holds;
    path and reference only change through the explicit actions below.
    """

    def __init__(self, fs: FileSystem | None = None, recent_files: RecentFiles | None = None):
        self.fs = fs or LocalFileSystem()
        self.recent_files = recent_files
        self.document = Document()
        self._saved_body = ""

    def new(self) -> Document:
        self.document = Document()
        self._saved_body = ""
        return self.document

    def open(self, path: Path | str) -> Document:
        doc = open_document(path, self.fs)
        self.document = doc
        self._saved_body = doc.body
        self._remember(doc.source_path)
        return doc

    def save(self, body: str) -> Document:
        if self.document.source_path is None:
            raise SavePathRequired("Document has never been saved, use save_as")
        return self._write(body, self.document.source_path)

    def save_as(self, body: str, path: Path | str) -> Document:
        doc = self._write(body, Path(path))
        self._remember(doc.source_path)
        return doc

    def associate(self, locator: str | Path) -> Document:
        self.document = self.document.with_reference(ReferenceData.file(locator))
        logger.info("Associated %s with %s", self.document.title, locator)
        return self.document

    def remove_association(self) -> Document:
        self.document = self.document.with_reference(None)
        return self.document

    def is_modified(self, body: str) -> bool:
        return body != self._saved_body

    def _write(self, body: str, path: Path) -> Document:
        doc = self.document.with_body(body).with_path(path)
        # state only changes once the write went through
        save_document(doc, self.fs)
        self.document = doc
        self._saved_body = body
        return doc

    def _remember(self, path: Path | None) -> None:
        if self.recent_files is not None and path is not None:
            self.recent_files.add(path)
