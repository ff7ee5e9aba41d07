from __future__ import annotations

import logging
from pathlib import Path

from lyricistant.config import AppConfig
from lyricistant.document.controller import DocumentController
from lyricistant.document.io import FileSystem
from lyricistant.document.model import Document
from lyricistant.document.recent import RecentFiles
from lyricistant.editor.surface import Position, TextBuffer, TextRange
from lyricistant.render.panel import RhymePanel
from lyricistant.rhymes.locator import WordLocator
from lyricistant.rhymes.pipeline import Lookup, PipelineState, QueryPipeline
from lyricistant.rhymes.service import RhymeService

logger = logging.getLogger(__name__)


class EditorSession:
    """
    Wires one document, one editing surface and one rhyme pipeline together:
    surface signals -> WordLocator -> QueryPipeline -> RhymePanel.
    """

    def __init__(self, cfg: AppConfig, *, lookup: Lookup | None = None, fs: FileSystem | None = None):
        self.cfg = cfg
        self.documents = DocumentController(
            fs, RecentFiles(cfg.recent_files_path, limit=cfg.max_recent_files)
        )
        self.buffer = TextBuffer()
        self.panel = RhymePanel(self.buffer)
        if lookup is None:
            lookup = RhymeService(cfg).lookup
        self.pipeline = QueryPipeline(lookup, self.panel.show, debounce_s=cfg.debounce_s)
        self.locator = WordLocator(self.buffer, self.pipeline.submit)

    @property
    def document(self) -> Document:
        return self.documents.document

    def start(self) -> None:
        self.locator.attach()

    def close(self) -> None:
        self.locator.detach()
        self.pipeline.close()

    def new(self) -> Document:
        return self._load(self.documents.new())

    def open(self, path: Path | str) -> Document:
        return self._load(self.documents.open(path))

    def save(self) -> Document:
        return self.documents.save(self.buffer.get_text())

    def save_as(self, path: Path | str) -> Document:
        return self.documents.save_as(self.buffer.get_text(), path)

    def is_modified(self) -> bool:
        return self.documents.is_modified(self.buffer.get_text())

    def _load(self, doc: Document) -> Document:
        self.pipeline.reset()
        self.buffer.set_text(doc.body)
        self.panel.clear()
        return doc

    async def suggest_at(self, pos: Position, end: Position | None = None) -> RhymePanel:
        """Move the cursor (or select up to `end`) and wait for the suggestions it triggers."""
        if end is None:
            self.buffer.move_cursor(pos)
        else:
            self.buffer.select(TextRange.between(pos, end))

        if self.pipeline.state is PipelineState.IDLE:
            logger.debug("Nothing to look up at %s", pos)
            return self.panel
        await self.pipeline.wait_idle()
        return self.panel
