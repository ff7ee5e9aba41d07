from __future__ import annotations

from dataclasses import dataclass

from lyricistant.document.audio import is_playable_audio
from lyricistant.document.model import Document

from .panel import RhymePanel

CSI = "\x1b["


def _sgr(*codes: int) -> str:
    return CSI + ";".join(str(c) for c in codes) + "m"


@dataclass(frozen=True, slots=True)
class Theme:
    title: str = _sgr(36, 1)  # cyan bold
    current: str = _sgr(32, 1)  # green bold
    dim: str = _sgr(90)  # bright black
    warning: str = _sgr(33, 1)  # yellow bold
    reset: str = _sgr(0)


PLAIN = Theme(title="", current="", dim="", warning="", reset="")


def format_document(doc: Document, theme: Theme | None = None) -> str:
    theme = theme or Theme()
    out: list[str] = [f"{theme.title}♫ {doc.title} ♫{theme.reset}"]
    ref = doc.reference
    if ref is None:
        out.append(f"{theme.dim}No associated file{theme.reset}")
    else:
        tag = "audio" if is_playable_audio(ref) else "external"
        out.append(f"{theme.current}{ref.kind}: {ref.locator}{theme.reset} {theme.dim}[{tag}]{theme.reset}")
    out.append("")
    out.append(doc.body)
    return "\n".join(out)


def format_panel(panel: RhymePanel, theme: Theme | None = None) -> str:
    theme = theme or Theme()
    if panel.searched is None:
        return f"{theme.dim}No word under the cursor{theme.reset}"

    out: list[str] = [f"{theme.title}Rhymes for “{panel.searched.word}”{theme.reset}"]
    if not panel.rows:
        out.append(f"{theme.warning}No rhymes found{theme.reset}")
    for i, row in enumerate(panel.rows, 1):
        out.append(f"{theme.dim}{i:>3}.{theme.reset} {row.candidate.word}")
    return "\n".join(out)
