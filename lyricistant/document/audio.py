from __future__ import annotations

from pathlib import PurePath

from .model import FILE_KIND, ReferenceData

SUPPORTED_AUDIO_EXTENSIONS: tuple[str, ...] = ("aac", "aiff", "flac", "m4a", "mp3", "ogg", "wav")


def is_playable_audio(reference: ReferenceData | None) -> bool:
    if reference is None or reference.kind != FILE_KIND:
        return False
    ext = PurePath(reference.locator).suffix.lstrip(".").lower()
    return ext in SUPPORTED_AUDIO_EXTENSIONS
