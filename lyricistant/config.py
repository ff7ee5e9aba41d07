from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "lyricistant"
    return Path.home() / ".config" / "lyricistant"


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default) not in ("0", "false", "False")


@dataclass(frozen=True)
class AppConfig:
    # Storage
    data_dir: Path
    cache_db_path: Path
    config_dir: Path
    recent_files_path: Path
    max_recent_files: int

    # Rhyme sources
    sources: tuple[str, ...]
    api_max_retries: int
    api_backoff_base_s: float
    api_timeout_s: float
    max_results: int
    use_cache: bool

    # Suggestions
    debounce_ms: int

    @property
    def debounce_s(self) -> float:
        return self.debounce_ms / 1000.0


def load_config() -> AppConfig:
    # XDG base dir fallback
    xdg = os.getenv("XDG_CACHE_HOME")
    data_dir = Path(xdg) if xdg else Path.home() / ".cache"
    data_dir = data_dir / "lyricistant"

    sources_env = os.getenv("LYRICISTANT_SOURCES", "datamuse")
    sources = tuple(s.strip() for s in sources_env.split(",") if s.strip())

    config_dir = _config_dir()

    return AppConfig(
        data_dir=data_dir,
        cache_db_path=data_dir / "rhymes.sqlite3",
        config_dir=config_dir,
        recent_files_path=config_dir / "recent_files.json",
        max_recent_files=int(os.getenv("LYRICISTANT_MAX_RECENT_FILES", "10")),
        sources=sources,
        api_max_retries=int(os.getenv("LYRICISTANT_API_MAX_RETRIES", "3")),
        api_backoff_base_s=float(os.getenv("LYRICISTANT_API_BACKOFF_BASE", "1.0")),
        api_timeout_s=float(os.getenv("LYRICISTANT_API_TIMEOUT", "10.0")),
        max_results=int(os.getenv("LYRICISTANT_MAX_RESULTS", "100")),
        use_cache=_flag("LYRICISTANT_CACHE", "1"),
        debounce_ms=int(os.getenv("LYRICISTANT_DEBOUNCE_MS", "200")),
    )
