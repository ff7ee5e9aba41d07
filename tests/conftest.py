from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from lyricistant.config import AppConfig


def make_config(tmp_path: Path, **overrides) -> AppConfig:
    cfg = AppConfig(
        data_dir=tmp_path / "data",
        cache_db_path=tmp_path / "data" / "rhymes.sqlite3",
        config_dir=tmp_path / "config",
        recent_files_path=tmp_path / "config" / "recent_files.json",
        max_recent_files=10,
        sources=("datamuse",),
        api_max_retries=1,
        api_backoff_base_s=0.0,
        api_timeout_s=1.0,
        max_results=100,
        use_cache=True,
        debounce_ms=20,
    )
    return replace(cfg, **overrides)


@pytest.fixture
def cfg(tmp_path):
    return make_config(tmp_path)
