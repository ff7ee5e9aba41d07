"""Lyrics editor core: .lyrics documents and live rhyme suggestions."""

__version__ = "0.1.0"
