"""Helpers for file support checks."""

from __future__ import annotations

from pathlib import Path

from audiocutter.core.tags.constants import DROP_EXTENSIONS


def is_droppable_audio_file(path: Path) -> bool:
    return path.suffix.lower() in DROP_EXTENSIONS
