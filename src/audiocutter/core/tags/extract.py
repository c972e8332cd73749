"""Tag reading helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from mutagen import File as MutagenFile
from mutagen.id3 import ID3, ID3NoHeaderError

from audiocutter.core.tags.constants import EASY_KEYS, ID3_TEXT_FRAMES
from audiocutter.core.tags.models import TagSet


logger = logging.getLogger(__name__)


def _first_text(value) -> Optional[str]:
    if value is None:
        return None
    # mutagen frames expose .text, easy tags are plain lists
    text = getattr(value, "text", value)
    if isinstance(text, (list, tuple)):
        if not text:
            return None
        text = text[0]
    result = str(text).strip()
    return result or None


def _read_id3(path: Path) -> Optional[TagSet]:
    try:
        tags = ID3(str(path))
    except ID3NoHeaderError:
        return None
    values = {name: _first_text(tags.get(frame_id)) for name, frame_id in ID3_TEXT_FRAMES.items()}
    comments = tags.getall("COMM")
    values["comment"] = _first_text(comments[0]) if comments else None
    return TagSet(**values)


def _read_easy(path: Path) -> Optional[TagSet]:
    audio = MutagenFile(str(path), easy=True)
    if audio is None or not audio.tags:
        return None
    values = {name: _first_text(audio.tags.get(key)) for name, key in EASY_KEYS.items()}
    return TagSet(**values)


def read_tags(path: Path) -> Optional[TagSet]:
    """Return the tags stored in ``path`` or ``None`` when there are none.

    MP3 files are read as ID3; other containers go through mutagen's easy
    interface. Read errors are logged and reported as ``None``.
    """

    path = Path(path)
    try:
        if path.suffix.lower() == ".mp3":
            return _read_id3(path)
        return _read_easy(path)
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Error reading tags from %s: %s", path, exc)
        return None
