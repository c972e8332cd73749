"""Persist tags as ID3 frames."""

from __future__ import annotations

import logging
from pathlib import Path

from mutagen.id3 import COMM, ID3, ID3NoHeaderError, TALB, TCON, TDRC, TIT2, TPE1, TRCK

from audiocutter.core.tags.constants import ID3_TEXT_FRAMES
from audiocutter.core.tags.models import TagSet


logger = logging.getLogger(__name__)

_FRAME_TYPES = {
    "TIT2": TIT2,
    "TPE1": TPE1,
    "TALB": TALB,
    "TDRC": TDRC,
    "TCON": TCON,
    "TRCK": TRCK,
}


def write_tags(path: Path, tags: TagSet) -> bool:
    """Write ``tags`` into the ID3 header of ``path``.

    Empty fields remove the matching frame. Returns True on success.
    """

    file_path = str(path)
    try:
        try:
            id3 = ID3(file_path)
        except ID3NoHeaderError:
            id3 = ID3()

        for name, frame_id in ID3_TEXT_FRAMES.items():
            value = getattr(tags, name)
            if value:
                id3.setall(frame_id, [_FRAME_TYPES[frame_id](encoding=3, text=[value])])
            else:
                id3.delall(frame_id)

        if tags.comment:
            id3.setall("COMM", [COMM(encoding=3, lang="eng", desc="", text=[tags.comment])])
        else:
            id3.delall("COMM")

        id3.save(file_path)
        return True
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Error writing tags to %s: %s", path, exc)
        return False
