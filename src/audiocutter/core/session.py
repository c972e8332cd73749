"""State of the file currently open in the editor."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional

from audiocutter.audio.types import SampleBuffer
from audiocutter.core.errors import DecodeFailure
from audiocutter.core.files import FileStats, read_audio_file, stat_file
from audiocutter.core.tags import TagSet, read_tags
from audiocutter.core.timecode import format_time


logger = logging.getLogger(__name__)


def _format_seconds(value: float) -> str:
    return f"{value:g}"


@dataclass
class EditSession:
    """Everything the export pipeline needs to know about the open file.

    The text fields hold what the user typed; they are parsed only when an
    export is prepared.
    """

    path: Optional[Path] = None
    buffer: Optional[SampleBuffer] = None
    file_size: Optional[int] = None
    tags: Optional[TagSet] = None
    intro_text: str = "0:00.000"
    outro_text: str = ""
    fade_in_text: str = "0"
    fade_out_text: str = "0"
    tag_overrides: Dict[str, str] = field(default_factory=dict)

    @property
    def is_loaded(self) -> bool:
        return self.buffer is not None

    @property
    def duration(self) -> float:
        return self.buffer.duration if self.buffer is not None else 0.0

    def set_intro(self, seconds: float) -> None:
        self.intro_text = format_time(seconds, True)

    def set_outro(self, seconds: float) -> None:
        self.outro_text = format_time(seconds, True)

    def set_fades(self, fade_in: float, fade_out: float) -> None:
        self.fade_in_text = _format_seconds(fade_in)
        self.fade_out_text = _format_seconds(fade_out)

    def default_save_name(self, suffix: str = " - edited", extension: str = ".mp3") -> str:
        if self.path is None:
            return f"edited{extension}"
        return f"{self.path.stem}{suffix}{extension}"


def load_session(
    path: Path,
    *,
    decoder: Callable[..., SampleBuffer],
    read_file: Callable[[Path], Optional[bytes]] = read_audio_file,
    stat: Callable[[Path], Optional[FileStats]] = stat_file,
    tag_reader: Callable[[Path], Optional[TagSet]] = read_tags,
    fade_in: float = 0.0,
    fade_out: float = 0.0,
) -> EditSession:
    """Read, decode and inspect ``path``.

    ``decoder`` receives the raw bytes and a ``suffix`` keyword. Raises
    :class:`DecodeFailure` when the file cannot be read or decoded.
    """

    path = Path(path)
    data = read_file(path)
    if data is None:
        raise DecodeFailure(f"Could not read {path.name}")
    buffer = decoder(data, suffix=path.suffix)
    stats = stat(path)
    session = EditSession(
        path=path,
        buffer=buffer,
        file_size=stats.size if stats is not None else len(data),
        tags=tag_reader(path),
    )
    session.set_outro(buffer.duration)
    session.set_fades(fade_in, fade_out)
    logger.info(
        "Loaded %s: %d ch, %d Hz, %.3f s",
        path,
        buffer.channel_count,
        buffer.sample_rate,
        buffer.duration,
    )
    return session
