"""Export job description and pipeline states."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Mapping, Optional

from audiocutter.audio.bitrate import estimate_bitrate
from audiocutter.audio.types import (
    DEFAULT_BITRATE_KBPS,
    CutWindow,
    EncodingParameters,
    OutputContainer,
    SampleBuffer,
)
from audiocutter.core.errors import DecodeFailure
from audiocutter.core.files import FileStats, stat_file
from audiocutter.core.session import EditSession
from audiocutter.core.tags import TagSet
from audiocutter.core.timecode import parse_seconds, parse_time


logger = logging.getLogger(__name__)


class ExportState(Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    RENDERING = "rendering"
    ENCODING = "encoding"
    WRITING = "writing"
    TAGGING = "tagging"
    DONE = "done"
    PARTIAL = "partial"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ExportState.DONE, ExportState.PARTIAL, ExportState.FAILED)


@dataclass(frozen=True)
class ExportJob:
    destination: Path
    source: SampleBuffer
    window: CutWindow
    params: EncodingParameters
    container: OutputContainer
    tags: Optional[TagSet] = None
    tag_overrides: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ExportOutcome:
    state: ExportState
    message: str
    destination: Path
    error: Optional[BaseException] = None

    @property
    def saved(self) -> bool:
        return self.state in (ExportState.DONE, ExportState.PARTIAL)


def read_cut_window(session: EditSession) -> CutWindow:
    """Parse the session's text fields.

    Unparsable values fall back to 0, and an empty or zero outro means the
    end of the file.
    """

    duration = session.duration
    intro = parse_time(session.intro_text) or 0.0
    outro = parse_time(session.outro_text) or duration
    fade_in = parse_seconds(session.fade_in_text) or 0.0
    fade_out = parse_seconds(session.fade_out_text) or 0.0
    return CutWindow(
        intro_seconds=intro,
        outro_seconds=outro,
        fade_in_seconds=fade_in,
        fade_out_seconds=fade_out,
    )


def build_job(
    session: EditSession,
    destination: Path,
    *,
    default_bitrate: int = DEFAULT_BITRATE_KBPS,
    stat: Callable[[Path], Optional[FileStats]] = stat_file,
) -> ExportJob:
    if session.buffer is None:
        raise DecodeFailure("No audio is loaded")
    destination = Path(destination)
    buffer = session.buffer

    file_size = session.file_size
    suffix = ""
    if session.path is not None:
        suffix = session.path.suffix
        stats = stat(session.path)
        if stats is not None:
            file_size = stats.size
    bitrate = estimate_bitrate(file_size, buffer.duration, source_suffix=suffix, default=default_bitrate)

    return ExportJob(
        destination=destination,
        source=buffer,
        window=read_cut_window(session),
        params=EncodingParameters.for_buffer(buffer, bitrate),
        container=OutputContainer.from_path(destination),
        tags=session.tags,
        tag_overrides=dict(session.tag_overrides),
    )
