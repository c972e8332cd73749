"""Error kinds raised by the export pipeline and its collaborators."""

from __future__ import annotations

from typing import Optional


class AudioCutterError(RuntimeError):
    """Base class for failures surfaced to the user as a status message."""


class InvalidCutWindow(AudioCutterError):
    """Trim bounds or fade lengths cannot produce a buffer."""


class DecodeFailure(AudioCutterError):
    """Source file could not be read or decoded."""


class EncodingFailure(AudioCutterError):
    """The MP3 encoder failed; ``cause`` holds the original exception."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class WriteFailure(AudioCutterError):
    """Encoded bytes could not be written to the destination."""


class TagWriteFailure(AudioCutterError):
    """Audio was saved but the tags could not be applied."""


class ExportInProgress(AudioCutterError):
    """Another export is still running."""
