"""Export pipeline: render, encode, write and tag one file at a time.

This module is wx-free; the UI passes callbacks that marshal status updates
back onto its own thread.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, Optional

from audiocutter.audio.mp3 import EncoderFactory, FfmpegFrameEncoder, encode_mp3
from audiocutter.audio.render import FadeComposition, render_cut
from audiocutter.audio.types import DEFAULT_BITRATE_KBPS, OutputContainer
from audiocutter.audio.wav import encode_wav
from audiocutter.core.errors import (
    AudioCutterError,
    DecodeFailure,
    EncodingFailure,
    ExportInProgress,
    InvalidCutWindow,
    TagWriteFailure,
    WriteFailure,
)
from audiocutter.core.files import FileStats, stat_file, write_audio_file
from audiocutter.core.i18n import gettext as _
from audiocutter.core.session import EditSession
from audiocutter.core.tags import TagSet, merge_tags, write_tags
from audiocutter.export.job import ExportJob, ExportOutcome, ExportState, build_job


logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]
StateCallback = Callable[[ExportState], None]


@dataclass
class ExportCollaborators:
    """External services the pipeline calls; tests swap these out."""

    write_file: Callable[[Path, bytes], bool] = write_audio_file
    write_tags: Callable[[Path, TagSet], bool] = write_tags
    stat: Callable[[Path], Optional[FileStats]] = stat_file
    encoder_factory: Optional[EncoderFactory] = None


class ExportPipeline:
    """Runs at most one export at a time.

    ``run`` executes synchronously on the calling thread, ``submit`` on a
    single worker thread. A second request while one is in flight raises
    :class:`ExportInProgress`.
    """

    def __init__(
        self,
        *,
        collaborators: Optional[ExportCollaborators] = None,
        composition: FadeComposition = FadeComposition.OVERWRITE,
        default_bitrate: int = DEFAULT_BITRATE_KBPS,
        on_status: Optional[StatusCallback] = None,
        on_state_change: Optional[StateCallback] = None,
    ) -> None:
        self._collaborators = collaborators or ExportCollaborators()
        self._composition = composition
        self._default_bitrate = default_bitrate
        self._on_status = on_status
        self._on_state_change = on_state_change
        self._lock = threading.Lock()
        self._busy = False
        self._state = ExportState.IDLE
        self._executor: Optional[ThreadPoolExecutor] = None

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "ExportPipeline":
        collaborators = kwargs.pop("collaborators", None) or ExportCollaborators()
        ffmpeg = settings.get_ffmpeg_path()
        if collaborators.encoder_factory is None and ffmpeg:
            collaborators.encoder_factory = partial(FfmpegFrameEncoder, ffmpeg=ffmpeg)
        return cls(
            collaborators=collaborators,
            composition=settings.get_fade_composition(),
            default_bitrate=settings.get_default_bitrate(),
            **kwargs,
        )

    @property
    def state(self) -> ExportState:
        return self._state

    @property
    def is_busy(self) -> bool:
        with self._lock:
            return self._busy

    def run(self, session: EditSession, destination: Path) -> ExportOutcome:
        self._claim()
        return self._run_claimed(session, Path(destination))

    def submit(self, session: EditSession, destination: Path) -> "Future[ExportOutcome]":
        self._claim()
        try:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="audiocutter-export")
            return self._executor.submit(self._run_claimed, session, Path(destination))
        except Exception:
            self._release()
            raise

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def _claim(self) -> None:
        with self._lock:
            if self._busy:
                raise ExportInProgress(_("An export is already in progress"))
            self._busy = True

    def _release(self) -> None:
        with self._lock:
            self._busy = False

    def _set_state(self, state: ExportState) -> None:
        logger.debug("Export state %s -> %s", self._state.value, state.value)
        self._state = state
        if self._on_state_change:
            self._on_state_change(state)

    def _status(self, message: str) -> None:
        if self._on_status:
            self._on_status(message)

    def _finish(self, state: ExportState, message: str, destination: Path, error=None) -> ExportOutcome:
        self._set_state(state)
        self._status(message)
        self._set_state(ExportState.IDLE)
        return ExportOutcome(state=state, message=message, destination=destination, error=error)

    def _run_claimed(self, session: EditSession, destination: Path) -> ExportOutcome:
        try:
            return self._execute(session, destination)
        finally:
            self._release()

    def _execute(self, session: EditSession, destination: Path) -> ExportOutcome:
        self._set_state(ExportState.PREPARING)
        self._status(_("Processing audio..."))
        try:
            job = build_job(
                session,
                destination,
                default_bitrate=self._default_bitrate,
                stat=self._collaborators.stat,
            )
            data = self._render_and_encode(job)
            self._write(job, data)
        except InvalidCutWindow as exc:
            logger.warning("Invalid cut window for %s: %s", destination, exc)
            return self._finish(ExportState.FAILED, _("Invalid cut points: {error}").format(error=exc), destination, exc)
        except DecodeFailure as exc:
            return self._finish(ExportState.FAILED, _("Error loading audio: {error}").format(error=exc), destination, exc)
        except EncodingFailure as exc:
            logger.warning("MP3 encoding failed for %s: %s", destination, exc.cause or exc)
            return self._finish(ExportState.FAILED, _("Error encoding MP3: {error}").format(error=exc), destination, exc)
        except WriteFailure as exc:
            return self._finish(ExportState.FAILED, _("Error saving file"), destination, exc)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Unexpected export failure for %s", destination)
            return self._finish(
                ExportState.FAILED,
                _("Error processing audio: {error}").format(error=exc),
                destination,
                exc,
            )

        if job.container is OutputContainer.MP3 and job.tags is not None:
            error = self._apply_tags(job)
            if error is not None:
                return self._finish(
                    ExportState.PARTIAL,
                    _("File saved, but tags could not be written"),
                    destination,
                    error,
                )
        logger.info("Exported %s", destination)
        return self._finish(ExportState.DONE, _("File saved successfully!"), destination)

    def _render_and_encode(self, job: ExportJob) -> bytes:
        self._set_state(ExportState.RENDERING)
        self._status(_("Rendering audio..."))
        rendered = render_cut(job.source, job.window, composition=self._composition)

        self._set_state(ExportState.ENCODING)
        if job.container is OutputContainer.MP3:
            self._status(_("Encoding MP3 ({bitrate} kbps)...").format(bitrate=job.params.bitrate_kbps))
            return encode_mp3(rendered, job.params, encoder_factory=self._collaborators.encoder_factory)
        if job.destination.suffix.lower() != ".wav":
            logger.info("No encoder for %s; writing WAV data", job.destination.suffix or "(no extension)")
        self._status(_("Encoding WAV..."))
        return encode_wav(rendered)

    def _write(self, job: ExportJob, data: bytes) -> None:
        self._set_state(ExportState.WRITING)
        self._status(_("Saving file..."))
        try:
            ok = self._collaborators.write_file(job.destination, data)
        except Exception as exc:  # pylint: disable=broad-except
            raise WriteFailure(str(exc)) from exc
        if not ok:
            raise WriteFailure(f"Could not write {job.destination}")

    def _apply_tags(self, job: ExportJob) -> Optional[AudioCutterError]:
        self._set_state(ExportState.TAGGING)
        self._status(_("Writing tags..."))
        merged = merge_tags(job.tags, job.tag_overrides)
        try:
            ok = self._collaborators.write_tags(job.destination, merged)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Tag write raised for %s: %s", job.destination, exc)
            failure = TagWriteFailure(str(exc))
            failure.__cause__ = exc
            return failure
        if not ok:
            return TagWriteFailure(f"Could not write tags to {job.destination}")
        return None
