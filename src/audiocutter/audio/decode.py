"""Decoding of compressed audio into a :class:`SampleBuffer`."""

from __future__ import annotations

import io
import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path

import soundfile as sf

from audiocutter.audio.types import SampleBuffer
from audiocutter.core.errors import DecodeFailure


logger = logging.getLogger(__name__)

TRANSCODE_EXTENSIONS = {
    ".m4a",
    ".mp4",
    ".aac",
    ".mp3",
    ".mp2",
}


def _read_soundfile(source) -> SampleBuffer:
    frames, sample_rate = sf.read(source, dtype="float32", always_2d=True)
    return SampleBuffer.from_interleaved(frames, sample_rate)


def transcode_bytes_to_wav(data: bytes, *, suffix: str, ffmpeg: str | None = None) -> Path:
    """Write ``data`` to a temp file and let ffmpeg convert it to float WAV.

    Sample rate and channel layout are kept as they are in the source.
    The caller owns (and must delete) the returned path.
    """

    executable = ffmpeg or shutil.which("ffmpeg")
    if not executable:
        raise DecodeFailure("FFmpeg is required to decode this file type (MP4/M4A)")
    fd, source_name = tempfile.mkstemp(suffix=suffix or ".bin", prefix="audiocutter_src_")
    source = Path(source_name)
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)
    fd, target_name = tempfile.mkstemp(suffix=".wav", prefix="audiocutter_pcm_")
    os.close(fd)
    target = Path(target_name)
    cmd = [
        executable,
        "-y",
        "-hide_banner",
        "-loglevel",
        "error",
        "-i",
        str(source),
        "-vn",
        "-acodec",
        "pcm_f32le",
        str(target),
    ]
    try:
        subprocess.run(cmd, check=True, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except FileNotFoundError as exc:  # pragma: no cover - depends on environment
        target.unlink(missing_ok=True)
        raise DecodeFailure("FFmpeg was not found on PATH") from exc
    except subprocess.CalledProcessError as exc:
        target.unlink(missing_ok=True)
        raise DecodeFailure("FFmpeg could not decode the file") from exc
    finally:
        source.unlink(missing_ok=True)
    return target


def decode_audio_bytes(data: bytes, *, suffix: str = "", ffmpeg: str | None = None) -> SampleBuffer:
    """Decode ``data`` with libsndfile, falling back to ffmpeg for MP4/M4A.

    Raises :class:`DecodeFailure` when neither path produces audio.
    """

    if not data:
        raise DecodeFailure("The file is empty")
    suffix = (suffix or "").lower()
    try:
        buffer = _read_soundfile(io.BytesIO(data))
    except Exception as exc:  # pylint: disable=broad-except
        if suffix not in TRANSCODE_EXTENSIONS:
            raise DecodeFailure(f"Unsupported or corrupt audio data: {exc}") from exc
        logger.debug("libsndfile could not decode %s data (%s); transcoding", suffix, exc)
    else:
        if buffer.frame_count == 0:
            raise DecodeFailure("The file contains no audio")
        return buffer

    wav_path = transcode_bytes_to_wav(data, suffix=suffix, ffmpeg=ffmpeg)
    try:
        buffer = _read_soundfile(wav_path)
    except Exception as exc:  # pylint: disable=broad-except
        raise DecodeFailure("Unable to read the transcoded audio") from exc
    finally:
        try:
            wav_path.unlink(missing_ok=True)
        except OSError as exc:
            logger.debug("Failed to remove temp file %s: %s", wav_path, exc)
    if buffer.frame_count == 0:
        raise DecodeFailure("The file contains no audio")
    return buffer
