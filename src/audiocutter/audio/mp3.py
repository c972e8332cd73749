"""MP3 encoding through a block-level frame encoder.

The adapter only knows the :class:`FrameEncoder` protocol. The default
implementation streams PCM into an ``ffmpeg``/libmp3lame process.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import threading
from typing import Callable, Optional, Protocol

import numpy as np

from audiocutter.audio.pcm import float_to_int16
from audiocutter.audio.types import EncodingParameters, SampleBuffer
from audiocutter.core.errors import EncodingFailure


logger = logging.getLogger(__name__)

MP3_BLOCK_FRAMES = 1152


class FrameEncoder(Protocol):
    def encode_block(self, left: np.ndarray, right: Optional[np.ndarray] = None) -> bytes:
        ...

    def flush(self) -> bytes:
        ...


EncoderFactory = Callable[[int, int, int], FrameEncoder]


def _iter_blocks(pcm: np.ndarray):
    """Yield ``(channels, MP3_BLOCK_FRAMES)`` int16 blocks, zero-padding the tail."""

    frame_count = pcm.shape[1]
    for start in range(0, frame_count, MP3_BLOCK_FRAMES):
        block = np.zeros((pcm.shape[0], MP3_BLOCK_FRAMES), dtype=np.int16)
        chunk = pcm[:, start : start + MP3_BLOCK_FRAMES]
        block[:, : chunk.shape[1]] = chunk
        yield block


def _abort(encoder: FrameEncoder) -> None:
    close = getattr(encoder, "close", None)
    if callable(close):
        try:
            close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.debug("Failed to close MP3 encoder: %s", exc)


def encode_mp3(
    buffer: SampleBuffer,
    params: EncodingParameters,
    *,
    encoder_factory: Optional[EncoderFactory] = None,
) -> bytes:
    """Encode ``buffer`` to an MP3 byte stream.

    Mono buffers use the single-channel entry point, everything else the
    dual-channel one (extra channels beyond the first two are dropped).
    Any encoder error is re-raised as :class:`EncodingFailure`.
    """

    factory = encoder_factory or FfmpegFrameEncoder
    channels = 1 if params.channel_count == 1 else 2
    if params.channel_count > 2:
        logger.warning("MP3 supports at most two channels; dropping %d extra", params.channel_count - 2)

    pcm = float_to_int16(buffer.samples[:channels])
    if pcm.shape[0] < channels:
        pcm = np.vstack([pcm, pcm[-1:]])

    try:
        encoder = factory(channels, params.sample_rate, params.bitrate_kbps)
    except Exception as exc:  # pylint: disable=broad-except
        raise EncodingFailure(f"Unable to start MP3 encoder: {exc}", exc) from exc

    chunks: list[bytes] = []
    calls = 0
    try:
        for block in _iter_blocks(pcm):
            if channels == 1:
                chunk = encoder.encode_block(block[0])
            else:
                chunk = encoder.encode_block(block[0], block[1])
            calls += 1
            if chunk:
                chunks.append(bytes(chunk))
        tail = encoder.flush()
    except Exception as exc:  # pylint: disable=broad-except
        _abort(encoder)
        raise EncodingFailure(f"MP3 encoding failed: {exc}", exc) from exc
    if tail:
        chunks.append(bytes(tail))

    logger.debug(
        "Encoded %d blocks (%d ch @ %d Hz, %d kbps) into %d chunks",
        calls,
        channels,
        params.sample_rate,
        params.bitrate_kbps,
        len(chunks),
    )
    return b"".join(chunks)


def find_ffmpeg(configured: str | None = None) -> str | None:
    if configured:
        return configured if shutil.which(configured) else None
    return shutil.which("ffmpeg")


class FfmpegFrameEncoder:
    """Frame encoder feeding interleaved s16le PCM to ffmpeg's libmp3lame.

    Output is collected by a reader thread; ``encode_block`` returns whatever
    has been produced so far, which is often empty.
    """

    def __init__(self, channels: int, sample_rate: int, bitrate_kbps: int, *, ffmpeg: str | None = None) -> None:
        executable = find_ffmpeg(ffmpeg)
        if not executable:
            raise RuntimeError("FFmpeg is required for MP3 export but was not found on PATH")
        self._channels = int(channels)
        self._lock = threading.Lock()
        self._pending = bytearray()
        self._errors = bytearray()
        cmd = [
            executable,
            "-hide_banner",
            "-nostats",
            "-loglevel",
            "error",
            "-f",
            "s16le",
            "-ar",
            str(int(sample_rate)),
            "-ac",
            str(self._channels),
            "-i",
            "pipe:0",
            "-codec:a",
            "libmp3lame",
            "-b:a",
            f"{int(bitrate_kbps)}k",
            "-f",
            "mp3",
            "pipe:1",
        ]
        logger.debug("Starting MP3 encoder: %s", cmd)
        self._process = subprocess.Popen(
            cmd,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        self._stdout_reader = threading.Thread(
            target=self._drain, args=(self._process.stdout, self._pending), name="audiocutter-mp3-out", daemon=True
        )
        self._stderr_reader = threading.Thread(
            target=self._drain, args=(self._process.stderr, self._errors), name="audiocutter-mp3-err", daemon=True
        )
        self._stdout_reader.start()
        self._stderr_reader.start()

    def _drain(self, stream, target: bytearray) -> None:
        while True:
            data = stream.read1(65536) if hasattr(stream, "read1") else stream.read(65536)
            if not data:
                break
            with self._lock:
                target.extend(data)

    def _take_pending(self) -> bytes:
        with self._lock:
            data = bytes(self._pending)
            self._pending.clear()
        return data

    def encode_block(self, left: np.ndarray, right: Optional[np.ndarray] = None) -> bytes:
        if self._channels == 2:
            if right is None:
                raise ValueError("Stereo encoder needs both channels")
            frames = np.column_stack([left, right])
        else:
            frames = np.asarray(left)
        payload = np.ascontiguousarray(frames, dtype="<i2").tobytes()
        try:
            self._process.stdin.write(payload)
        except BrokenPipeError as exc:
            raise RuntimeError(self._error_text() or "FFmpeg closed its input") from exc
        return self._take_pending()

    def flush(self) -> bytes:
        try:
            self._process.stdin.close()
        except BrokenPipeError:
            pass
        returncode = self._process.wait()
        self._stdout_reader.join()
        self._stderr_reader.join()
        self._close_streams()
        if returncode != 0:
            raise RuntimeError(self._error_text() or f"FFmpeg exited with code {returncode}")
        return self._take_pending()

    def close(self) -> None:
        if self._process.poll() is None:
            self._process.kill()
        self._process.wait()
        self._stdout_reader.join(timeout=5)
        self._stderr_reader.join(timeout=5)
        self._close_streams()

    def _close_streams(self) -> None:
        for stream in (self._process.stdin, self._process.stdout, self._process.stderr):
            if stream is not None and not stream.closed:
                try:
                    stream.close()
                except OSError as exc:
                    logger.debug("Failed to close ffmpeg pipe: %s", exc)

    def _error_text(self) -> str:
        with self._lock:
            return bytes(self._errors).decode("utf-8", errors="replace").strip()
