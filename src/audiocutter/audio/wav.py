"""Canonical 16-bit PCM WAV serialization."""

from __future__ import annotations

import struct

import numpy as np

from audiocutter.audio.pcm import float_to_int16, int16_to_float
from audiocutter.audio.types import SampleBuffer


WAV_HEADER_SIZE = 44
_BYTES_PER_SAMPLE = 2
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


def wav_header(channel_count: int, sample_rate: int, frame_count: int) -> bytes:
    block_align = channel_count * _BYTES_PER_SAMPLE
    data_length = frame_count * block_align
    return _HEADER.pack(
        b"RIFF",
        36 + data_length,
        b"WAVE",
        b"fmt ",
        16,
        1,
        channel_count,
        sample_rate,
        sample_rate * block_align,
        block_align,
        16,
        b"data",
        data_length,
    )


def encode_wav(buffer: SampleBuffer) -> bytes:
    """Serialize ``buffer`` as a 44-byte header plus interleaved int16 frames."""

    pcm = float_to_int16(buffer.samples)
    payload = np.ascontiguousarray(pcm.T).astype("<i2", copy=False).tobytes()
    return wav_header(buffer.channel_count, buffer.sample_rate, buffer.frame_count) + payload


def read_wav(data: bytes) -> SampleBuffer:
    """Parse bytes laid out exactly as :func:`encode_wav` writes them."""

    if len(data) < WAV_HEADER_SIZE:
        raise ValueError("WAV data is shorter than its header")
    (
        riff,
        _riff_size,
        wave,
        fmt,
        fmt_size,
        audio_format,
        channels,
        sample_rate,
        _byte_rate,
        block_align,
        bits,
        data_id,
        data_length,
    ) = _HEADER.unpack_from(data, 0)
    if riff != b"RIFF" or wave != b"WAVE" or fmt != b"fmt " or data_id != b"data":
        raise ValueError("Not a canonical WAV header")
    if fmt_size != 16 or audio_format != 1 or bits != 16 or channels < 1:
        raise ValueError("Only 16-bit PCM WAV is supported")
    if block_align != channels * _BYTES_PER_SAMPLE:
        raise ValueError("Inconsistent block alignment")
    payload = data[WAV_HEADER_SIZE : WAV_HEADER_SIZE + data_length]
    if len(payload) != data_length:
        raise ValueError("WAV data chunk is truncated")
    frames = np.frombuffer(payload, dtype="<i2").reshape(-1, channels)
    return SampleBuffer(int16_to_float(frames.T), sample_rate)
