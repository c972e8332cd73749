"""Shared data structures for the rendering pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import numpy as np


SUPPORTED_BITRATES = (128, 192, 256, 320)
DEFAULT_BITRATE_KBPS = 256


class OutputContainer(Enum):
    MP3 = "mp3"
    WAV = "wav"

    @classmethod
    def from_path(cls, path: Path) -> "OutputContainer":
        """Pick the container from the destination extension.

        Only ``.mp3`` is encoded as MP3; everything else (M4A included) is
        written as WAV.
        """

        if Path(path).suffix.lower() == ".mp3":
            return cls.MP3
        return cls.WAV


@dataclass(frozen=True)
class SampleBuffer:
    """Decoded audio as a ``(channels, frames)`` float32 array."""

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self) -> None:
        data = np.asarray(self.samples, dtype=np.float32)
        if data.ndim == 1:
            data = data[np.newaxis, :]
        if data.ndim != 2 or data.shape[0] < 1:
            raise ValueError("SampleBuffer needs at least one channel")
        if int(self.sample_rate) <= 0:
            raise ValueError(f"Invalid sample rate: {self.sample_rate}")
        data.setflags(write=False)
        object.__setattr__(self, "samples", data)
        object.__setattr__(self, "sample_rate", int(self.sample_rate))

    @classmethod
    def from_channels(cls, channels, sample_rate: int) -> "SampleBuffer":
        rows = [np.asarray(channel, dtype=np.float32) for channel in channels]
        if not rows:
            raise ValueError("SampleBuffer needs at least one channel")
        if len({len(row) for row in rows}) > 1:
            raise ValueError("All channels must have the same length")
        return cls(np.stack(rows), sample_rate)

    @classmethod
    def from_interleaved(cls, frames, sample_rate: int) -> "SampleBuffer":
        """Build from a ``(frames, channels)`` array as returned by soundfile."""

        data = np.asarray(frames, dtype=np.float32)
        if data.ndim == 1:
            data = data[:, np.newaxis]
        return cls(data.T.copy(), sample_rate)

    @property
    def channel_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def frame_count(self) -> int:
        return int(self.samples.shape[1])

    @property
    def duration(self) -> float:
        return self.frame_count / float(self.sample_rate)

    def channel(self, index: int) -> np.ndarray:
        return self.samples[index]


@dataclass(frozen=True)
class CutWindow:
    intro_seconds: float
    outro_seconds: float
    fade_in_seconds: float = 0.0
    fade_out_seconds: float = 0.0

    @property
    def length_seconds(self) -> float:
        return self.outro_seconds - self.intro_seconds


@dataclass(frozen=True)
class EncodingParameters:
    channel_count: int
    sample_rate: int
    bitrate_kbps: int = DEFAULT_BITRATE_KBPS

    @classmethod
    def for_buffer(cls, buffer: SampleBuffer, bitrate_kbps: int = DEFAULT_BITRATE_KBPS) -> "EncodingParameters":
        return cls(channel_count=buffer.channel_count, sample_rate=buffer.sample_rate, bitrate_kbps=bitrate_kbps)
