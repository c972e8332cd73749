"""Offline audio rendering: trim, fade and encode."""

from __future__ import annotations

from audiocutter.audio.bitrate import estimate_bitrate, quantize_bitrate
from audiocutter.audio.mp3 import MP3_BLOCK_FRAMES, FfmpegFrameEncoder, FrameEncoder, encode_mp3
from audiocutter.audio.render import FadeComposition, fade_envelope, render_cut
from audiocutter.audio.types import (
    DEFAULT_BITRATE_KBPS,
    SUPPORTED_BITRATES,
    CutWindow,
    EncodingParameters,
    OutputContainer,
    SampleBuffer,
)
from audiocutter.audio.wav import encode_wav, read_wav

__all__ = [
    "DEFAULT_BITRATE_KBPS",
    "MP3_BLOCK_FRAMES",
    "SUPPORTED_BITRATES",
    "CutWindow",
    "EncodingParameters",
    "FadeComposition",
    "FfmpegFrameEncoder",
    "FrameEncoder",
    "OutputContainer",
    "SampleBuffer",
    "encode_mp3",
    "encode_wav",
    "estimate_bitrate",
    "fade_envelope",
    "quantize_bitrate",
    "read_wav",
    "render_cut",
]
