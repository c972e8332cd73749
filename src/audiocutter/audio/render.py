"""Offline trim-and-fade rendering of a decoded buffer."""

from __future__ import annotations

import logging
import math
from enum import Enum

import numpy as np

from audiocutter.audio.types import CutWindow, SampleBuffer
from audiocutter.core.errors import InvalidCutWindow


logger = logging.getLogger(__name__)


class FadeComposition(Enum):
    """How overlapping fade-in and fade-out ramps combine."""

    OVERWRITE = "overwrite"  # fade-out replaces fade-in where they overlap
    MULTIPLY = "multiply"

    @classmethod
    def parse(cls, value: object, default: "FadeComposition | None" = None) -> "FadeComposition":
        fallback = default or cls.OVERWRITE
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return fallback


def _finite(value: float) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


def validate_window(window: CutWindow, duration: float, sample_rate: int) -> None:
    for name in ("intro_seconds", "outro_seconds", "fade_in_seconds", "fade_out_seconds"):
        if not _finite(getattr(window, name)):
            raise InvalidCutWindow(f"{name} is not a number")
    if window.intro_seconds < 0.0:
        raise InvalidCutWindow("Intro cut point is before the start of the file")
    if window.outro_seconds <= window.intro_seconds:
        raise InvalidCutWindow("Outro cut point must come after the intro cut point")
    half_frame = 0.5 / float(sample_rate)
    if window.outro_seconds > duration + half_frame:
        raise InvalidCutWindow("Outro cut point is past the end of the file")
    if window.fade_in_seconds < 0.0 or window.fade_out_seconds < 0.0:
        raise InvalidCutWindow("Fade durations cannot be negative")
    if window.fade_in_seconds + window.fade_out_seconds > window.length_seconds:
        logger.info(
            "Fades overlap (in=%.3f out=%.3f window=%.3f)",
            window.fade_in_seconds,
            window.fade_out_seconds,
            window.length_seconds,
        )


def fade_envelope(
    frame_count: int,
    sample_rate: int,
    fade_in_seconds: float,
    fade_out_seconds: float,
    composition: FadeComposition = FadeComposition.OVERWRITE,
) -> np.ndarray:
    """Return the per-frame gain for a window of ``frame_count`` frames.

    Fade-in ramps 0 -> 1 over ``[0, fade_in]``; fade-out ramps 1 -> 0 over
    ``[length - fade_out, length]``. With OVERWRITE the fade-out ramp replaces
    the fade-in gain from the fade-out start onwards.
    """

    gain = np.ones(frame_count, dtype=np.float64)
    if frame_count <= 0:
        return gain
    times = np.arange(frame_count, dtype=np.float64) / float(sample_rate)
    length = frame_count / float(sample_rate)

    if fade_in_seconds > 0.0:
        gain = np.clip(times / fade_in_seconds, 0.0, 1.0)

    if fade_out_seconds > 0.0:
        fade_out = np.clip((length - times) / fade_out_seconds, 0.0, 1.0)
        if composition is FadeComposition.MULTIPLY:
            gain = gain * fade_out
        else:
            region = times >= (length - fade_out_seconds)
            gain = np.where(region, fade_out, gain)
    return gain


def render_cut(
    source: SampleBuffer,
    window: CutWindow,
    *,
    composition: FadeComposition = FadeComposition.OVERWRITE,
) -> SampleBuffer:
    """Copy ``[intro, outro)`` out of ``source`` and apply the fade envelope.

    The source buffer is left untouched; the result is a new buffer whose
    samples are clamped to [-1, 1].
    """

    rate = source.sample_rate
    validate_window(window, source.duration, rate)

    start = int(round(window.intro_seconds * rate))
    frame_count = int(round(window.length_seconds * rate))
    if frame_count <= 0:
        raise InvalidCutWindow("Cut window is shorter than one sample")
    if start >= source.frame_count:
        raise InvalidCutWindow("Intro cut point is past the end of the file")

    segment = np.zeros((source.channel_count, frame_count), dtype=np.float64)
    available = min(frame_count, source.frame_count - start)
    segment[:, :available] = source.samples[:, start : start + available]

    gain = fade_envelope(
        frame_count,
        rate,
        window.fade_in_seconds,
        window.fade_out_seconds,
        composition,
    )
    rendered = np.clip(segment * gain[np.newaxis, :], -1.0, 1.0).astype(np.float32)
    logger.debug(
        "Rendered %d frames from frame %d (%d ch @ %d Hz)",
        frame_count,
        start,
        source.channel_count,
        rate,
    )
    return SampleBuffer(rendered, rate)
