"""Waveform reduction for drawing."""

from __future__ import annotations

import numpy as np

from audiocutter.audio.types import SampleBuffer


def compute_peaks(buffer: SampleBuffer, columns: int, *, normalize: bool = True) -> np.ndarray:
    """Return a ``(columns, 2)`` array of per-column (min, max) values.

    Channels are folded together by taking the extreme across all of them.
    With ``normalize`` the result is scaled so the loudest peak reaches 1.
    """

    columns = max(1, int(columns))
    peaks = np.zeros((columns, 2), dtype=np.float32)
    if buffer.frame_count == 0:
        return peaks
    low = buffer.samples.min(axis=0)
    high = buffer.samples.max(axis=0)
    edges = np.linspace(0, buffer.frame_count, columns + 1).astype(np.int64)
    for index in range(columns):
        start, end = edges[index], edges[index + 1]
        if end <= start:
            end = min(start + 1, buffer.frame_count)
            start = end - 1
        peaks[index, 0] = low[start:end].min()
        peaks[index, 1] = high[start:end].max()
    if normalize:
        scale = float(np.abs(peaks).max())
        if scale > 0.0:
            peaks /= scale
    return peaks
