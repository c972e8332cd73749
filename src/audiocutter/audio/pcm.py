"""Float to 16-bit PCM conversion shared by the encoders."""

from __future__ import annotations

import numpy as np


INT16_NEGATIVE_SCALE = 32768.0
INT16_POSITIVE_SCALE = 32767.0


def float_to_int16(samples) -> np.ndarray:
    """Clamp to [-1, 1] and scale asymmetrically to the int16 range.

    Negative values scale by 32768 and non-negative ones by 32767 so that both
    -1.0 and 1.0 land exactly on the int16 limits.
    """

    data = np.clip(np.asarray(samples, dtype=np.float64), -1.0, 1.0)
    scaled = np.where(data < 0.0, data * INT16_NEGATIVE_SCALE, data * INT16_POSITIVE_SCALE)
    return np.clip(np.rint(scaled), -32768, 32767).astype(np.int16)


def int16_to_float(samples) -> np.ndarray:
    data = np.asarray(samples, dtype=np.int16).astype(np.float64)
    return np.where(data < 0.0, data / INT16_NEGATIVE_SCALE, data / INT16_POSITIVE_SCALE).astype(np.float32)
