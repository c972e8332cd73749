"""Target MP3 bitrate estimation from source file size."""

from __future__ import annotations

import logging
import math
from typing import Optional

from audiocutter.audio.types import DEFAULT_BITRATE_KBPS


logger = logging.getLogger(__name__)

# Share of the file assumed to be audio payload (the rest is container/tags).
PAYLOAD_RATIO = 0.95

_THRESHOLDS = (
    (160, 128),
    (224, 192),
    (288, 256),
)
_TOP_BITRATE = 320

ESTIMABLE_SUFFIXES = {".mp3"}


def quantize_bitrate(kbps: float) -> int:
    for limit, bitrate in _THRESHOLDS:
        if kbps <= limit:
            return bitrate
    return _TOP_BITRATE


def estimate_bitrate(
    file_size_bytes: Optional[int],
    duration_seconds: Optional[float],
    *,
    source_suffix: str = ".mp3",
    default: int = DEFAULT_BITRATE_KBPS,
) -> int:
    """Return the supported bitrate closest to the source's average rate.

    Falls back to ``default`` when the duration is unusable or the source is
    not an MP3 (other containers do not map onto an MP3 bitrate).
    """

    if source_suffix.lower() not in ESTIMABLE_SUFFIXES:
        return default
    if not duration_seconds or not file_size_bytes:
        return default
    try:
        duration = float(duration_seconds)
        size = float(file_size_bytes)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(duration) or duration <= 0.0 or size <= 0.0:
        return default

    estimated = round(size * 8 * PAYLOAD_RATIO / duration / 1000)
    bitrate = quantize_bitrate(estimated)
    logger.debug("Estimated source bitrate %s kbps -> %s kbps", estimated, bitrate)
    return bitrate
