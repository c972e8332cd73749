import pytest

from audiocutter.audio.bitrate import estimate_bitrate, quantize_bitrate


@pytest.mark.parametrize(
    "kbps, expected",
    [(100, 128), (160, 128), (161, 192), (224, 192), (225, 256), (288, 256), (289, 320), (500, 320)],
)
def test_quantize_bitrate_thresholds(kbps: int, expected: int) -> None:
    assert quantize_bitrate(kbps) == expected


def test_estimate_bitrate_from_size_and_duration() -> None:
    # 60 s of 192 kbps audio plus 5% container overhead
    size = int(192_000 / 8 * 60 / 0.95)
    assert estimate_bitrate(size, 60.0) == 192


def test_estimate_bitrate_high_rate_source() -> None:
    size = int(320_000 / 8 * 30 / 0.95)
    assert estimate_bitrate(size, 30.0, source_suffix=".MP3") == 320


@pytest.mark.parametrize("duration", [0, 0.0, None, float("nan"), -3.0])
def test_estimate_bitrate_unusable_duration_uses_default(duration) -> None:
    assert estimate_bitrate(1_000_000, duration) == 256


def test_estimate_bitrate_non_mp3_source_uses_default() -> None:
    assert estimate_bitrate(5_000_000, 60.0, source_suffix=".m4a") == 256
    assert estimate_bitrate(5_000_000, 60.0, source_suffix=".m4a", default=192) == 192


def test_estimate_bitrate_missing_size_uses_default() -> None:
    assert estimate_bitrate(None, 60.0) == 256
