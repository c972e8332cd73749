import numpy as np
import pytest

from audiocutter.audio.render import FadeComposition, fade_envelope, render_cut
from audiocutter.audio.types import CutWindow, SampleBuffer
from audiocutter.core.errors import InvalidCutWindow


RATE = 44100


def _ramp_buffer(seconds: float, rate: int = RATE) -> SampleBuffer:
    frames = int(seconds * rate)
    return SampleBuffer.from_channels([np.arange(frames, dtype=np.float32) / frames], rate)


def _constant_buffer(seconds: float, value: float = 0.5, channels: int = 1, rate: int = RATE) -> SampleBuffer:
    frames = int(seconds * rate)
    return SampleBuffer(np.full((channels, frames), value, dtype=np.float32), rate)


def test_trim_frame_count_and_start_frame() -> None:
    source = _ramp_buffer(2.0)
    result = render_cut(source, CutWindow(intro_seconds=0.5, outro_seconds=1.5))

    assert result.frame_count == 44100
    assert result.sample_rate == RATE
    assert result.samples[0, 0] == source.samples[0, 22050]
    assert result.samples[0, -1] == source.samples[0, 22050 + 44100 - 1]


def test_trim_rounds_fractional_bounds() -> None:
    source = _ramp_buffer(2.0)
    window = CutWindow(intro_seconds=0.33333, outro_seconds=1.23456)
    result = render_cut(source, window)

    assert result.frame_count == round((1.23456 - 0.33333) * RATE)
    assert result.samples[0, 0] == source.samples[0, round(0.33333 * RATE)]


def test_render_leaves_source_untouched() -> None:
    source = _constant_buffer(1.0)
    before = source.samples.copy()
    render_cut(source, CutWindow(0.0, 1.0, fade_in_seconds=0.5, fade_out_seconds=0.5))
    assert np.array_equal(source.samples, before)


def test_fade_in_ramps_from_zero_to_full() -> None:
    source = _constant_buffer(2.0)
    result = render_cut(source, CutWindow(0.0, 2.0, fade_in_seconds=0.5))
    samples = result.samples[0]

    assert samples[0] == pytest.approx(0.0)
    assert samples[11025] == pytest.approx(0.25, abs=1e-4)
    assert samples[22050] == pytest.approx(0.5, abs=1e-6)
    assert samples[40000] == pytest.approx(0.5)


def test_fade_out_ramps_to_zero_at_tail() -> None:
    source = _constant_buffer(2.0)
    result = render_cut(source, CutWindow(0.0, 2.0, fade_out_seconds=0.5))
    samples = result.samples[0]
    fade_start = result.frame_count - 22050

    assert samples[fade_start] == pytest.approx(0.5, abs=1e-6)
    assert samples[fade_start + 11025] == pytest.approx(0.25, abs=1e-4)
    assert samples[-1] == pytest.approx(0.0, abs=1e-4)
    assert samples[1000] == pytest.approx(0.5)


def test_fade_envelope_values() -> None:
    gain = fade_envelope(5, 4, fade_in_seconds=1.0, fade_out_seconds=0.0)
    assert gain.tolist() == pytest.approx([0.0, 0.25, 0.5, 0.75, 1.0])

    gain = fade_envelope(5, 4, fade_in_seconds=0.0, fade_out_seconds=1.0)
    assert gain.tolist() == pytest.approx([1.0, 1.0, 0.75, 0.5, 0.25])


def test_overlapping_fades_last_write_wins() -> None:
    gain = fade_envelope(4, 4, fade_in_seconds=1.0, fade_out_seconds=1.0)
    # fade-out covers the whole window and replaces the fade-in
    assert gain.tolist() == pytest.approx([1.0, 0.75, 0.5, 0.25])


def test_overlapping_fades_multiply() -> None:
    gain = fade_envelope(4, 4, 1.0, 1.0, FadeComposition.MULTIPLY)
    assert gain.tolist() == pytest.approx([0.0, 0.25 * 0.75, 0.5 * 0.5, 0.75 * 0.25])


def test_fade_composition_parse() -> None:
    assert FadeComposition.parse("MULTIPLY") is FadeComposition.MULTIPLY
    assert FadeComposition.parse("bogus") is FadeComposition.OVERWRITE
    assert FadeComposition.parse(None, FadeComposition.MULTIPLY) is FadeComposition.MULTIPLY


def test_output_is_clamped() -> None:
    source = SampleBuffer(np.array([[2.0, -3.0, 0.25, 1.5]], dtype=np.float32), 4)
    result = render_cut(source, CutWindow(0.0, 1.0))
    assert result.samples[0].tolist() == [1.0, -1.0, 0.25, 1.0]


def test_stereo_channels_are_kept_apart() -> None:
    left = np.full(RATE, 0.25, dtype=np.float32)
    right = np.full(RATE, -0.75, dtype=np.float32)
    source = SampleBuffer.from_channels([left, right], RATE)
    result = render_cut(source, CutWindow(0.25, 0.75))

    assert result.channel_count == 2
    assert np.allclose(result.samples[0], 0.25)
    assert np.allclose(result.samples[1], -0.75)


@pytest.mark.parametrize(
    "window",
    [
        CutWindow(intro_seconds=1.0, outro_seconds=1.0),
        CutWindow(intro_seconds=1.5, outro_seconds=0.5),
        CutWindow(intro_seconds=-0.1, outro_seconds=0.5),
        CutWindow(intro_seconds=0.0, outro_seconds=5.0),
        CutWindow(intro_seconds=0.0, outro_seconds=1.0, fade_in_seconds=-1.0),
        CutWindow(intro_seconds=0.0, outro_seconds=float("nan")),
        CutWindow(intro_seconds=0.0, outro_seconds=0.00001),
    ],
)
def test_invalid_windows_are_rejected(window: CutWindow) -> None:
    with pytest.raises(InvalidCutWindow):
        render_cut(_constant_buffer(2.0), window)
