import io
import struct

import numpy as np
import pytest
import soundfile as sf

from audiocutter.audio.pcm import float_to_int16
from audiocutter.audio.types import SampleBuffer
from audiocutter.audio.wav import WAV_HEADER_SIZE, encode_wav, read_wav


def test_header_fields_are_canonical() -> None:
    buffer = SampleBuffer.from_channels([[0.0, 0.1, 0.2], [0.0, -0.1, -0.2]], 8000)
    data = encode_wav(buffer)

    assert len(data) == WAV_HEADER_SIZE + 3 * 2 * 2
    assert data[0:4] == b"RIFF"
    assert struct.unpack_from("<I", data, 4)[0] == 36 + 12
    assert data[8:12] == b"WAVE"
    assert data[12:16] == b"fmt "
    assert struct.unpack_from("<IHHIIHH", data, 16) == (16, 1, 2, 8000, 8000 * 2 * 2, 4, 16)
    assert data[36:40] == b"data"
    assert struct.unpack_from("<I", data, 40)[0] == 12


def test_sample_conversion_scales_asymmetrically() -> None:
    values = [-1.0, -0.5, 0.0, 0.5, 1.0, 1.5, -2.0]
    assert float_to_int16(values).tolist() == [-32768, -16384, 0, 16384, 32767, 32767, -32768]


def test_frames_are_interleaved_in_channel_order() -> None:
    buffer = SampleBuffer.from_channels([[0.5, 0.0], [-0.5, 1.0]], 44100)
    payload = encode_wav(buffer)[WAV_HEADER_SIZE:]
    assert struct.unpack("<4h", payload) == (16384, -16384, 0, 32767)


def test_round_trip_within_quantization_error() -> None:
    rng = np.random.default_rng(1234)
    samples = rng.uniform(-1.0, 1.0, size=(2, 1000)).astype(np.float32)
    buffer = SampleBuffer(samples, 22050)

    decoded = read_wav(encode_wav(buffer))

    assert decoded.sample_rate == 22050
    assert decoded.channel_count == 2
    assert decoded.frame_count == 1000
    assert np.max(np.abs(decoded.samples - samples)) <= 1.0 / 32767


def test_encoding_is_deterministic() -> None:
    buffer = SampleBuffer.from_channels([np.linspace(-1, 1, 500)], 48000)
    assert encode_wav(buffer) == encode_wav(buffer)


def test_output_is_readable_by_libsndfile() -> None:
    buffer = SampleBuffer.from_channels([[0.25, -0.25, 0.75], [0.0, 0.5, -1.0]], 16000)
    data, rate = sf.read(io.BytesIO(encode_wav(buffer)), dtype="int16", always_2d=True)

    assert rate == 16000
    assert data.T.tolist() == float_to_int16(buffer.samples).tolist()


def test_read_wav_rejects_foreign_data() -> None:
    with pytest.raises(ValueError):
        read_wav(b"not a wav file at all" * 4)
    with pytest.raises(ValueError):
        read_wav(b"RIFF")
