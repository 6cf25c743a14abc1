"""
Unit tests for applying fade envelopes to a SampleBuffer.
"""
import numpy as np
import pytest

from audio_normalizer.buffer import SampleBuffer
from audio_normalizer.dsp.fade_curves import FadeCurve
from audio_normalizer.dsp.fades import FadeSpec, apply_fades, fade_frame_count


def _ones(frames: int, channels: int = 2, sample_rate: int = 1000) -> SampleBuffer:
    return SampleBuffer(
        samples=np.ones(frames * channels, dtype=np.float32),
        channel_count=channels,
        sample_rate=sample_rate,
    )


def test_zero_duration_is_bit_identical(sine_buffer):
    buffer = sine_buffer(seconds=0.5, channels=2)
    before = buffer.samples.copy()
    apply_fades(buffer, FadeSpec(fade_in_seconds=0.0, fade_out_seconds=0.0, curve=FadeCurve.EXPONENTIAL))
    assert np.array_equal(buffer.samples, before)


def test_fade_in_applies_same_gain_to_every_channel():
    buffer = _ones(1000)
    apply_fades(buffer, FadeSpec(fade_in_seconds=0.1))
    frames = buffer.frames()
    assert np.array_equal(frames[:, 0], frames[:, 1])
    assert frames[0, 0] == 0.0
    assert frames[50, 0] == pytest.approx(0.5)
    assert np.all(frames[100:] == 1.0)


def test_fade_out_covers_tail():
    buffer = _ones(1000)
    apply_fades(buffer, FadeSpec(fade_out_seconds=0.1))
    frames = buffer.frames()
    assert np.all(frames[:900] == 1.0)
    assert frames[900, 0] == pytest.approx(1.0)
    assert frames[950, 0] == pytest.approx(0.5)
    assert frames[999, 0] == pytest.approx(0.01)


@pytest.mark.parametrize("curve", list(FadeCurve))
def test_whole_buffer_fade_in_matches_curve(curve):
    frames_total = 480
    buffer = _ones(frames_total, channels=1, sample_rate=48000)
    apply_fades(buffer, FadeSpec(fade_in_seconds=1.0, curve=curve))
    assert buffer.samples[0] == pytest.approx(float(curve.in_gain(0.0)), abs=1e-6)
    last_t = (frames_total - 1) / frames_total
    assert buffer.samples[-1] == pytest.approx(float(curve.in_gain(last_t)), abs=1e-6)


def test_overlapping_fades_compound():
    buffer = _ones(100, channels=1, sample_rate=100)
    apply_fades(buffer, FadeSpec(fade_in_seconds=1.0, fade_out_seconds=1.0))
    t = np.arange(100) / 100
    assert np.allclose(buffer.samples, t * (1.0 - t), atol=1e-6)


def test_fade_frame_count_rounds_and_caps():
    assert fade_frame_count(0.0105, 1000, 500) == 10
    assert fade_frame_count(0.0106, 1000, 500) == 11
    assert fade_frame_count(10.0, 1000, 500) == 500


def test_negative_duration_rejected():
    with pytest.raises(ValueError):
        FadeSpec(fade_in_seconds=-1.0)
