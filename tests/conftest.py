import numpy as np
import pytest
import soundfile as sf

from audio_normalizer.buffer import SampleBuffer


def _sine(
    frequency: float = 1000.0,
    amplitude: float = 0.5,
    seconds: float = 1.0,
    sample_rate: int = 48000,
    channels: int = 1,
) -> SampleBuffer:
    t = np.arange(int(seconds * sample_rate)) / sample_rate
    tone = (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)
    return SampleBuffer(samples=np.repeat(tone, channels), channel_count=channels, sample_rate=sample_rate)


def _constant(value: float, seconds: float = 1.0, sample_rate: int = 48000, channels: int = 1) -> SampleBuffer:
    frames = int(seconds * sample_rate)
    return SampleBuffer(
        samples=np.full(frames * channels, value, dtype=np.float32),
        channel_count=channels,
        sample_rate=sample_rate,
    )


@pytest.fixture
def sine_buffer():
    """Factory for sine tone buffers duplicated across channels."""
    return _sine


@pytest.fixture
def constant_buffer():
    """Factory for buffers holding one constant value."""
    return _constant


@pytest.fixture
def tone_file(tmp_path):
    """Factory writing a sine tone to disk with soundfile."""
    def write(name="tone.wav", amplitude=0.5, seconds=1.0, sample_rate=48000,
              channels=2, subtype="PCM_16", format=None):
        buffer = _sine(amplitude=amplitude, seconds=seconds, sample_rate=sample_rate, channels=channels)
        path = tmp_path / name
        sf.write(str(path), buffer.frames(), sample_rate, subtype=subtype, format=format)
        return path
    return write
