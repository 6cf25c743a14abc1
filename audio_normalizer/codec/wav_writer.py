"""
WavWriter: serialize already-quantized integer PCM to a WAV file.
"""

import wave
from typing import Optional

import numpy as np

from audio_normalizer.utils.logger import get_logger

logger = get_logger(__name__)


def pack_pcm(values: np.ndarray, sample_width: int) -> bytes:
    """
    Pack quantized integer samples into little-endian WAV sample bytes.

    8-bit WAV is unsigned, so values are offset by 128. 24-bit samples are
    written as the low three bytes of each little-endian int32.
    """
    values = np.asarray(values)
    if sample_width == 1:
        return (values.astype(np.int16) + 128).astype(np.uint8).tobytes()
    if sample_width == 2:
        return values.astype("<i2").tobytes()
    if sample_width == 3:
        wide = values.astype("<i4").view(np.uint8).reshape(-1, 4)
        return wide[:, :3].tobytes()
    if sample_width == 4:
        return values.astype("<i4").tobytes()
    raise ValueError(f"Unsupported PCM sample width: {sample_width} bytes")


class WavWriter:
    """
    PCM WAV writer.
    """

    def __init__(self, output_path: str, sample_rate: int, channels: int, sample_width: int = 2):
        self.output_path = output_path
        self.sample_rate = sample_rate
        self.channels = channels
        self.sample_width = sample_width
        self._wav: Optional[wave.Wave_write] = None

    def open(self) -> None:
        self._wav = wave.open(self.output_path, "wb")
        self._wav.setnchannels(self.channels)
        self._wav.setsampwidth(self.sample_width)
        self._wav.setframerate(self.sample_rate)

    def write_samples(self, values: np.ndarray) -> None:
        """Write interleaved, already-quantized integer samples."""
        if self._wav is None:
            raise RuntimeError("WavWriter is not open")

        if values.size % self.channels != 0:
            raise ValueError(
                f"{values.size} samples do not fill whole frames of {self.channels} channels"
            )
        self._wav.writeframes(pack_pcm(values, self.sample_width))

    def close(self) -> None:
        if self._wav is not None:
            self._wav.close()
            self._wav = None

    def __enter__(self) -> "WavWriter":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
