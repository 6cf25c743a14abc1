"""
Sample layouts a codec can hand back, and their conversion to float32.
"""
from enum import Enum
from typing import Optional

import numpy as np


class SampleLayout(Enum):
    """Enumeration of decoded sample encodings: (bits, signed, floating point)."""
    U8 = (8, False, False)
    U16 = (16, False, False)
    U24 = (24, False, False)
    U32 = (32, False, False)
    S8 = (8, True, False)
    S16 = (16, True, False)
    S24 = (24, True, False)
    S32 = (32, True, False)
    F32 = (32, True, True)
    F64 = (64, True, True)

    @property
    def bits(self) -> int:
        return self.value[0]

    @property
    def signed(self) -> bool:
        return self.value[1]

    @property
    def is_float(self) -> bool:
        return self.value[2]

    @classmethod
    def from_ffmpeg_name(cls, name: str) -> Optional['SampleLayout']:
        """
        Map an FFmpeg sample format name ("s16", "fltp", ...) to a layout.

        The planar suffix is ignored; planarity is a property of the frame,
        not of the sample encoding. Returns None for formats with no layout.
        """
        if name is None:
            return None
        return _FFMPEG_NAMES.get(name.rstrip('p'))


_FFMPEG_NAMES = {
    'u8': SampleLayout.U8,
    's16': SampleLayout.S16,
    's32': SampleLayout.S32,
    'flt': SampleLayout.F32,
    'dbl': SampleLayout.F64,
}


def _convert_unsigned(samples: np.ndarray, bits: int) -> np.ndarray:
    midpoint = float(2 ** (bits - 1))
    half_range = midpoint - 1.0
    return ((samples.astype(np.float64) - midpoint) / half_range).astype(np.float32)


def _convert_signed(samples: np.ndarray, bits: int) -> np.ndarray:
    max_magnitude = float(2 ** (bits - 1) - 1)
    return (samples.astype(np.float64) / max_magnitude).astype(np.float32)


def to_float32(samples: np.ndarray, layout: SampleLayout) -> np.ndarray:
    """
    Convert raw decoded samples of the given layout to float32.

    Unsigned N-bit samples are centred on their midpoint and divided by the
    half range, signed samples are divided by their maximum magnitude, and
    float samples keep their range (float64 is narrowed).

    Args:
        samples: Array of raw samples (any shape)
        layout: Encoding of ``samples``

    Returns:
        float32 array of the same shape
    """
    if layout is SampleLayout.F32:
        return samples.astype(np.float32, copy=False)
    if layout is SampleLayout.F64:
        return samples.astype(np.float32)
    if layout.signed:
        return _convert_signed(samples, layout.bits)
    return _convert_unsigned(samples, layout.bits)


def interleave(channels: np.ndarray) -> np.ndarray:
    """Interleave a planar (channels, frames) array into frame-major order."""
    return np.ascontiguousarray(channels.T).reshape(-1)
