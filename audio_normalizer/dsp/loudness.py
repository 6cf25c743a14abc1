"""
Peak and integrated loudness measurement.
"""
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pyloudnorm as pyln

from audio_normalizer.buffer import SampleBuffer
from audio_normalizer.codec.decoder import decode_audio
from audio_normalizer.exceptions import MeasurementError
from audio_normalizer.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class LevelMeasurement:
    """Levels of one buffer. Fields not measured are None."""
    peak_db: Optional[float] = None
    integrated_loudness_lufs: Optional[float] = None


def linear_to_db(value: float) -> float:
    if value <= 0.0:
        return float("-inf")
    return 20.0 * np.log10(value)


def db_to_linear(db: float) -> float:
    return float(10.0 ** (db / 20.0))


def measure_peak(buffer: SampleBuffer) -> float:
    """
    Peak level of the buffer in dBFS.

    Returns:
        20 * log10(max |sample|), or -inf for an all-zero buffer
    """
    if buffer.samples.size == 0:
        return float("-inf")
    peak = float(np.max(np.abs(buffer.samples)))
    return float(linear_to_db(peak))


# BS.1770 gives the LFE channel no weight; FFmpeg and WAVE_FORMAT_EXTENSIBLE
# default layouts put it at index 3 for 5.1, 6.1 and 7.1.
LFE_CHANNEL_INDEX = 3
MAX_METERED_CHANNELS = 5


def metering_frames(buffer: SampleBuffer) -> np.ndarray:
    """
    Frames of the channels handed to the loudness meter.

    Buffers of up to five channels are metered as they are. Wider buffers
    are assumed to use the default surround order (FL, FR, FC, LFE, ...):
    the LFE column is dropped, and if more than five channels remain only
    the first five are metered.
    """
    frames = buffer.frames()
    if buffer.channel_count <= MAX_METERED_CHANNELS:
        return frames

    frames = np.delete(frames, LFE_CHANNEL_INDEX, axis=1)
    if frames.shape[1] > MAX_METERED_CHANNELS:
        logger.warning(
            f"Loudness meter supports {MAX_METERED_CHANNELS} channels; "
            f"ignoring {frames.shape[1] - MAX_METERED_CHANNELS} of {buffer.channel_count} "
            f"channels (LFE already excluded)"
        )
        frames = frames[:, :MAX_METERED_CHANNELS]
    return frames


def measure_loudness(buffer: SampleBuffer) -> float:
    """
    Integrated loudness of the whole buffer in LUFS (ITU-R BS.1770).

    The whole buffer is handed to the meter in one call and the single
    global value is returned. Silence and buffers shorter than one 400 ms
    gating block measure as -inf. See metering_frames for how buffers of
    more than five channels are metered.
    """
    meter = pyln.Meter(buffer.sample_rate)
    if buffer.frame_count < meter.block_size * buffer.sample_rate:
        logger.warning(
            f"Audio is shorter than one {meter.block_size * 1000:.0f} ms gating block "
            f"({buffer.duration_seconds:.3f}s); loudness is -inf"
        )
        return float("-inf")

    try:
        with np.errstate(divide="ignore"):
            loudness = meter.integrated_loudness(metering_frames(buffer))
    except ValueError as e:
        raise MeasurementError(f"Cannot measure loudness: {e}") from e

    return float(loudness)


def measure_levels(buffer: SampleBuffer, peak: bool = True, loudness: bool = True) -> LevelMeasurement:
    """Measure the requested levels of a buffer."""
    measurement = LevelMeasurement()
    if peak:
        measurement.peak_db = measure_peak(buffer)
        logger.debug(f"Peak level: {measurement.peak_db:.2f} dB")
    if loudness:
        measurement.integrated_loudness_lufs = measure_loudness(buffer)
        logger.debug(f"Integrated loudness: {measurement.integrated_loudness_lufs:.2f} LUFS")
    return measurement


def get_peak_level(path) -> float:
    """Decode a file and return its peak level in dBFS."""
    return measure_peak(decode_audio(path))


def get_lufs_level(path) -> float:
    """Decode a file and return its integrated loudness in LUFS."""
    return measure_loudness(decode_audio(path))
