"""
Write a SampleBuffer back to disk, quantizing float samples to the target
bit depth.
"""
import os
from typing import Optional

import numpy as np
import soundfile as sf

from audio_normalizer.buffer import SampleBuffer
from audio_normalizer.codec.wav_writer import WavWriter
from audio_normalizer.exceptions import AudioIOError, EncodeError
from audio_normalizer.utils.logger import get_logger, log_performance

logger = get_logger(__name__)

PCM_BIT_DEPTHS = (8, 16, 24, 32)

# Largest positive code for each PCM width
_SCALE_FACTORS = {
    8: 127.0,
    16: 32767.0,
    24: 8388607.0,
    32: 2147483647.0,
}

# Compressed targets without an encoder are written as WAV instead
MP3_FALLBACK_BIT_DEPTH = 16
FLAC_MIN_BIT_DEPTH = 24


def scale_factor(bit_depth: int) -> float:
    """Full-scale multiplier for a PCM bit depth."""
    return _SCALE_FACTORS.get(bit_depth, float(2 ** (bit_depth - 1) - 1))


def quantize(samples: np.ndarray, bit_depth: int) -> np.ndarray:
    """
    Clamp float samples to [-1, 1], scale to the bit depth and round.

    Returns:
        int64 array of integer sample codes
    """
    clamped = np.clip(samples.astype(np.float64), -1.0, 1.0)
    return np.round(clamped * scale_factor(bit_depth)).astype(np.int64)


@log_performance
def write_audio(
    path,
    buffer: SampleBuffer,
    bit_depth: int = 16,
    floating_point: Optional[bool] = None,
) -> str:
    """
    Write a buffer to the format implied by the output extension.

    Args:
        path: Output path
        buffer: Samples to write
        bit_depth: Target bit depth (8, 16, 24 or 32)
        floating_point: Store IEEE float samples. Defaults to True for 32-bit.

    Returns:
        The path actually written (differs from ``path`` for compressed targets)
    """
    path = os.fspath(path)
    extension = os.path.splitext(path)[1].lower()

    if extension == ".mp3":
        return _write_mp3_fallback(path, buffer)
    if extension == ".flac":
        return _write_flac_fallback(path, buffer, bit_depth, floating_point)
    return write_wav(path, buffer, bit_depth, floating_point)


def write_wav(
    path: str,
    buffer: SampleBuffer,
    bit_depth: int = 16,
    floating_point: Optional[bool] = None,
) -> str:
    """Write an uncompressed WAV file."""
    if floating_point is None:
        floating_point = bit_depth == 32

    if floating_point and bit_depth != 32:
        raise EncodeError(f"Floating-point WAV output must be 32-bit, got {bit_depth}")
    if bit_depth not in PCM_BIT_DEPTHS:
        raise EncodeError(
            f"Unsupported bit depth {bit_depth}; expected one of {PCM_BIT_DEPTHS}"
        )

    try:
        if floating_point:
            clamped = np.clip(buffer.samples, -1.0, 1.0)
            sf.write(
                path,
                clamped.reshape(-1, buffer.channel_count),
                buffer.sample_rate,
                subtype="FLOAT",
                format="WAV",
            )
        else:
            with WavWriter(path, buffer.sample_rate, buffer.channel_count, bit_depth // 8) as writer:
                writer.write_samples(quantize(buffer.samples, bit_depth))
    except (OSError, sf.LibsndfileError) as e:
        raise AudioIOError(f"Failed to write {path}: {e}") from e

    logger.debug(
        f"Wrote {buffer.frame_count} frames to {path} "
        f"({bit_depth}-bit {'float' if floating_point else 'PCM'})"
    )
    return path


def _write_mp3_fallback(path: str, buffer: SampleBuffer) -> str:
    # TODO: encode through PyAV with the libmp3lame codec instead of falling back
    wav_path = os.path.splitext(path)[0] + ".wav"
    write_wav(wav_path, buffer, MP3_FALLBACK_BIT_DEPTH)
    logger.warning(
        f"MP3 output requested but not yet implemented. Wrote WAV instead: {wav_path}"
    )
    return wav_path


def _write_flac_fallback(
    path: str, buffer: SampleBuffer, bit_depth: int, floating_point: Optional[bool] = None
) -> str:
    actual_bit_depth = max(bit_depth, FLAC_MIN_BIT_DEPTH)
    wav_path = os.path.splitext(path)[0] + ".wav"
    write_wav(wav_path, buffer, actual_bit_depth, floating_point)
    logger.warning(
        f"FLAC output requested but not yet implemented. "
        f"Wrote {actual_bit_depth}-bit WAV instead: {wav_path}"
    )
    return wav_path
