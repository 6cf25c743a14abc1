"""
Fade-in / fade-out envelopes applied in place to a SampleBuffer.
"""
import math
from dataclasses import dataclass

from audio_normalizer.buffer import SampleBuffer
from audio_normalizer.dsp.fade_curves import FadeCurve, generate_fade_curve
from audio_normalizer.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class FadeSpec:
    """Fade durations in seconds (0 disables a side) and the curve for both."""
    fade_in_seconds: float = 0.0
    fade_out_seconds: float = 0.0
    curve: FadeCurve = FadeCurve.LINEAR

    def __post_init__(self):
        if self.fade_in_seconds < 0 or self.fade_out_seconds < 0:
            raise ValueError(
                f"Fade durations must be non-negative, got in={self.fade_in_seconds}, "
                f"out={self.fade_out_seconds}"
            )

    @property
    def enabled(self) -> bool:
        return self.fade_in_seconds > 0 or self.fade_out_seconds > 0


def fade_frame_count(seconds: float, sample_rate: int, total_frames: int) -> int:
    """Frames covered by a fade (rounded half up), capped at the buffer length."""
    return min(int(math.floor(seconds * sample_rate + 0.5)), total_frames)


def apply_fade_in(buffer: SampleBuffer, seconds: float, curve: FadeCurve = FadeCurve.LINEAR) -> int:
    """
    Apply a fade-in to the start of the buffer.

    Returns:
        Number of frames faded
    """
    n = fade_frame_count(seconds, buffer.sample_rate, buffer.frame_count)
    if n <= 0:
        return 0

    frames = buffer.frames()
    frames[:n] *= generate_fade_curve(curve, n, fade_in=True)[:, None]
    return n


def apply_fade_out(buffer: SampleBuffer, seconds: float, curve: FadeCurve = FadeCurve.LINEAR) -> int:
    """
    Apply a fade-out to the end of the buffer.

    Returns:
        Number of frames faded
    """
    total_frames = buffer.frame_count
    n = fade_frame_count(seconds, buffer.sample_rate, total_frames)
    if n <= 0:
        return 0

    frames = buffer.frames()
    frames[total_frames - n:] *= generate_fade_curve(curve, n, fade_in=False)[:, None]
    return n


def apply_fades(buffer: SampleBuffer, fade_spec: FadeSpec) -> None:
    """
    Apply both fades in place.

    The passes are independent: where the fade-in and fade-out windows
    overlap, a frame receives the product of both gains.
    """
    if not fade_spec.enabled:
        return

    faded_in = apply_fade_in(buffer, fade_spec.fade_in_seconds, fade_spec.curve)
    faded_out = apply_fade_out(buffer, fade_spec.fade_out_seconds, fade_spec.curve)
    logger.debug(
        f"Applied fades: in={faded_in} frames, out={faded_out} frames, "
        f"curve={fade_spec.curve.value}"
    )
