"""
Gain planning with clipping safety, and gain application.

A requested target level is turned into a gain in dB. Before the gain is
used, every sample is checked for overflow past full scale. In the default
auto-safety mode an overflowing request is lowered to the highest level that
keeps the peak SAFETY_MARGIN_DB below 0 dBFS; with ``force_clip`` the request
is honoured and the overflow is clamped away.
"""
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from audio_normalizer.buffer import SampleBuffer
from audio_normalizer.dsp.loudness import db_to_linear, measure_loudness, measure_peak
from audio_normalizer.utils.logger import get_logger

logger = get_logger(__name__)

SAFETY_MARGIN_DB = 0.5


@dataclass
class ClippingAnalysis:
    """Whether a requested gain would overflow full scale, and how far it may go."""
    would_clip: bool
    max_safe_level: float
    current_peak_db: float
    headroom_db: float


@dataclass
class GainPlan:
    """Outcome of planning a gain toward a target level."""
    requested_gain_db: float
    gain_db: float
    target_level: float
    achieved_level: float
    analysis: ClippingAnalysis
    adjusted: bool = False
    forced: bool = False


def would_clip(buffer: SampleBuffer, gain_db: float) -> bool:
    """True if any sample multiplied by the gain exceeds magnitude 1.0."""
    gain = np.float32(db_to_linear(gain_db))
    return bool(np.any(np.abs(buffer.samples * gain) > 1.0))


def analyze_clipping(
    buffer: SampleBuffer,
    current_level: float,
    gain_db: float,
    current_peak_db: Optional[float] = None,
) -> ClippingAnalysis:
    """
    Check a gain against the sample range.

    Args:
        buffer: Samples the gain would be applied to
        current_level: Current level in the unit of the target (dB or LUFS)
        gain_db: Gain to test
        current_peak_db: Peak of the buffer, measured if not given

    Returns:
        ClippingAnalysis for the gain
    """
    if current_peak_db is None:
        current_peak_db = measure_peak(buffer)
    headroom_db = 0.0 - current_peak_db

    if math.isinf(current_peak_db):
        # Silence never clips
        return ClippingAnalysis(
            would_clip=False,
            max_safe_level=math.inf,
            current_peak_db=current_peak_db,
            headroom_db=headroom_db,
        )

    return ClippingAnalysis(
        would_clip=would_clip(buffer, gain_db),
        max_safe_level=current_level + headroom_db - SAFETY_MARGIN_DB,
        current_peak_db=current_peak_db,
        headroom_db=headroom_db,
    )


def plan_gain(
    buffer: SampleBuffer,
    current_level: float,
    target_level: float,
    force_clip: bool = False,
    current_peak_db: Optional[float] = None,
    unit: str = "dB",
) -> GainPlan:
    """
    Turn a target level into a gain that is safe to apply.

    Args:
        buffer: Samples the gain will be applied to
        current_level: Current level (peak dB or LUFS, same unit as target)
        target_level: Requested level
        force_clip: Apply the requested gain even if it clips
        current_peak_db: Peak of the buffer, measured if not given
        unit: Unit label used in log messages

    Returns:
        GainPlan with the realized gain and level
    """
    if math.isinf(current_level):
        logger.warning(
            f"Current level is {current_level} {unit}; audio is silent or too short to measure, "
            f"leaving gain unchanged"
        )
        peak_db = measure_peak(buffer) if current_peak_db is None else current_peak_db
        return GainPlan(
            requested_gain_db=0.0,
            gain_db=0.0,
            target_level=target_level,
            achieved_level=current_level,
            analysis=ClippingAnalysis(
                would_clip=False,
                max_safe_level=math.inf,
                current_peak_db=peak_db,
                headroom_db=0.0 - peak_db,
            ),
        )

    requested_gain_db = target_level - current_level
    analysis = analyze_clipping(buffer, current_level, requested_gain_db, current_peak_db)
    logger.debug(
        f"Requested gain {requested_gain_db:+.2f} dB; peak {analysis.current_peak_db:.2f} dB, "
        f"headroom {analysis.headroom_db:.2f} dB, would clip: {analysis.would_clip}"
    )

    if not analysis.would_clip:
        return GainPlan(
            requested_gain_db=requested_gain_db,
            gain_db=requested_gain_db,
            target_level=target_level,
            achieved_level=target_level,
            analysis=analysis,
        )

    if force_clip:
        logger.warning(
            f"Target {target_level:.2f} {unit} requires {requested_gain_db:+.2f} dB of gain "
            f"but only {analysis.headroom_db:.2f} dB of headroom is available; "
            f"output will contain clipping artifacts"
        )
        return GainPlan(
            requested_gain_db=requested_gain_db,
            gain_db=requested_gain_db,
            target_level=target_level,
            achieved_level=target_level,
            analysis=analysis,
            forced=True,
        )

    gain_db = analysis.max_safe_level - current_level
    logger.warning(
        f"Target {target_level:.2f} {unit} would clip; adjusted to {analysis.max_safe_level:.2f} {unit} "
        f"({SAFETY_MARGIN_DB} dB below full scale). Use force_clip to keep the requested level"
    )
    return GainPlan(
        requested_gain_db=requested_gain_db,
        gain_db=gain_db,
        target_level=target_level,
        achieved_level=analysis.max_safe_level,
        analysis=analysis,
        adjusted=True,
    )


def apply_gain(buffer: SampleBuffer, gain_db: float) -> None:
    """
    Multiply every sample by the gain in place, then hard-clamp to [-1, 1].
    """
    gain = np.float32(db_to_linear(gain_db))
    np.multiply(buffer.samples, gain, out=buffer.samples)
    np.clip(buffer.samples, -1.0, 1.0, out=buffer.samples)


def normalize_peak(buffer: SampleBuffer, target_peak_db: float) -> GainPlan:
    """
    Peak normalization.
    Raises or lowers gain so the max peak reaches target_peak_db.

    The target is the buffer's own peak, so only targets above 0 dBFS can
    clip; those are applied as requested and clamped.
    """
    current_peak_db = measure_peak(buffer)
    plan = plan_gain(
        buffer,
        current_level=current_peak_db,
        target_level=target_peak_db,
        force_clip=True,
        current_peak_db=current_peak_db,
        unit="dB",
    )
    apply_gain(buffer, plan.gain_db)
    return plan


def normalize_loudness(
    buffer: SampleBuffer,
    target_lufs: float,
    force_clip: bool = False,
    current_lufs: Optional[float] = None,
) -> GainPlan:
    """
    Loudness normalization toward target_lufs with clipping safety.

    Args:
        buffer: Samples to normalize in place
        target_lufs: Requested integrated loudness
        force_clip: Keep the requested loudness even if samples clip
        current_lufs: Integrated loudness of the buffer, measured if not given

    Returns:
        GainPlan describing the gain that was applied
    """
    if current_lufs is None:
        current_lufs = measure_loudness(buffer)
    plan = plan_gain(
        buffer,
        current_level=current_lufs,
        target_level=target_lufs,
        force_clip=force_clip,
        unit="LUFS",
    )
    apply_gain(buffer, plan.gain_db)
    return plan
