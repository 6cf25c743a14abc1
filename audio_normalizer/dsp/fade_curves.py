"""
Fade curve types and their gain formulas.
"""
from enum import Enum
from typing import Union

import numpy as np

_LN_0_1 = np.log(0.1)


class FadeCurve(Enum):
    """Enumeration of available fade curve types."""
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    LOGARITHMIC = "logarithmic"

    @classmethod
    def from_string(cls, curve_str: Union[str, None]) -> 'FadeCurve':
        """
        Convert string to FadeCurve enum, defaulting to LINEAR if None or invalid.

        Args:
            curve_str: Curve name or short alias ("exp", "log")

        Returns:
            FadeCurve enum value, defaults to LINEAR
        """
        if curve_str is None:
            return cls.LINEAR

        curve_str_lower = curve_str.lower().strip()
        curve_str_lower = CURVE_ALIASES.get(curve_str_lower, curve_str_lower)
        for curve in cls:
            if curve.value == curve_str_lower:
                return curve

        return cls.LINEAR

    def in_gain(self, t):
        """Fade-in gain at progress t in [0, 1]. Accepts scalars or arrays."""
        t = np.asarray(t, dtype=np.float64)
        if self is FadeCurve.EXPONENTIAL:
            return t ** 2
        if self is FadeCurve.LOGARITHMIC:
            return np.log(0.1 + 0.9 * t) / _LN_0_1
        return t

    def out_gain(self, t):
        """Fade-out gain at progress t in [0, 1]. Accepts scalars or arrays."""
        t = np.asarray(t, dtype=np.float64)
        if self is FadeCurve.EXPONENTIAL:
            return (1.0 - t) ** 2
        if self is FadeCurve.LOGARITHMIC:
            return np.log(1.0 - 0.9 * t) / _LN_0_1
        return 1.0 - t


CURVE_ALIASES = {
    "exp": FadeCurve.EXPONENTIAL.value,
    "log": FadeCurve.LOGARITHMIC.value,
}


def generate_fade_curve(
    curve_type: FadeCurve,
    num_frames: int,
    fade_in: bool = True
) -> np.ndarray:
    """
    Generate per-frame gain multipliers for a fade.

    Progress runs t = f / num_frames for f in [0, num_frames), so the last
    frame sits just short of t = 1.

    Args:
        curve_type: Type of fade curve
        num_frames: Number of frames in the fade
        fade_in: Use the curve's fade-in formula if True, fade-out otherwise

    Returns:
        float32 array of length num_frames
    """
    if num_frames <= 0:
        return np.array([], dtype=np.float32)

    progress = np.arange(num_frames, dtype=np.float64) / num_frames
    if fade_in:
        gain = curve_type.in_gain(progress)
    else:
        gain = curve_type.out_gain(progress)
    return gain.astype(np.float32)
