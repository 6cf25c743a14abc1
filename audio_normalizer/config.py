"""
Configuration dataclass for normalization runs.
"""
from dataclasses import dataclass
from typing import Optional

from audio_normalizer.dsp.fade_curves import FadeCurve
from audio_normalizer.dsp.fades import FadeSpec

DEFAULT_MAX_PEAK_DB = -12.0
DEFAULT_BIT_DEPTH = 16


@dataclass
class NormalizeConfig:
    """Configuration for a single normalization run."""
    target_peak_db: float = DEFAULT_MAX_PEAK_DB
    target_lufs: Optional[float] = None
    fade_in: float = 0.0
    fade_out: float = 0.0
    fade_curve: FadeCurve = FadeCurve.LINEAR
    force_clip: bool = False
    bit_depth: Optional[int] = None

    @property
    def loudness_mode(self) -> bool:
        """LUFS normalization is used whenever a LUFS target is set."""
        return self.target_lufs is not None

    @property
    def fade_spec(self) -> FadeSpec:
        return FadeSpec(
            fade_in_seconds=self.fade_in,
            fade_out_seconds=self.fade_out,
            curve=self.fade_curve,
        )

    @classmethod
    def from_args(cls, args) -> 'NormalizeConfig':
        """Create NormalizeConfig from parsed command-line arguments."""
        return cls(
            target_peak_db=args.max_peak,
            target_lufs=args.lufs,
            fade_in=args.fade_in,
            fade_out=args.fade_out,
            fade_curve=FadeCurve.from_string(args.fade_curve),
            force_clip=bool(args.force_clip),
            bit_depth=args.bit_depth,
        )
