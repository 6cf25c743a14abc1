"""
AudioNormalizer orchestrates the whole pipeline:
decode -> measure -> plan and apply gain -> fades -> encode.
"""
from dataclasses import dataclass
from typing import Optional

from audio_normalizer.buffer import SampleBuffer
from audio_normalizer.codec.decoder import decode_audio
from audio_normalizer.codec.encoder import write_audio
from audio_normalizer.config import DEFAULT_BIT_DEPTH, NormalizeConfig
from audio_normalizer.dsp.fades import apply_fades
from audio_normalizer.dsp.loudness import LevelMeasurement, measure_levels
from audio_normalizer.dsp.normalization import GainPlan, normalize_loudness, normalize_peak
from audio_normalizer.utils.logger import get_logger, log_performance

logger = get_logger(__name__)


@dataclass
class NormalizeResult:
    """What a normalization run measured, applied and wrote."""
    input_path: str
    output_path: str
    before: LevelMeasurement
    plan: GainPlan
    unit: str


class AudioNormalizer:
    """Main orchestrator for the normalization pipeline."""

    def __init__(self, config: Optional[NormalizeConfig] = None):
        self.config = config or NormalizeConfig()

    def analyze(self, input_path, peak: bool = True, loudness: bool = False) -> LevelMeasurement:
        """Decode a file and measure it without writing anything."""
        logger.info(f"Analyzing: {input_path}")
        buffer = decode_audio(input_path)
        return measure_levels(buffer, peak=peak, loudness=loudness)

    def process_buffer(self, buffer: SampleBuffer) -> GainPlan:
        """
        Normalize and fade a decoded buffer in place.

        Returns:
            GainPlan for the gain that was applied
        """
        config = self.config
        if config.loudness_mode:
            plan = normalize_loudness(buffer, config.target_lufs, force_clip=config.force_clip)
        else:
            plan = normalize_peak(buffer, config.target_peak_db)

        apply_fades(buffer, config.fade_spec)
        return plan

    def _output_encoding(self, buffer: SampleBuffer):
        if self.config.bit_depth is not None:
            return self.config.bit_depth, None
        if buffer.bit_depth in (8, 16, 24, 32):
            return buffer.bit_depth, buffer.floating_point
        if buffer.floating_point:
            # 64-bit float sources are written as 32-bit float
            return 32, True
        return DEFAULT_BIT_DEPTH, None

    @log_performance
    def normalize(self, input_path, output_path) -> NormalizeResult:
        """
        Run the full pipeline from input file to output file.

        Args:
            input_path: File to read
            output_path: File to write; compressed extensions fall back to WAV

        Returns:
            NormalizeResult
        """
        config = self.config
        unit = "LUFS" if config.loudness_mode else "dB"
        logger.debug(f"Input file: {input_path}")
        logger.debug(f"Output file: {output_path}")

        buffer = decode_audio(input_path)
        before = measure_levels(buffer, peak=True, loudness=config.loudness_mode)

        plan = self.process_buffer(buffer)

        bit_depth, floating_point = self._output_encoding(buffer)
        written = write_audio(output_path, buffer, bit_depth=bit_depth, floating_point=floating_point)

        logger.info(
            f"{'LUFS' if config.loudness_mode else 'Peak'} normalization completed: "
            f"{input_path} -> {written} (target: {plan.target_level:.2f} {unit}, "
            f"achieved: {plan.achieved_level:.2f} {unit}, gain: {plan.gain_db:+.2f} dB)"
        )
        if config.fade_spec.enabled:
            logger.info(
                f"Applied fades: in={config.fade_in:.2f}s, out={config.fade_out:.2f}s, "
                f"curve={config.fade_curve.value}"
            )

        return NormalizeResult(
            input_path=str(input_path),
            output_path=written,
            before=before,
            plan=plan,
            unit=unit,
        )
