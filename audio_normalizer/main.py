import argparse
import sys

from audio_normalizer import __version__
from audio_normalizer.config import DEFAULT_MAX_PEAK_DB, NormalizeConfig
from audio_normalizer.dsp.fade_curves import CURVE_ALIASES, FadeCurve
from audio_normalizer.exceptions import AudioNormalizerError
from audio_normalizer.processor import AudioNormalizer
from audio_normalizer.utils.logger import get_logger, level_from_flags, setup_logging

logger = get_logger(__name__)

EXAMPLES = """
Examples:
  audio-normalizer -m -12 input.wav output.wav
  audio-normalizer -l -23 input.wav output.wav
  audio-normalizer -l -14 --fade-in 2 --fade-out 3 --fade-curve exponential input.mp3 output.wav
  audio-normalizer --peak-only input.mp3
  audio-normalizer --lufs-only input.wav
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="audio-normalizer",
        description="Audio normalization with fade effects",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", help="Input audio file")
    parser.add_argument(
        "output", nargs="?",
        help="Output audio file (omit to only report the peak level)",
    )
    parser.add_argument(
        "-m", "--max-peak", type=float, default=DEFAULT_MAX_PEAK_DB,
        help="Target peak level in dB (default: %(default)s)",
    )
    parser.add_argument(
        "-l", "--lufs", type=float, default=None,
        help="Target LUFS level; switches to loudness normalization",
    )
    parser.add_argument("--fade-in", type=float, default=0.0, help="Fade in duration in seconds")
    parser.add_argument("--fade-out", type=float, default=0.0, help="Fade out duration in seconds")
    parser.add_argument(
        "--fade-curve", default=FadeCurve.LINEAR.value,
        choices=[curve.value for curve in FadeCurve] + list(CURVE_ALIASES),
        help="Fade curve type (default: %(default)s)",
    )
    parser.add_argument(
        "--force-clip", action="store_true",
        help="Keep the requested LUFS target even if the output clips",
    )
    parser.add_argument(
        "--bit-depth", type=int, choices=[8, 16, 24, 32], default=None,
        help="Output bit depth (default: same as input, else 16; 32 writes float)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--peak-only", action="store_true", help="Only show the peak level of the input")
    mode.add_argument("--lufs-only", action="store_true", help="Only show the LUFS level of the input")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug level logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Error level logging only")
    parser.add_argument("--log-file", default=None, help="Also write a debug log to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run(args: argparse.Namespace) -> int:
    if args.fade_in < 0 or args.fade_out < 0:
        logger.error("Fade durations must be non-negative")
        return 1

    normalizer = AudioNormalizer(NormalizeConfig.from_args(args))

    if args.lufs_only:
        levels = normalizer.analyze(args.input, peak=False, loudness=True)
        logger.info(f"LUFS level: {levels.integrated_loudness_lufs:.2f} LUFS")
        return 0

    if args.peak_only or args.output is None:
        levels = normalizer.analyze(args.input, peak=True, loudness=False)
        logger.info(f"Peak level: {levels.peak_db:.2f} dB")
        return 0

    result = normalizer.normalize(args.input, args.output)
    plan = result.plan
    if plan.adjusted:
        logger.info(
            f"Requested {plan.target_level:.2f} {result.unit} was lowered to "
            f"{plan.achieved_level:.2f} {result.unit} to avoid clipping"
        )
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level_from_flags(args.verbose, args.quiet), log_file=args.log_file)
    logger.debug(f"Audio Normalizer v{__version__}")

    try:
        return run(args)
    except AudioNormalizerError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
