"""
Tests for the command-line entry point.
"""
import pytest
import soundfile as sf

from audio_normalizer.config import NormalizeConfig
from audio_normalizer.dsp.fade_curves import FadeCurve
from audio_normalizer.dsp.loudness import get_peak_level
from audio_normalizer.main import build_parser, main


def test_defaults():
    args = build_parser().parse_args(["in.wav"])
    config = NormalizeConfig.from_args(args)

    assert args.output is None
    assert config.target_peak_db == -12.0
    assert config.target_lufs is None
    assert not config.loudness_mode
    assert config.fade_curve is FadeCurve.LINEAR
    assert not config.fade_spec.enabled
    assert not config.force_clip


def test_fade_curve_short_aliases():
    exp = NormalizeConfig.from_args(build_parser().parse_args(["in.wav", "--fade-curve", "exp"]))
    log = NormalizeConfig.from_args(build_parser().parse_args(["in.wav", "--fade-curve", "log"]))

    assert exp.fade_curve is FadeCurve.EXPONENTIAL
    assert log.fade_curve is FadeCurve.LOGARITHMIC

    with pytest.raises(SystemExit):
        build_parser().parse_args(["in.wav", "--fade-curve", "cosine"])


def test_loudness_options():
    args = build_parser().parse_args([
        "in.wav", "out.wav", "--lufs", "-14", "--force-clip",
        "--fade-in", "1.5", "--fade-curve", "logarithmic", "--bit-depth", "24",
    ])
    config = NormalizeConfig.from_args(args)

    assert config.loudness_mode and config.target_lufs == -14.0
    assert config.force_clip
    assert config.fade_spec.fade_in_seconds == 1.5
    assert config.fade_curve is FadeCurve.LOGARITHMIC
    assert config.bit_depth == 24


def test_normalize_command(tmp_path, tone_file):
    source = tone_file(amplitude=0.5)
    output = tmp_path / "out.wav"

    assert main([str(source), str(output), "-m", "-3", "-q"]) == 0
    assert get_peak_level(output) == pytest.approx(-3.0, abs=0.01)


def test_analysis_only_modes(tmp_path, tone_file):
    source = tone_file(amplitude=0.5, seconds=1.0)

    assert main([str(source), "-q"]) == 0
    assert main([str(source), "--peak-only", "-q"]) == 0
    assert main([str(source), "--lufs-only", "-q"]) == 0
    assert sorted(p.name for p in tmp_path.iterdir()) == ["tone.wav"]


def test_missing_input_exits_non_zero(tmp_path):
    assert main([str(tmp_path / "missing.wav"), str(tmp_path / "out.wav"), "-q"]) == 1


def test_negative_fade_exits_non_zero(tmp_path, tone_file):
    source = tone_file()
    assert main([str(source), str(tmp_path / "out.wav"), "--fade-in", "-1", "-q"]) == 1


def test_bit_depth_option(tmp_path, tone_file):
    source = tone_file(subtype="PCM_16")
    output = tmp_path / "out.wav"

    assert main([str(source), str(output), "--bit-depth", "8", "-q"]) == 0
    assert sf.info(str(output)).subtype == "PCM_U8"

