"""
Unit tests for fade curve formulas and generation.
"""
import math

import numpy as np

from audio_normalizer.dsp.fade_curves import FadeCurve, generate_fade_curve


def test_fade_curve_enum():
    """Test FadeCurve enum values."""
    assert FadeCurve.LINEAR.value == "linear"
    assert FadeCurve.LOGARITHMIC.value == "logarithmic"
    assert FadeCurve.EXPONENTIAL.value == "exponential"


def test_fade_curve_from_string():
    """Test converting strings to FadeCurve."""
    assert FadeCurve.from_string("linear") == FadeCurve.LINEAR
    assert FadeCurve.from_string("logarithmic") == FadeCurve.LOGARITHMIC
    assert FadeCurve.from_string("exponential") == FadeCurve.EXPONENTIAL
    assert FadeCurve.from_string("EXP") == FadeCurve.EXPONENTIAL
    assert FadeCurve.from_string("log") == FadeCurve.LOGARITHMIC
    assert FadeCurve.from_string("  Linear  ") == FadeCurve.LINEAR
    assert FadeCurve.from_string(None) == FadeCurve.LINEAR
    assert FadeCurve.from_string("invalid") == FadeCurve.LINEAR


def test_linear_formulas():
    for t in (0.0, 0.25, 0.5, 1.0):
        assert math.isclose(FadeCurve.LINEAR.in_gain(t), t)
        assert math.isclose(FadeCurve.LINEAR.out_gain(t), 1.0 - t)


def test_exponential_formulas():
    assert math.isclose(FadeCurve.EXPONENTIAL.in_gain(0.5), 0.25)
    assert math.isclose(FadeCurve.EXPONENTIAL.out_gain(0.5), 0.25)
    assert math.isclose(FadeCurve.EXPONENTIAL.in_gain(1.0), 1.0)
    assert math.isclose(FadeCurve.EXPONENTIAL.out_gain(0.0), 1.0)


def test_logarithmic_formulas():
    ln_tenth = math.log(0.1)
    for t in (0.0, 0.3, 0.9):
        assert math.isclose(FadeCurve.LOGARITHMIC.in_gain(t), math.log(0.1 + 0.9 * t) / ln_tenth)
        assert math.isclose(FadeCurve.LOGARITHMIC.out_gain(t), math.log(1.0 - 0.9 * t) / ln_tenth)
    assert math.isclose(FadeCurve.LOGARITHMIC.in_gain(0.0), 1.0)
    assert math.isclose(FadeCurve.LOGARITHMIC.in_gain(1.0), 0.0, abs_tol=1e-12)
    assert math.isclose(FadeCurve.LOGARITHMIC.out_gain(0.0), 0.0, abs_tol=1e-12)


def test_generated_progress_stops_short_of_one():
    curve = generate_fade_curve(FadeCurve.LINEAR, 4, fade_in=True)
    assert curve.dtype == np.float32
    assert np.allclose(curve, [0.0, 0.25, 0.5, 0.75])

    out = generate_fade_curve(FadeCurve.LINEAR, 4, fade_in=False)
    assert np.allclose(out, [1.0, 0.75, 0.5, 0.25])


def test_curves_differ():
    linear = generate_fade_curve(FadeCurve.LINEAR, 100)
    exponential = generate_fade_curve(FadeCurve.EXPONENTIAL, 100)
    assert exponential[50] < linear[50]
    assert not np.allclose(linear, exponential, atol=0.01)


def test_empty_curve():
    assert len(generate_fade_curve(FadeCurve.LINEAR, 0)) == 0
    assert len(generate_fade_curve(FadeCurve.LOGARITHMIC, -5, fade_in=False)) == 0


if __name__ == "__main__":
    print("Running fade curve tests...")
    test_fade_curve_enum()
    test_fade_curve_from_string()
    test_linear_formulas()
    test_exponential_formulas()
    test_logarithmic_formulas()
    test_generated_progress_stops_short_of_one()
    test_curves_differ()
    test_empty_curve()
    print("\nAll tests passed!")
