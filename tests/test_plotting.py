import os

import pytest

from curvetrace.pipeline import run_traceback
from curvetrace.plotting import plot_forward_test, plot_standard_curve
from curvetrace.schema import AnalysisResult, CurvePoint, GroupSummary, RegressionResult
from curvetrace.stats.regression import fit_line

CURVE = [CurvePoint(0.0, 0.0), CurvePoint(10.0, 0.21), CurvePoint(20.0, 0.39)]


def test_plot_standard_curve(tmp_path):
    out = plot_standard_curve(CURVE, fit_line(CURVE), output_dir=str(tmp_path), units="mM")
    assert out.endswith("standard_curve.png")
    assert os.path.exists(out)


def test_plot_standard_curve_with_undefined_fit(tmp_path):
    points = [CurvePoint(5.0, 1.0), CurvePoint(5.0, 2.0)]
    out = plot_standard_curve(points, RegressionResult.undefined(2), output_dir=str(tmp_path))
    assert os.path.exists(out)


def test_plot_standard_curve_requires_points(tmp_path):
    with pytest.raises(ValueError):
        plot_standard_curve([], RegressionResult.undefined(), output_dir=str(tmp_path))


def test_plot_forward_test(tmp_path):
    result = run_traceback(
        [GroupSummary("A", 10.0, 1.0, 6), GroupSummary("B", 14.0, 2.0, 6)],
        CURVE,
        use_curve=True,
        seed=0,
    )
    out = plot_forward_test(result, output_dir=str(tmp_path))
    assert out.endswith("forward_test.png")
    assert os.path.exists(out)


def test_plot_forward_test_requires_groups(tmp_path):
    with pytest.raises(ValueError):
        plot_forward_test(AnalysisResult(regression=None, groups=()), output_dir=str(tmp_path))
