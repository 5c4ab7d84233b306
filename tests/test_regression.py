import math

import numpy as np
import pytest

from curvetrace.errors import InvalidCurveError
from curvetrace.schema import CurvePoint, RegressionResult
from curvetrace.stats.regression import (
    fit_line,
    interpolate_standard_points,
    inverse_predict,
    predict,
)


def test_collinear_points_give_exact_line():
    fit = fit_line([CurvePoint(0, 0), CurvePoint(10, 2), CurvePoint(20, 4)])
    assert fit.defined
    assert math.isclose(fit.slope, 0.2)
    assert math.isclose(fit.intercept, 0.0, abs_tol=1e-12)
    assert math.isclose(fit.r_square, 1.0)
    assert fit.n == 3


def test_accepts_plain_tuples():
    fit = fit_line([(0, 1), (1, 3), (2, 5)])
    assert fit.slope == 2.0
    assert fit.intercept == 1.0


def test_identical_x_returns_undefined_sentinel():
    fit = fit_line([CurvePoint(5, 1), CurvePoint(5, 2)])
    assert not fit.defined
    assert math.isnan(fit.slope)
    assert math.isnan(fit.intercept)
    assert fit.r_square == 0.0


@pytest.mark.parametrize("x", [0.1, 0.3, 0.7, 2.3, 0.001, 12.7])
@pytest.mark.parametrize("n", [2, 3, 4, 5, 6, 7])
def test_identical_inexact_x_is_undefined(x, n):
    fit = fit_line([(x, float(i)) for i in range(n)])
    assert not fit.defined
    assert fit.r_square == 0.0
    assert fit.n == n


@pytest.mark.parametrize("y", [0.1, 0.3, 0.7])
def test_constant_inexact_y_is_flat(y):
    fit = fit_line([(float(i), y) for i in range(7)])
    assert fit.slope == 0.0
    assert fit.intercept == y
    assert fit.r_square == 1.0


@pytest.mark.parametrize("points", [[], [CurvePoint(1.0, 2.0)]])
def test_fewer_than_two_points_is_undefined(points):
    fit = fit_line(points)
    assert not fit.defined
    assert fit.r_square == 0.0


def test_constant_y_is_a_perfect_flat_fit():
    fit = fit_line([(0, 3), (1, 3), (2, 3)])
    assert fit.slope == 0.0
    assert fit.intercept == 3.0
    assert fit.r_square == 1.0


def test_noisy_points_r_square_in_unit_interval():
    rng = np.random.default_rng(0)
    x = np.linspace(0, 50, 12)
    y = 0.02 * x + 0.05 + rng.normal(0, 0.05, x.size)
    fit = fit_line(zip(x, y))
    assert 0.0 <= fit.r_square <= 1.0
    m, b = np.polyfit(x, y, 1)
    assert math.isclose(fit.slope, m, rel_tol=1e-9)
    assert math.isclose(fit.intercept, b, rel_tol=1e-9, abs_tol=1e-12)


def test_non_finite_point_rejected():
    with pytest.raises(ValueError, match="finite"):
        fit_line([(0, 0), (1, math.nan)])


def test_equation_formatting():
    assert RegressionResult(0.2, 0.0, 1.0).equation == "y = 0.2000x + 0.0000"
    assert RegressionResult(1.5, -0.25, 0.9).equation == "y = 1.5000x - 0.2500"
    assert RegressionResult.undefined().equation == "undefined"


def test_predict_and_inverse_predict():
    fit = RegressionResult(slope=2.0, intercept=1.0, r_square=1.0, n=3)
    assert predict(fit, 10.0) == 21.0
    np.testing.assert_allclose(predict(fit, [0.0, 1.0]), [1.0, 3.0])
    assert inverse_predict(fit, 21.0) == 10.0


def test_inverse_of_flat_or_undefined_curve_raises():
    with pytest.raises(InvalidCurveError):
        inverse_predict(RegressionResult(0.0, 3.0, 1.0), 3.0)
    with pytest.raises(InvalidCurveError):
        inverse_predict(RegressionResult.undefined(), 1.0)
    with pytest.raises(InvalidCurveError):
        predict(RegressionResult.undefined(), 1.0)


def test_interpolate_standard_points_fills_interior():
    points = [(0, 0.0), (5, 99.0), (10, 0.0), (20, 0.8)]
    filled = interpolate_standard_points(points)
    assert [p.x for p in filled] == [0, 5, 10, 20]
    assert filled[0].y == 0.0
    assert filled[1].y == pytest.approx(0.2)
    assert filled[2].y == pytest.approx(0.4)
    assert filled[-1].y == 0.8


def test_interpolate_rounds_to_four_decimals():
    filled = interpolate_standard_points([(0, 0.0), (1, 0.0), (3, 1.0)])
    assert filled[1].y == 0.3333


def test_interpolate_requires_distinct_end_points():
    with pytest.raises(InvalidCurveError):
        interpolate_standard_points([(2, 0.1), (3, 0.2), (2, 0.5)])
    with pytest.raises(InvalidCurveError):
        interpolate_standard_points([(2, 0.1)])
