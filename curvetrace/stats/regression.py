"""Provide standard-curve regression utilities used by the traceback pipeline.

This module supports:
- closed-form least-squares fits of absorbance against concentration,
- forward and inverse prediction through a fitted curve, and
- linear auto-fill of intermediate calibration responses.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np

from ..errors import InvalidCurveError
from ..schema import CurvePoint, RegressionResult

AUTOFILL_DECIMALS = 4


def _as_points(points: Iterable[CurvePoint | tuple[float, float]]) -> list[CurvePoint]:
    out = []
    for p in points:
        if not isinstance(p, CurvePoint):
            x, y = p
            p = CurvePoint(float(x), float(y))
        if not (math.isfinite(p.x) and math.isfinite(p.y)):
            raise ValueError(f"Calibration point must be finite, got ({p.x}, {p.y})")
        out.append(p)
    return out


def fit_line(points: Iterable[CurvePoint | tuple[float, float]]) -> RegressionResult:
    """Fit an ordinary least-squares straight line to calibration points.

    Args:
        points: Calibration pairs ``(x, y)`` as :class:`CurvePoint` records or
            plain 2-tuples, with ``x`` the known concentration and ``y`` the
            measured absorbance.

    Returns:
        RegressionResult: Slope, intercept and coefficient of determination.
        The undefined sentinel (NaN slope/intercept, ``r_square == 0``) is
        returned for fewer than two points or when every ``x`` is identical.

    Raises:
        ValueError: If any point is non-finite.

    Note:
        Constant ``y`` with varying ``x`` gives a zero-slope line with
        ``r_square == 1``: there is no variance left to explain. A vertical
        point set is never replaced by a horizontal line at the mean ``y``.

    References:
        Closed-form least squares from the centered sums Sxx, Syy and Sxy;
        R² is Sxy² / (Sxx·Syy).
    """
    pts = _as_points(points)
    n = len(pts)
    if n < 2 or len({p.x for p in pts}) == 1:
        return RegressionResult.undefined(n)

    mean_x = sum(p.x for p in pts) / n
    mean_y = sum(p.y for p in pts) / n
    s_xx = sum((p.x - mean_x) ** 2 for p in pts)
    s_yy = sum((p.y - mean_y) ** 2 for p in pts)
    s_xy = sum((p.x - mean_x) * (p.y - mean_y) for p in pts)
    if not s_xx > 0:
        return RegressionResult.undefined(n)

    # A mean of repeated inexact values can miss them by an ulp, so a constant
    # response is detected on the raw values.
    if len({p.y for p in pts}) == 1 or not s_yy > 0:
        return RegressionResult(slope=0.0, intercept=pts[0].y, r_square=1.0, n=n)

    slope = s_xy / s_xx
    intercept = mean_y - slope * mean_x

    r_square = (s_xy * s_xy) / (s_xx * s_yy)
    r_square = min(1.0, max(0.0, r_square))
    return RegressionResult(slope=slope, intercept=intercept, r_square=r_square, n=n)


def predict(result: RegressionResult, x):
    """Map concentration to absorbance through ``y = slope * x + intercept``."""
    if not result.defined:
        raise InvalidCurveError("Standard curve is undefined; cannot predict.")
    values = np.asarray(x, dtype=float)
    out = result.slope * values + result.intercept
    return float(out) if out.ndim == 0 else out


def inverse_predict(result: RegressionResult, y):
    """Recover concentration from absorbance through ``x = (y - intercept) / slope``.

    Raises:
        InvalidCurveError: If the curve is undefined or flat, because a
            horizontal line cannot be inverted.
    """
    if not result.defined:
        raise InvalidCurveError("Standard curve is undefined; cannot invert.")
    if result.slope == 0:
        raise InvalidCurveError("Standard curve has zero slope; cannot invert.")
    values = np.asarray(y, dtype=float)
    out = (values - result.intercept) / result.slope
    return float(out) if out.ndim == 0 else out


def interpolate_standard_points(
    points: Sequence[CurvePoint | tuple[float, float]],
    decimals: int = AUTOFILL_DECIMALS,
) -> list[CurvePoint]:
    """Fill intermediate calibration responses from the first and last points.

    Args:
        points: Calibration points in entry order. Only the first and last
            ``y`` values are used; every interior ``y`` is replaced.
        decimals: Rounding applied to the interpolated responses.

    Returns:
        list[CurvePoint]: Points with interior responses placed on the line
        joining the two end points.

    Raises:
        InvalidCurveError: If fewer than two points are supplied or the end
            points share the same concentration.
    """
    pts = _as_points(points)
    if len(pts) < 2:
        raise InvalidCurveError("At least two calibration points are required.")

    first, last = pts[0], pts[-1]
    if last.x == first.x:
        raise InvalidCurveError(
            "First and last calibration points share the same concentration."
        )

    slope = (last.y - first.y) / (last.x - first.x)
    filled = [first]
    for p in pts[1:-1]:
        y = round(first.y + slope * (p.x - first.x), decimals)
        filled.append(CurvePoint(p.x, y))
    filled.append(last)
    return filled
