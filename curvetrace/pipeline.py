"""
Forward/reverse traceback of individual samples from group summaries.

For each group the pipeline:
1. synthesizes ``samples`` concentrations around ``(mean, sd)``,
2. maps them to absorbance through the fitted standard curve
   (``y = m * x + c``), or keeps them unchanged when no curve is used,
3. inverts the transform (``x = (y - c) / m``) and recomputes the sample mean
   and Bessel-corrected SD of the recovered concentrations. This is the
   forward test: a sound run reproduces the group's summary statistics.

Groups are processed in input order from a single random source, so the same
generator state and the same inputs reproduce identical output.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional, Sequence

import numpy as np

from .errors import InsufficientSamplesError, InvalidCurveError
from .schema import (
    AnalysisResult,
    CurvePoint,
    GroupSummary,
    GroupTraceback,
    HypothesisTestResult,
    RegressionResult,
    TestKind,
)
from .stats.descriptive import sample_mean_sd
from .stats.hypothesis import two_sample_test
from .stats.regression import fit_line, inverse_predict, predict
from .stats.sampling import UniformSource, make_rng, synthesize_group

logger = logging.getLogger(__name__)


def _as_group(group: GroupSummary | Mapping) -> GroupSummary:
    if isinstance(group, GroupSummary):
        return group
    return GroupSummary(
        name=group["name"],
        mean=group["mean"],
        sd=group["sd"],
        samples=group["samples"],
    )


def _validate_groups(groups: Iterable[GroupSummary | Mapping]) -> list[GroupSummary]:
    out = [_as_group(g) for g in groups]
    if not out:
        raise ValueError("At least one group is required.")
    seen = set()
    duplicates = []
    for g in out:
        if g.name in seen:
            duplicates.append(g.name)
        seen.add(g.name)
    if duplicates:
        raise ValueError(f"Group names must be unique; duplicated: {sorted(set(duplicates))}")
    return out


def fit_standard_curve(
    curve_points: Optional[Sequence[CurvePoint | tuple[float, float]]],
) -> RegressionResult:
    """Fit the standard curve and reject fits that cannot be inverted.

    Raises:
        InvalidCurveError: For fewer than two points, identical concentrations,
            or a flat line.
    """
    points = list(curve_points or [])
    if len(points) < 2:
        raise InvalidCurveError(
            f"At least two standard-curve points are required, got {len(points)}."
        )
    regression = fit_line(points)
    if not regression.defined:
        raise InvalidCurveError(
            "Could not calculate standard curve: all points share the same concentration."
        )
    if regression.slope == 0:
        raise InvalidCurveError(
            "Standard curve has zero slope; absorbance cannot be traced back to concentration."
        )
    return regression


def trace_group(
    group: GroupSummary,
    regression: Optional[RegressionResult],
    rng: UniformSource,
) -> GroupTraceback:
    """Synthesize, transform and validate a single group."""
    synthesized = synthesize_group(group.mean, group.sd, group.samples, rng=rng)

    if regression is None:
        generated = synthesized.copy()
        recovered = generated.copy()
    else:
        generated = np.atleast_1d(predict(regression, synthesized))
        recovered = np.atleast_1d(inverse_predict(regression, generated))

    generated_mean, generated_sd = sample_mean_sd(generated)
    recovered_mean, recovered_sd = sample_mean_sd(recovered)
    logger.debug(
        "Group %s: target %.6g ± %.6g, recovered %.6g ± %.6g (n=%d)",
        group.name,
        group.mean,
        group.sd,
        recovered_mean,
        recovered_sd,
        group.samples,
    )
    return GroupTraceback(
        name=group.name,
        target=group,
        synthesized_values=synthesized,
        generated_values=generated,
        recovered_concentrations=recovered,
        recovered_mean=recovered_mean,
        recovered_sd=recovered_sd,
        generated_mean=generated_mean,
        generated_sd=generated_sd,
    )


def run_traceback(
    groups: Iterable[GroupSummary | Mapping],
    curve_points: Optional[Sequence[CurvePoint | tuple[float, float]]] = None,
    use_curve: bool = False,
    rng: Optional[UniformSource] = None,
    seed: Optional[int] = None,
) -> AnalysisResult:
    """Manufacture per-sample data from group summaries and validate it.

    Args:
        groups: Group summaries (or mappings with ``name``, ``mean``, ``sd``,
            ``samples``). Names must be unique.
        curve_points: Calibration points; required when ``use_curve`` is true.
        use_curve (bool): Trace concentrations through the standard curve.
            When false the transform is the identity.
        rng: Uniform random source shared by all groups, in input order.
        seed (int, optional): Seed for a fresh generator when ``rng`` is
            omitted.

    Returns:
        AnalysisResult: Regression (when a curve is used) and one
        :class:`GroupTraceback` per group, in input order.

    Raises:
        InvalidCurveError: If ``use_curve`` is true and the curve is unusable.
        ValueError: If no groups are given or names repeat.
    """
    summaries = _validate_groups(groups)

    regression = fit_standard_curve(curve_points) if use_curve else None
    if regression is not None:
        logger.info(
            "Standard curve %s (R² = %.4f, n = %d)",
            regression.equation,
            regression.r_square,
            regression.n,
        )

    source = rng if rng is not None else make_rng(seed)
    traced = tuple(trace_group(g, regression, source) for g in summaries)
    logger.info("Traced %d group(s), %d sample(s)", len(traced), sum(g.samples for g in summaries))
    return AnalysisResult(regression=regression, groups=traced, use_curve=use_curve)


def compare_groups(
    groups: Iterable[GroupSummary | Mapping],
    group1: str,
    group2: str,
    kind: TestKind | str = TestKind.T_TEST,
    **kwargs,
) -> HypothesisTestResult:
    """Run a two-sample test between two groups selected by name.

    Raises:
        ValueError: If both names refer to the same group.
        KeyError: If either name is unknown.
        InsufficientSamplesError: If the p-value cannot be computed because a
            group has fewer than two samples.
        UnsupportedTestKindError: If ``kind`` is not implemented.
    """
    if group1 == group2:
        raise ValueError(f"Cannot compare group {group1!r} to itself.")
    lookup = {g.name: g for g in _validate_groups(groups)}
    for name in (group1, group2):
        if name not in lookup:
            raise KeyError(f"No group named {name!r}")

    result = two_sample_test(lookup[group1], lookup[group2], kind, **kwargs)
    if result.failed:
        small = [n for n in (group1, group2) if lookup[n].samples <= 1]
        if small:
            raise InsufficientSamplesError(
                f"Could not calculate p-value: groups {small} need at least 2 samples."
            )
        raise ValueError("Could not calculate p-value. Check input data.")
    return result
