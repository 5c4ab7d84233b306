"""Two-sample hypothesis tests computed from summary statistics only.

Each group is described by ``(mean, sd, samples)``; no raw observations are
needed. Failure to compute is reported as a NaN p-value. An unsupported test
kind is reported with :class:`UnsupportedTestKindError` and is never
substituted silently.
"""

from __future__ import annotations

import logging
import math
import warnings
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

from ..errors import NumericDegeneracyWarning, UnsupportedTestKindError
from ..schema import (
    SUPPORTED_TEST_KINDS,
    GroupSummary,
    HypothesisTestResult,
    TestKind,
)
from .special import MAX_ITERATIONS, student_t_two_sided_p

logger = logging.getLogger(__name__)

DEFAULT_SIGNIFICANCE_LEVELS: Tuple[float, ...] = (0.05, 0.01, 0.001)


def pooled_sd(group1: GroupSummary, group2: GroupSummary) -> float:
    """Pooled standard deviation weighted by each group's degrees of freedom."""
    n1, n2 = group1.samples, group2.samples
    dof = n1 + n2 - 2
    if dof <= 0:
        return math.nan
    var = ((n1 - 1) * group1.sd**2 + (n2 - 1) * group2.sd**2) / dof
    return math.sqrt(var)


def students_t_test(
    group1: GroupSummary,
    group2: GroupSummary,
    max_iterations: int = MAX_ITERATIONS,
) -> HypothesisTestResult:
    """Two-sided pooled-variance Student's t-test from summary statistics.

    Args:
        group1 (GroupSummary): First group.
        group2 (GroupSummary): Second group.
        max_iterations (int): Cap on the incomplete-beta continued fraction.

    Returns:
        HypothesisTestResult: p-value with the t statistic and degrees of
        freedom. ``p_value`` is NaN when either group has ``samples <= 1``.

    Note:
        When the pooled SD is exactly zero the p-value is ``1.0`` for equal
        means and ``0.0`` otherwise, and a :class:`NumericDegeneracyWarning`
        is issued.

    References:
        ``t = (m1 - m2) / (sp * sqrt(1/n1 + 1/n2))`` with ``df = n1 + n2 - 2``.
    """
    kind = TestKind.T_TEST
    n1, n2 = group1.samples, group2.samples
    if n1 <= 1 or n2 <= 1:
        return HypothesisTestResult(p_value=math.nan, kind=kind)

    dof = float(n1 + n2 - 2)
    sp = pooled_sd(group1, group2)
    if sp == 0:
        warnings.warn(
            f"Pooled standard deviation of {group1.name!r} and {group2.name!r} is "
            "zero; p-value reflects mean equality only.",
            NumericDegeneracyWarning,
            stacklevel=2,
        )
        p = 1.0 if group1.mean == group2.mean else 0.0
        return HypothesisTestResult(p_value=p, kind=kind, df=dof)

    t = (group1.mean - group2.mean) / (sp * math.sqrt(1.0 / n1 + 1.0 / n2))
    p = student_t_two_sided_p(t, dof, max_iterations)
    return HypothesisTestResult(p_value=p, kind=kind, statistic=t, df=dof)


_IMPLEMENTATIONS: Dict[TestKind, Callable[..., HypothesisTestResult]] = {
    TestKind.T_TEST: students_t_test,
}


def _supported_names() -> Tuple[str, ...]:
    return tuple(sorted(k.value for k in SUPPORTED_TEST_KINDS))


def resolve_test_kind(
    kind: TestKind | str, fallback: Optional[TestKind | str] = None
) -> TestKind:
    """Resolve a requested test to an implemented one.

    Raises:
        UnsupportedTestKindError: If ``kind`` has no implementation and no
            ``fallback`` was requested, or the fallback itself is unsupported.
    """
    try:
        resolved = TestKind.parse(kind)
        if resolved not in _IMPLEMENTATIONS:
            raise UnsupportedTestKindError(kind, _supported_names())
        return resolved
    except UnsupportedTestKindError:
        if fallback is None:
            raise
        substitute = TestKind.parse(fallback)
        if substitute not in _IMPLEMENTATIONS:
            raise UnsupportedTestKindError(fallback, _supported_names()) from None
        logger.warning(
            "Unsupported test %r requested; using fallback %r", kind, substitute.value
        )
        return substitute


def two_sample_test(
    group1: GroupSummary,
    group2: GroupSummary,
    kind: TestKind | str = TestKind.T_TEST,
    *,
    fallback: Optional[TestKind | str] = None,
    max_iterations: int = MAX_ITERATIONS,
) -> HypothesisTestResult:
    """Run the requested two-sample test on two group summaries.

    Args:
        group1 (GroupSummary): First group.
        group2 (GroupSummary): Second group.
        kind: Test identifier, a :class:`TestKind` or its string value.
        fallback: Test to substitute when ``kind`` is unsupported. The
            substitution is logged. Without it an unsupported kind raises.
        max_iterations (int): Cap on the continued-fraction evaluator.

    Returns:
        HypothesisTestResult: NaN ``p_value`` when the test cannot be computed.

    Raises:
        UnsupportedTestKindError: See :func:`resolve_test_kind`.
    """
    resolved = resolve_test_kind(kind, fallback)
    return _IMPLEMENTATIONS[resolved](group1, group2, max_iterations=max_iterations)


def pairwise_tests(
    groups: Iterable[GroupSummary] | Mapping[str, GroupSummary],
    pairs: Iterable[Tuple[str, str]],
    kind: TestKind | str = TestKind.T_TEST,
    **kwargs,
) -> Dict[Tuple[str, str], HypothesisTestResult]:
    """Evaluate several named comparisons.

    Raises:
        KeyError: If a pair names a group that is not present.
    """
    if isinstance(groups, Mapping):
        lookup = dict(groups)
    else:
        lookup = {g.name: g for g in groups}

    results = {}
    for name1, name2 in pairs:
        missing = [n for n in (name1, name2) if n not in lookup]
        if missing:
            raise KeyError(f"Unknown group(s) in comparison: {missing}")
        results[(name1, name2)] = two_sample_test(
            lookup[name1], lookup[name2], kind, **kwargs
        )
    return results
