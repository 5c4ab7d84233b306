"""
Statistical utilities for calibration traceback.

This subpackage provides the numerical routines behind the traceback
pipeline. All functions operate on arrays, primitive types and the records in
``curvetrace.schema``; nothing here performs I/O.

Modules:
    regression:
        Closed-form least-squares standard curves, forward/inverse prediction
        and linear auto-fill of intermediate calibration points.

    sampling:
        Box-Muller synthesis of per-sample values from a mean and SD, driven
        by an injectable uniform random source.

    descriptive:
        Sample mean and Bessel-corrected standard deviation.

    special:
        Regularized incomplete beta function (Lentz continued fraction) and
        Student t tail probabilities.

    hypothesis:
        Two-sample tests from summary statistics with an explicit, closed set
        of supported test kinds.

Design Principle:
    This subpackage has no dependencies on the pipeline, output or plotting
    modules. It provides pure numerical utilities that can be independently
    tested.
"""

from .descriptive import sample_mean_sd
from .hypothesis import (
    DEFAULT_SIGNIFICANCE_LEVELS,
    pairwise_tests,
    pooled_sd,
    resolve_test_kind,
    students_t_test,
    two_sample_test,
)
from .regression import fit_line, interpolate_standard_points, inverse_predict, predict
from .sampling import make_rng, standard_normal, synthesize_group
from .special import regularized_incomplete_beta, student_t_two_sided_p

__all__ = [
    "fit_line",
    "predict",
    "inverse_predict",
    "interpolate_standard_points",
    "make_rng",
    "standard_normal",
    "synthesize_group",
    "sample_mean_sd",
    "regularized_incomplete_beta",
    "student_t_two_sided_p",
    "DEFAULT_SIGNIFICANCE_LEVELS",
    "pooled_sd",
    "resolve_test_kind",
    "students_t_test",
    "two_sample_test",
    "pairwise_tests",
]
