"""
A Python package for standard-curve traceback of sample-level data.

Manufactures individual-sample concentrations and absorbances from group
summary statistics, validates them by recovering those statistics, and
compares groups with hypothesis tests computed from summaries alone.

Modules:
    - schema: Records exchanged with callers and exported column labels.
    - errors: Typed failure signals.
    - stats: Regression, sample synthesis, special functions and tests.
    - pipeline: Forward/reverse traceback orchestration.
    - data_processing: Loads groups and standard curves from CSV files.
    - output: Exports results to CSV tables.
    - plotting: Standard-curve and forward-test figures.
"""

__version__ = "1.0.0"

from .errors import (
    InsufficientSamplesError,
    InvalidCurveError,
    NumericDegeneracyWarning,
    UnsupportedTestKindError,
)
from .pipeline import compare_groups, fit_standard_curve, run_traceback
from .schema import (
    AnalysisResult,
    CurvePoint,
    GroupSummary,
    GroupTraceback,
    HypothesisTestResult,
    RegressionResult,
    SampleRecord,
    TestKind,
)
from .stats import (
    fit_line,
    interpolate_standard_points,
    pairwise_tests,
    synthesize_group,
    two_sample_test,
)

__all__ = [
    # Records
    "AnalysisResult",
    "CurvePoint",
    "GroupSummary",
    "GroupTraceback",
    "HypothesisTestResult",
    "RegressionResult",
    "SampleRecord",
    "TestKind",
    # Errors
    "InsufficientSamplesError",
    "InvalidCurveError",
    "NumericDegeneracyWarning",
    "UnsupportedTestKindError",
    # Engine
    "fit_line",
    "interpolate_standard_points",
    "synthesize_group",
    "two_sample_test",
    "pairwise_tests",
    "fit_standard_curve",
    "run_traceback",
    "compare_groups",
]
