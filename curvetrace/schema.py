"""Define the records exchanged between the engine and its callers.

Every record is created, consumed and discarded within one pipeline
invocation. Only the synthesized sample arrays are read more than once
(forward transform, validation, export).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np

from .errors import UnsupportedTestKindError


@dataclass(frozen=True)
class ResultColumns:
    """Container for standardized column labels.

    These labels are shared by the per-sample export and the standard-curve
    summary so both tables stay consistent.

    Attributes:
        group: Group name column.
        sample: 1-based sample index within a group.
        absorbance: Generated response value. With a standard curve this is
            the absorbance traced back from a synthesized concentration;
            without one it is the synthesized concentration itself.
        recalculated: Concentration recovered by inverting the standard curve.
    """

    group: str = "Group"
    sample: str = "Sample"
    absorbance: str = "Absorbance"
    absorbance_mean: str = "Group Mean Absorbance"
    absorbance_sd: str = "Group SD Absorbance"
    recalculated: str = "Recalculated Conc."
    recalculated_mean: str = "Group Mean Conc."
    recalculated_sd: str = "Group SD Conc."
    slope: str = "Slope (m)"
    intercept: str = "Intercept (c)"
    r_square: str = "R²"
    equation: str = "Equation"


COLUMNS = ResultColumns()


@dataclass(frozen=True)
class CurvePoint:
    """Calibration pair: known concentration ``x`` and measured response ``y``."""

    x: float
    y: float


@dataclass(frozen=True)
class RegressionResult:
    """Least-squares line through calibration points.

    An undefined fit (fewer than two points, or all ``x`` identical) carries
    NaN slope and intercept with ``r_square == 0``; check :attr:`defined`
    before using the line.
    """

    slope: float
    intercept: float
    r_square: float
    n: int = 0

    @classmethod
    def undefined(cls, n: int = 0) -> "RegressionResult":
        return cls(slope=math.nan, intercept=math.nan, r_square=0.0, n=n)

    @property
    def defined(self) -> bool:
        return math.isfinite(self.slope) and math.isfinite(self.intercept)

    @property
    def equation(self) -> str:
        if not self.defined:
            return "undefined"
        sign = "+" if self.intercept >= 0 else "-"
        return f"y = {self.slope:.4f}x {sign} {abs(self.intercept):.4f}"


@dataclass(frozen=True)
class GroupSummary:
    """Summary statistics describing a group without its individual values."""

    name: str
    mean: float
    sd: float
    samples: int

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Group name is required.")
        for label in ("mean", "sd"):
            value = getattr(self, label)
            if isinstance(value, bool) or not isinstance(value, (int, float, np.number)):
                raise TypeError(
                    f"Group {self.name!r}: {label} must be numeric, got {type(value)}"
                )
            if not math.isfinite(value):
                raise ValueError(f"Group {self.name!r}: {label} must be finite, got {value}")
        if self.sd < 0:
            raise ValueError(f"Group {self.name!r}: sd cannot be negative, got {self.sd}")
        if isinstance(self.samples, bool) or not isinstance(
            self.samples, (int, np.integer)
        ):
            raise TypeError(
                f"Group {self.name!r}: samples must be an integer, got {type(self.samples)}"
            )
        if self.samples < 1:
            raise ValueError(
                f"Group {self.name!r}: at least 1 sample required, got {self.samples}"
            )


class TestKind(str, Enum):
    """Closed set of two-sample test identifiers.

    Only :attr:`T_TEST` has an implementation. The remaining members are
    recognised names that resolve to :class:`UnsupportedTestKindError`.
    """

    T_TEST = "t-test"
    MANN_WHITNEY = "mann-whitney"
    ANOVA = "anova"

    __test__ = False

    @classmethod
    def parse(cls, kind: "TestKind | str") -> "TestKind":
        if isinstance(kind, cls):
            return kind
        text = str(kind).strip().lower().replace("_", "-")
        for member in cls:
            if member.value == text:
                return member
        raise UnsupportedTestKindError(kind, tuple(m.value for m in SUPPORTED_TEST_KINDS))


SUPPORTED_TEST_KINDS: frozenset[TestKind] = frozenset({TestKind.T_TEST})


@dataclass(frozen=True)
class HypothesisTestResult:
    """Outcome of a two-sample test; NaN ``p_value`` means it could not be computed."""

    p_value: float
    kind: TestKind = TestKind.T_TEST
    statistic: float = math.nan
    df: float = math.nan

    @property
    def failed(self) -> bool:
        return math.isnan(self.p_value)

    def is_significant(self, alpha: float = 0.05) -> bool:
        if not 0.0 < alpha < 1.0:
            raise ValueError(f"Significance level must lie in (0, 1), got {alpha}")
        return (not self.failed) and self.p_value < alpha


@dataclass(frozen=True)
class SampleRecord:
    index: int
    generated_value: float
    recovered_concentration: float


@dataclass(frozen=True, eq=False)
class GroupTraceback:
    """Per-group output of one traceback run.

    ``synthesized_values`` are concentrations drawn around the target summary;
    ``generated_values`` are those values after the forward transform and
    ``recovered_concentrations`` the result of inverting it again.
    """

    name: str
    target: GroupSummary
    synthesized_values: np.ndarray = field(repr=False)
    generated_values: np.ndarray = field(repr=False)
    recovered_concentrations: np.ndarray = field(repr=False)
    recovered_mean: float
    recovered_sd: float
    generated_mean: float
    generated_sd: float

    @property
    def per_sample(self) -> list[SampleRecord]:
        return [
            SampleRecord(
                index=i + 1,
                generated_value=float(gen),
                recovered_concentration=float(rec),
            )
            for i, (gen, rec) in enumerate(
                zip(self.generated_values, self.recovered_concentrations)
            )
        ]


@dataclass(frozen=True)
class AnalysisResult:
    regression: Optional[RegressionResult]
    groups: tuple[GroupTraceback, ...]
    use_curve: bool = False

    def group(self, name: str) -> GroupTraceback:
        for group in self.groups:
            if group.name == name:
                return group
        raise KeyError(f"No group named {name!r} in analysis result")

    @property
    def group_names(self) -> list[str]:
        return [g.name for g in self.groups]
