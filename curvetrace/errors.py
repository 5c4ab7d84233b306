"""Typed failure signals raised by the traceback engine.

Numerical routines report "cannot compute" with NaN; the types below are what
the pipeline and the command-line driver raise when such a signal has to be
surfaced to the caller.
"""

from __future__ import annotations


class InvalidCurveError(ValueError):
    """Calibration points cannot define a straight line.

    Raised for fewer than two points or when every point shares the same
    concentration (vertical line, undefined slope).
    """


class InsufficientSamplesError(ValueError):
    """A hypothesis test was requested on a group with ``samples <= 1``."""


class UnsupportedTestKindError(ValueError):
    """The requested statistical test is not implemented."""

    def __init__(self, kind: object, supported: tuple[str, ...] = ()):
        self.kind = kind
        self.supported = supported
        message = f"Unsupported statistical test {kind!r}"
        if supported:
            message += f"; supported tests: {', '.join(supported)}"
        super().__init__(message)


class NumericDegeneracyWarning(UserWarning):
    """Pooled standard deviation is zero; p-value decided by mean equality."""
