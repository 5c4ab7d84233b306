"""Sample mean and Bessel-corrected standard deviation."""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np


def sample_mean_sd(values) -> Tuple[float, float]:
    """Return ``(mean, sd)`` of a 1-D sample with divisor ``n - 1``.

    A single value has no spread, so its SD is ``0.0``. An empty sample gives
    ``(nan, nan)``.
    """
    arr = np.asarray(values, dtype=float).ravel()
    n = int(arr.size)
    if n == 0:
        return math.nan, math.nan
    mean = float(np.mean(arr))
    if n < 2:
        return mean, 0.0
    return mean, float(np.std(arr, ddof=1))
