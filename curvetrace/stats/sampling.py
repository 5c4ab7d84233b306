"""Synthesize per-sample values consistent with a group's summary statistics.

Values are drawn with the Box-Muller transform from an injected uniform
source, so a seeded generator reproduces the same samples on every run.
"""

from __future__ import annotations

import math
from typing import Optional, Protocol

import numpy as np


class UniformSource(Protocol):
    """Anything exposing ``random() -> float`` in ``[0, 1)``.

    ``numpy.random.Generator`` and ``random.Random`` both qualify.
    """

    def random(self) -> float: ...


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create the default random source; unseeded when ``seed`` is ``None``."""
    return np.random.default_rng(seed)


def _open_uniform(rng: UniformSource) -> float:
    # ln(0) is undefined; redraw until strictly positive.
    u = float(rng.random())
    while u <= 0.0:
        u = float(rng.random())
    return u


def standard_normal(rng: UniformSource) -> float:
    """Draw one standard normal variate from two uniforms (Box-Muller).

    The paired sine variate is discarded so every output consumes exactly two
    uniforms.
    """
    u1 = _open_uniform(rng)
    u2 = _open_uniform(rng)
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def synthesize_group(
    mean: float,
    sd: float,
    n: int,
    rng: Optional[UniformSource] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """Generate ``n`` values approximating a target mean and standard deviation.

    Args:
        mean (float): Target mean in the group's concentration units.
        sd (float): Target standard deviation (same units, ``>= 0``).
        n (int): Number of samples to emit (``>= 1``).
        rng: Uniform random source. Takes precedence over ``seed``.
        seed (int, optional): Seed for a fresh ``numpy`` generator when
            ``rng`` is not supplied. Neither argument gives an unseeded draw.

    Returns:
        numpy.ndarray: ``n`` independent values ``z * sd + mean``.

    Raises:
        ValueError: If ``n < 1``, ``sd < 0`` or either moment is non-finite.

    Note:
        With ``sd == 0`` every value equals ``mean`` exactly; the random source
        is still consumed so later groups see the same generator state either
        way.
    """
    if isinstance(n, bool) or int(n) != n or n < 1:
        raise ValueError(f"n must be a positive integer, got {n!r}")
    if not (math.isfinite(mean) and math.isfinite(sd)):
        raise ValueError(f"mean and sd must be finite, got mean={mean}, sd={sd}")
    if sd < 0:
        raise ValueError(f"sd cannot be negative, got {sd}")

    source = rng if rng is not None else make_rng(seed)
    z = np.array([standard_normal(source) for _ in range(int(n))], dtype=float)
    if sd == 0:
        return np.full(int(n), float(mean))
    return z * float(sd) + float(mean)
