"""State representations: continuous vectors, spin configurations, hybrids.

Continuous states live on the period [-2, 2). A spin configuration is an
int8 array of ±1. The hybrid representation splits V = σ + x + r with
σ ∈ {-1, 1}^N, x ∈ [-1, 1)^N and rounding centre r.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from .kernels import fold

__all__ = [
    "Hybrid",
    "roundup",
    "cont_to_hybrid",
    "hybrid_to_cont",
    "realign_hybrid",
    "hamming_distance",
    "euclid_distance",
    "get_rate",
    "c_variance",
    "get_initial",
    "get_random_configuration",
    "get_random_hybrid",
    "get_random_sphere",
    "get_random_cube",
    "flip_configuration",
    "number_to_conf",
    "conf_to_number",
]

Hybrid = Tuple[np.ndarray, np.ndarray]


def _rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def roundup(V: np.ndarray) -> np.ndarray:
    """Return V folded into [-2, 2)."""
    return fold(V)


def cont_to_hybrid(V: np.ndarray, r: float = 0.0) -> Hybrid:
    """Split V into (spins, offsets) around the rounding centre r."""
    reduced = fold(np.asarray(V, dtype=float) - r)
    spins = np.where(reduced >= 0.0, 1, -1).astype(np.int8)
    offsets = reduced - spins
    return spins, offsets


def hybrid_to_cont(hybrid: Hybrid, r: float = 0.0) -> np.ndarray:
    spins, offsets = hybrid
    return np.asarray(offsets, dtype=float) + np.asarray(spins, dtype=float) + r


def realign_hybrid(hybrid: Hybrid, r: float = 0.0) -> Hybrid:
    """Move the rounding centre of a hybrid state to r."""
    return cont_to_hybrid(hybrid_to_cont(hybrid), r)


def hamming_distance(s1: Sequence[int], s2: Sequence[int]) -> int:
    a = np.asarray(s1)
    b = np.asarray(s2)
    assert a.shape == b.shape, "configurations must have the same length"
    return int(np.count_nonzero(a != b))


def euclid_distance(V1: np.ndarray, V2: np.ndarray) -> float:
    """Squared Euclidean distance Σ (V1 - V2)^2."""
    diff = np.asarray(V1, dtype=float) - np.asarray(V2, dtype=float)
    return float(np.dot(diff, diff))


def get_rate(history: np.ndarray) -> np.ndarray:
    """Per-step variation magnitudes of a [steps, N] trajectory.

    The last value is duplicated so the output has one entry per time point.
    """
    hist = np.asarray(history, dtype=float)
    assert hist.ndim == 2 and hist.shape[0] >= 2, "need at least two time points"
    steps = np.sqrt(np.sum(np.diff(hist, axis=0) ** 2, axis=1))
    return np.append(steps, steps[-1])


def c_variance(V: np.ndarray, intervals: np.ndarray) -> np.ndarray:
    """Count, mean and standard deviation of the values inside each open interval.

    Args:
        V: data points.
        intervals: [M, 2] array of (low, high) bounds.

    Returns:
        [M, 3] array; mean and deviation are NaN for an empty interval.
    """
    values = np.asarray(V, dtype=float)
    bounds = np.asarray(intervals, dtype=float).reshape(-1, 2)
    out = np.full((bounds.shape[0], 3), np.nan)
    for i, (low, high) in enumerate(bounds):
        inside = values[(low < values) & (values < high)]
        out[i, 0] = inside.size
        if inside.size:
            out[i, 1] = inside.mean()
            out[i, 2] = inside.std()
    return out


def get_initial(n: int, bounds: Tuple[float, float], rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Uniform random vector in the interval spanned by bounds."""
    bot, top = min(bounds), max(bounds)
    return _rng(rng).uniform(bot, top, size=n)


def get_random_configuration(n: int, p: float = 0.5, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Bernoulli ±1 configuration with P(+1) = p."""
    assert 0.0 <= p <= 1.0, "p must be within [0,1]"
    draws = _rng(rng).random(n)
    return np.where(draws < p, 1, -1).astype(np.int8)


def get_random_hybrid(
    n: int,
    bounds: Tuple[float, float],
    p: float = 0.5,
    rng: Optional[np.random.Generator] = None,
) -> Hybrid:
    gen = _rng(rng)
    spins = get_random_configuration(n, p, gen)
    offsets = get_initial(n, bounds, gen)
    return realign_hybrid((spins, offsets))


def get_random_sphere(n: int, radius: float, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Point uniformly distributed on the sphere of the given radius."""
    x = _rng(rng).standard_normal(n)
    return radius * x / np.linalg.norm(x)


def get_random_cube(n: int, side: float, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    return side * _rng(rng).random(n)


def flip_configuration(conf: np.ndarray, flips: Sequence[int]) -> np.ndarray:
    """Flip conf in place at the given positions and return it."""
    conf[np.asarray(flips, dtype=np.int64)] *= -1
    return conf


def number_to_conf(number: int, length: int) -> np.ndarray:
    """The `number`-th ±1 configuration: binary digits, most significant first."""
    assert 0 <= number < 2 ** length, "number out of range for this length"
    bits = [(number >> (length - 1 - i)) & 1 for i in range(length)]
    return (2 * np.asarray(bits, dtype=np.int8) - 1).astype(np.int8)


def conf_to_number(conf: Sequence[int]) -> int:
    """Inverse of number_to_conf."""
    out = 0
    for s in conf:
        out = (out << 1) | (1 if s > 0 else 0)
    return out
