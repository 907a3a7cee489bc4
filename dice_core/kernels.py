"""Periodic coupling kernels driving the relaxation dynamics.

Every kernel is a function of the pairwise difference folded into [-2, 2)
(period 4). Forces are odd, vanish at 0 and, by periodicity plus oddness, at
the period boundary ±2. Potentials describe the relaxed cut contribution of a
single edge: P(0) = 0 for an uncut edge and P(±2) = 1 for a cut one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict

import numpy as np

from .interfaces import CouplingKernel, Real

__all__ = [
    "fold",
    "SineKernel",
    "TriangularKernel",
    "SquareKernel",
    "PiecewiseKernel",
    "SkewTriangularKernel",
    "SquarishKernel",
    "KERNELS",
    "get_kernel",
]

HALF_PI = np.pi / 2.0


def fold(v: Real) -> np.ndarray:
    """Fold values into the canonical period [-2, 2)."""
    return np.mod(np.asarray(v, dtype=float) + 2.0, 4.0) - 2.0


def _out(values: np.ndarray) -> Real:
    if values.ndim == 0:
        return float(values)
    return values


@dataclass(frozen=True)
class _PeriodicKernel(CouplingKernel):
    """Shared evaluation: shape() receives the folded difference."""

    name: str = "periodic"

    def shape(self, u: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def __call__(self, v1: Real, v2: Real) -> Real:
        u = fold(np.asarray(v1, dtype=float) - np.asarray(v2, dtype=float))
        return _out(self.shape(u))

    def local(self, v: Real) -> Real:
        arr = np.asarray(v, dtype=float)
        return self(arr, -arr)


@dataclass(frozen=True)
class SineKernel(_PeriodicKernel):
    """Smooth sinusoidal coupling sin(πv/2)."""

    name: str = "sine"

    def shape(self, u: np.ndarray) -> np.ndarray:
        return np.sin(HALF_PI * u)

    def potential(self, v: Real) -> Real:
        u = fold(v)
        return _out(0.5 * (1.0 - np.cos(HALF_PI * u)))


@dataclass(frozen=True)
class TriangularKernel(_PeriodicKernel):
    """Piecewise-linear triangle wave peaking at ±1."""

    name: str = "triangular"

    def shape(self, u: np.ndarray) -> np.ndarray:
        au = np.abs(u)
        return np.where(au <= 1.0, u, np.sign(u) * (2.0 - au))

    def potential(self, v: Real) -> Real:
        au = np.abs(fold(v))
        return _out(np.where(au <= 1.0, 0.5 * au * au, 1.0 - 0.5 * (2.0 - au) ** 2))


@dataclass(frozen=True)
class SquareKernel(_PeriodicKernel):
    """Hard square wave sign(sin(πv/2)); zero at 0 and at ±2."""

    name: str = "square"

    def shape(self, u: np.ndarray) -> np.ndarray:
        return np.where(u == -2.0, 0.0, np.sign(u))

    def potential(self, v: Real) -> Real:
        return _out(0.5 * np.abs(fold(v)))


@dataclass(frozen=True)
class PiecewiseKernel(_PeriodicKernel):
    """Two-level step: 0.5 - delta below |v| = 1, 0.5 + delta above."""

    name: str = "piecewise"
    delta: float = 0.1

    def shape(self, u: np.ndarray) -> np.ndarray:
        au = np.abs(u)
        out = np.sign(u) * (0.5 + self.delta * np.sign(au - 1.0))
        return np.where(u == -2.0, 0.0, out)

    def potential(self, v: Real) -> Real:
        au = np.abs(fold(v))
        low = 0.5 - self.delta
        high = 0.5 + self.delta
        return _out(np.where(au <= 1.0, low * au, low + high * (au - 1.0)))


@dataclass(frozen=True)
class SkewTriangularKernel(_PeriodicKernel):
    """Triangle wave with its peak shifted to |v| = width (default 1.1)."""

    name: str = "skew_triangular"
    width: float = 1.1

    def shape(self, u: np.ndarray) -> np.ndarray:
        assert 0.0 < self.width < 2.0, "width must lie in (0, 2)"
        au = np.abs(u)
        rise = au / self.width
        fall = (2.0 - au) / (2.0 - self.width)
        return np.sign(u) * np.where(au <= self.width, rise, fall)

    def potential(self, v: Real) -> Real:
        w = self.width
        au = np.abs(fold(v))
        inner = au * au / (2.0 * w)
        outer = 0.5 * w + ((2.0 - w) ** 2 - (2.0 - au) ** 2) / (2.0 * (2.0 - w))
        return _out(np.where(au <= w, inner, outer))


@dataclass(frozen=True)
class SquarishKernel(_PeriodicKernel):
    """Soft saturating square: tanh(k · triangular(v))."""

    name: str = "squarish"
    k: float = 10.0

    def shape(self, u: np.ndarray) -> np.ndarray:
        return np.tanh(self.k * TriangularKernel().shape(u))


KERNELS: Dict[str, Callable[..., CouplingKernel]] = {
    "sine": SineKernel,
    "triangular": TriangularKernel,
    "square": SquareKernel,
    "piecewise": PiecewiseKernel,
    "skew_triangular": SkewTriangularKernel,
    "squarish": SquarishKernel,
}


def get_kernel(kernel: str | CouplingKernel, **params: float) -> CouplingKernel:
    """Resolve a kernel name (or pass through a kernel instance) once."""
    if isinstance(kernel, str):
        factory = KERNELS.get(kernel)
        if factory is None:
            raise ValueError(f"Unknown coupling kernel: {kernel!r}; expected one of {sorted(KERNELS)}")
        return factory(**params)
    if params:
        raise ValueError("Kernel parameters apply only when selecting a kernel by name")
    if not isinstance(kernel, CouplingKernel):
        raise TypeError(f"Not a coupling kernel: {kernel!r}")
    return kernel
